"""API routers."""
from __future__ import annotations

from . import schemas, validate

__all__ = ["schemas", "validate"]
