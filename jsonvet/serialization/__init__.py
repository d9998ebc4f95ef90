"""Serialized (JSON) form of validators."""
from __future__ import annotations

from .serializer import (
    constraint_from_dict,
    constraint_to_dict,
    from_json,
    property_validator_from_dict,
    property_validator_to_dict,
    to_json,
    validator_from_dict,
    validator_to_dict,
)

__all__ = [
    "constraint_from_dict",
    "constraint_to_dict",
    "from_json",
    "property_validator_from_dict",
    "property_validator_to_dict",
    "to_json",
    "validator_from_dict",
    "validator_to_dict",
]
