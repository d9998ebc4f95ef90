"""Named schema registry."""
from __future__ import annotations

from .registry import (
    SchemaEntry,
    SchemaSummary,
    register_schema,
    reload_registry,
    resolve_schema,
    schema_ids,
    schema_summaries,
)

__all__ = [
    "SchemaEntry",
    "SchemaSummary",
    "register_schema",
    "reload_registry",
    "resolve_schema",
    "schema_ids",
    "schema_summaries",
]
