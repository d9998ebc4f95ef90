"""Load named schemas and expose lookup helpers."""
from __future__ import annotations

import json
import logging
import threading
from difflib import get_close_matches
from pathlib import Path
from typing import Any, Dict, List, NamedTuple

import yaml

from ..errors import SchemaError
from ..serialization import validator_from_dict
from ..settings import settings
from ..validation.validator import Validator

LOGGER = logging.getLogger(__name__)

SchemaSummary = Dict[str, object]

SCHEMA_SUFFIXES = (".json", ".yaml", ".yml")


class SchemaEntry(NamedTuple):
    id: str
    validator: Validator


_lock = threading.Lock()
_by_id: Dict[str, Validator] = {}
_by_id_lower: Dict[str, str] = {}


def _load_document(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def _load_schemas(directory: Path) -> Dict[str, Validator]:
    schemas: Dict[str, Validator] = {}
    if not directory.is_dir():
        LOGGER.warning("Schema directory %s does not exist", directory)
        return schemas
    for path in sorted(directory.iterdir()):
        if path.suffix not in SCHEMA_SUFFIXES or path.name.startswith("_"):
            continue
        try:
            schemas[path.stem] = validator_from_dict(_load_document(path))
        except (SchemaError, ValueError, yaml.YAMLError) as exc:
            raise SchemaError(f"schema file '{path.name}' is invalid: {exc}") from exc
    return schemas


def _build_indexes(schemas: Dict[str, Validator]) -> None:
    global _by_id, _by_id_lower
    _by_id = dict(schemas)
    _by_id_lower = {key.lower(): key for key in _by_id}


def reload_registry(directory: Path | None = None) -> None:
    """Reload schemas from disk, replacing anything registered at runtime."""
    schemas = _load_schemas(directory or settings.SCHEMAS_DIR)
    with _lock:
        _build_indexes(schemas)
    LOGGER.info("Loaded %d schemas", len(schemas))


def register_schema(schema_id: str, validator: Validator) -> None:
    if not schema_id:
        raise ValueError("Schema identifier cannot be empty")
    with _lock:
        schemas = dict(_by_id)
        schemas[schema_id] = validator
        _build_indexes(schemas)


def schema_ids() -> List[str]:
    with _lock:
        return sorted(_by_id)


def schema_summaries() -> List[SchemaSummary]:
    with _lock:
        items = sorted(_by_id.items())
    summaries: List[SchemaSummary] = []
    for schema_id, validator in items:
        info = validator.oas_info
        summaries.append(
            {
                "id": schema_id,
                "title": info.title if info else "",
                "description": info.description if info else "",
                "properties": sorted(validator.properties),
                "allowArray": validator.allow_array,
            }
        )
    return summaries


def resolve_schema(name_or_id: str) -> SchemaEntry:
    if not name_or_id:
        raise KeyError("Schema identifier cannot be empty")
    token = name_or_id.strip().lower()
    with _lock:
        direct = _by_id_lower.get(token)
        if direct is None:
            matches = get_close_matches(token, list(_by_id_lower), n=1, cutoff=0.8)
            direct = _by_id_lower[matches[0]] if matches else None
        if direct is not None:
            return SchemaEntry(direct, _by_id[direct])
    raise KeyError(f"Schema '{name_or_id}' was not found in the registry")


# Initial load during module import.
reload_registry()

__all__ = [
    "SchemaEntry",
    "SchemaSummary",
    "register_schema",
    "reload_registry",
    "resolve_schema",
    "schema_ids",
    "schema_summaries",
]
