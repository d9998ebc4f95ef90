"""Schema registry endpoints."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from jsonvet.errors import JsonVetError
from jsonvet.schemas import SchemaEntry, resolve_schema, schema_summaries
from jsonvet.serialization import validator_to_dict
from jsonvet.validation.openapi import validator_to_openapi

router = APIRouter(tags=["schemas"])


def _lookup(schema_id: str) -> SchemaEntry:
    try:
        return resolve_schema(schema_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc


@router.get("/schemas")
def list_schemas():
    """Return lightweight schema summaries."""
    return schema_summaries()


@router.get("/schemas/{schema_id}")
def get_schema(schema_id: str) -> Dict[str, Any]:
    """Return the serialized form of a named schema."""
    entry = _lookup(schema_id)
    try:
        return {"id": entry.id, "schema": validator_to_dict(entry.validator)}
    except JsonVetError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.get("/schemas/{schema_id}/openapi")
def get_schema_openapi(schema_id: str) -> Dict[str, Any]:
    entry = _lookup(schema_id)
    try:
        return validator_to_openapi(entry.validator)
    except JsonVetError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
