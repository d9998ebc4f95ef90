"""OpenAPI (JSON schema) documents generated from validators."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from . import properties_repo
from .property_validator import OasInfo, PropertyValidator
from .types import JsonType
from .validator import Validator


def _apply_oas(schema: Dict[str, Any], info: Optional[OasInfo]) -> None:
    if info is None:
        return
    for key in ("description", "title", "format", "example"):
        value = getattr(info, key)
        if value:
            schema[key] = value
    if info.deprecated:
        schema["deprecated"] = True


def _object_schema(validator: Validator) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object"}
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for name, rules in properties_repo.fetch(validator.properties).items():
        properties[name] = property_to_openapi(rules)
        if rules.mandatory and not rules.mandatory_when and not rules.when_conditions:
            required.append(name)
    schema["properties"] = properties
    if required:
        schema["required"] = sorted(required)
    if not validator.ignore_unknown_properties and not validator.conditional_variants:
        schema["additionalProperties"] = False
    return schema


def validator_to_openapi(validator: Validator) -> Dict[str, Any]:
    """Describe ``validator`` as an OpenAPI schema object."""
    object_schema = _object_schema(validator)
    if validator.allow_array and validator.disallow_object:
        schema: Dict[str, Any] = {"type": "array", "items": object_schema}
    elif validator.allow_array:
        schema = {"oneOf": [object_schema, {"type": "array", "items": object_schema}]}
    else:
        schema = object_schema
    _apply_oas(schema, validator.oas_info)
    return schema


def property_to_openapi(rules: PropertyValidator) -> Dict[str, Any]:
    if rules.object_validator is not None:
        schema = validator_to_openapi(rules.object_validator)
    elif rules.type is JsonType.ANY:
        schema = {}
    else:
        schema = {"type": rules.type.token}
    if not rules.not_null and schema:
        schema["nullable"] = True
    _apply_oas(schema, rules.oas_info)
    return schema


__all__ = ["property_to_openapi", "validator_to_openapi"]
