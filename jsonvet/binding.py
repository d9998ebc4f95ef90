"""Validate HTTP request bodies and query strings against validators."""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Sequence

from fastapi import HTTPException, Request
from starlette.datastructures import QueryParams

from .i18n import Translator, translator_for_accept_language
from .validation import properties_repo
from .validation.context import ValidatorContext
from .validation.property_validator import PropertyValidator
from .validation.types import JsonType
from .validation.validator import DecodedResult, Validator
from .validation.violation import (
    CODE_INVALID_QUERY_PARAM,
    CODE_MULTIPLE_QUERY_VALUES,
    CODE_REQUEST_BODY_EMPTY,
    MSG_INVALID_QUERY_PARAM,
    MSG_MULTIPLE_QUERY_VALUES,
    MSG_REQUEST_BODY_EMPTY,
    Violation,
)

LOGGER = logging.getLogger(__name__)

_TRUE = {"true", "1", "yes", "on", ""}
_FALSE = {"false", "0", "no", "off"}


def request_translator(request: Request) -> Translator:
    return translator_for_accept_language(request.headers.get("accept-language"))


async def validate_request(
    request: Request, validator: Validator, *conditions: str, translator: Translator | None = None
) -> DecodedResult:
    """Read and validate a request body."""
    translator = translator or request_translator(request)
    body = await request.body()
    if not body.strip():
        if validator.allow_null_json:
            return DecodedResult(True, [], None)
        ctx = validator.new_context(None, conditions, translator)
        ctx.add_violation_for_current(ctx.translate(MSG_REQUEST_BODY_EMPTY), CODE_REQUEST_BODY_EMPTY, bad_request=True)
        return DecodedResult(False, ctx.violations, None)
    return validator.validate_string(body, *conditions, translator=translator)


# ------------------------------------------------------------------
# Query strings
# ------------------------------------------------------------------
def _convert(raw: str, rules: PropertyValidator, use_number: bool) -> Any:
    """Convert one query value by the property's type; raises ValueError."""
    if rules.type is JsonType.INTEGER:
        return int(raw)
    if rules.type is JsonType.NUMBER:
        try:
            return Decimal(raw) if use_number else float(raw)
        except InvalidOperation as exc:
            raise ValueError(raw) from exc
    if rules.type is JsonType.BOOLEAN:
        token = raw.strip().lower()
        if token in _TRUE:
            return True
        if token in _FALSE:
            return False
        raise ValueError(raw)
    if rules.type in (JsonType.OBJECT, JsonType.ARRAY):
        raise ValueError(raw)
    return raw


def _rules_for(validator: Validator, name: str) -> PropertyValidator | None:
    if name not in validator.properties:
        return None
    rules = validator.properties[name]
    return rules if rules is not None else properties_repo.get(name)


def query_to_object(params: QueryParams, validator: Validator, ctx: ValidatorContext) -> Dict[str, Any]:
    """Turn query parameters into an object typed per the validator's properties.

    Conversion problems are reported as bad-request violations on ``ctx``.
    """
    obj: Dict[str, Any] = {}
    for name in dict.fromkeys(params.keys()):
        values: List[str] = params.getlist(name)
        rules = _rules_for(validator, name)
        if rules is None or rules.type is JsonType.ANY:
            obj[name] = values[0] if len(values) == 1 else values
            continue
        if rules.type is JsonType.ARRAY:
            obj[name] = values
            continue
        if len(values) > 1:
            ctx.add_violation_for_property(
                name, ctx.translate(MSG_MULTIPLE_QUERY_VALUES), CODE_MULTIPLE_QUERY_VALUES, bad_request=True
            )
            continue
        try:
            obj[name] = _convert(values[0], rules, validator.use_number)
        except ValueError:
            LOGGER.debug("Query parameter %r has invalid %s value %r", name, rules.type.token, values[0])
            ctx.add_violation_for_property(
                name, ctx.translate(MSG_INVALID_QUERY_PARAM), CODE_INVALID_QUERY_PARAM, bad_request=True
            )
    return obj


def validate_query(
    params: QueryParams, validator: Validator, *conditions: str, translator: Translator | None = None
) -> DecodedResult:
    ctx = validator.new_context(None, conditions, translator)
    obj = query_to_object(params, validator, ctx)
    if not ctx.ok:
        return DecodedResult(False, ctx.violations, obj)
    ok, violations = validator.validate(obj, *conditions, translator=translator)
    return DecodedResult(ok, violations, obj)


# ------------------------------------------------------------------
# FastAPI dependencies
# ------------------------------------------------------------------
def violations_exception(violations: Sequence[Violation]) -> HTTPException:
    status = 400 if any(v.bad_request for v in violations) else 422
    return HTTPException(
        status_code=status,
        detail={"message": "Request invalid", "violations": [v.to_dict() for v in violations]},
    )


class ValidatedBody:
    """Dependency yielding the validated, decoded request body."""

    def __init__(self, validator: Validator, *conditions: str):
        self.validator = validator
        self.conditions = conditions

    async def __call__(self, request: Request) -> Any:
        result = await validate_request(request, self.validator, *self.conditions)
        if not result.ok:
            raise violations_exception(result.violations)
        return result.value


class ValidatedQuery:
    """Dependency yielding the validated, type-converted query parameters."""

    def __init__(self, validator: Validator, *conditions: str):
        self.validator = validator
        self.conditions = conditions

    async def __call__(self, request: Request) -> Dict[str, Any]:
        result = validate_query(
            request.query_params, self.validator, *self.conditions, translator=request_translator(request)
        )
        if not result.ok:
            raise violations_exception(result.violations)
        return result.value


__all__ = [
    "ValidatedBody",
    "ValidatedQuery",
    "query_to_object",
    "request_translator",
    "validate_query",
    "validate_request",
    "violations_exception",
]
