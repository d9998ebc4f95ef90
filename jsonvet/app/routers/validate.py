"""Document validation endpoints.

- ``POST /api/validate/{schema_id}`` checks the raw request body against a
  named schema from the registry.
- ``POST /api/validate`` takes a serialized validator and a document.
- ``POST /api/expressions/parse`` parses an others-expression.

Violation messages follow the request's Accept-Language header.
"""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from jsonvet.binding import request_translator, validate_request
from jsonvet.errors import ExpressionError, JsonVetError
from jsonvet.models.api import (
    AdHocValidationRequest,
    ExpressionRequest,
    ExpressionResponse,
    ValidationResponse,
)
from jsonvet.observability import log_validation
from jsonvet.schemas import resolve_schema
from jsonvet.serialization import validator_from_dict
from jsonvet.validation.expression import parse_expression

router = APIRouter(tags=["validate"])


def _respond(response: ValidationResponse) -> JSONResponse:
    status = 400 if any(v.bad_request for v in response.violations) else 200
    return JSONResponse(status_code=status, content=response.model_dump(by_alias=True))


@router.post("/validate/{schema_id}", response_model=ValidationResponse)
async def validate_named(schema_id: str, request: Request):
    try:
        entry = resolve_schema(schema_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc

    translator = request_translator(request)
    conditions = request.query_params.getlist("condition")
    try:
        result = await validate_request(request, entry.validator, *conditions, translator=translator)
    except JsonVetError as exc:
        # Reserved condition tokens, or a strict properties repository miss.
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    log_validation(entry.id, result.ok, result.violations, translator.language)
    return _respond(ValidationResponse.build(result.ok, result.violations, entry.id))


@router.post("/validate", response_model=ValidationResponse)
def validate_adhoc(payload: AdHocValidationRequest, request: Request):
    """Validate ``document`` against the serialized validator in ``schema``."""
    try:
        validator = validator_from_dict(payload.validator_schema)
    except JsonVetError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    translator = request_translator(request)
    try:
        ok, violations = validator.validate(payload.document, *payload.conditions, translator=translator)
    except JsonVetError as exc:
        # Structural problems found while evaluating, e.g. a repository miss.
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    log_validation("<ad hoc>", ok, violations, translator.language)
    return _respond(ValidationResponse.build(ok, violations))


@router.post("/expressions/parse", response_model=ExpressionResponse)
def parse_others_expression(payload: ExpressionRequest):
    try:
        expr = parse_expression(payload.expression)
    except ExpressionError as exc:
        return JSONResponse(
            status_code=400,
            content=ExpressionResponse(ok=False, error=str(exc), position=exc.position).model_dump(),
        )
    return ExpressionResponse(ok=True, expression=str(expr))
