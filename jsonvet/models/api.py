"""Pydantic models shared by the HTTP routers."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..validation.violation import Violation


class ViolationOut(BaseModel):
    """One violation as reported over HTTP."""

    model_config = ConfigDict(populate_by_name=True)

    property: str = Field(..., description="Last property name on the path")
    path: str = Field(..., description="Full path, e.g. items[0].name")
    message: str
    code: int
    bad_request: bool = Field(default=False, alias="badRequest")

    @classmethod
    def from_violation(cls, violation: Violation) -> "ViolationOut":
        return cls(
            property=violation.property,
            path=violation.path,
            message=violation.message,
            code=violation.code,
            bad_request=violation.bad_request,
        )


class ValidationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    schema_id: Optional[str] = Field(default=None, alias="schemaId", description="Named schema used, if any")
    violations: List[ViolationOut] = Field(default_factory=list)

    @classmethod
    def build(cls, ok: bool, violations: Sequence[Violation], schema_id: str | None = None) -> "ValidationResponse":
        return cls(ok=ok, schema_id=schema_id, violations=[ViolationOut.from_violation(v) for v in violations])


class AdHocValidationRequest(BaseModel):
    """Serialized validator plus the document to check against it."""

    model_config = ConfigDict(populate_by_name=True)

    validator_schema: Dict[str, Any] = Field(..., alias="schema", description="Serialized validator")
    document: Any = Field(default=None, description="Decoded JSON document")
    conditions: List[str] = Field(default_factory=list, description="Initial condition tokens")


class ExpressionRequest(BaseModel):
    expression: str


class ExpressionResponse(BaseModel):
    ok: bool
    expression: Optional[str] = Field(default=None, description="Normalised printed form")
    error: Optional[str] = None
    position: Optional[int] = Field(default=None, description="0-based error position")


__all__ = [
    "AdHocValidationRequest",
    "ExpressionRequest",
    "ExpressionResponse",
    "ValidationResponse",
    "ViolationOut",
]
