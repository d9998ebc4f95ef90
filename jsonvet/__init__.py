"""Declarative validation of decoded JSON documents."""
from __future__ import annotations

from .errors import (
    ConstraintExistsError,
    ExpressionError,
    JsonVetError,
    NotSerializableError,
    PropertyNotFoundError,
    ReservedConditionError,
    SchemaError,
    UnknownConstraintError,
)
from .validation import (
    ConditionalVariant,
    ConditionTarget,
    JsonType,
    PropertyValidator,
    ValidationResult,
    Validator,
    ValidatorContext,
    Violation,
    parse_expression,
)
from .validation import properties_repo
from .constraints import register_constraint
from .serialization import from_json, to_json, validator_from_dict, validator_to_dict

__version__ = "0.1.0"

__all__ = [
    "ConditionTarget",
    "ConditionalVariant",
    "ConstraintExistsError",
    "ExpressionError",
    "JsonType",
    "JsonVetError",
    "NotSerializableError",
    "PropertyNotFoundError",
    "PropertyValidator",
    "ReservedConditionError",
    "SchemaError",
    "UnknownConstraintError",
    "ValidationResult",
    "Validator",
    "ValidatorContext",
    "Violation",
    "from_json",
    "parse_expression",
    "properties_repo",
    "register_constraint",
    "to_json",
    "validator_from_dict",
    "validator_to_dict",
]
