"""Schema model, evaluation context and engine."""
from __future__ import annotations

from .context import ConditionTarget, ValidatorContext
from .expression import BooleanOperator, OtherGrouping, OtherProperty, OthersExpr, parse_expression
from .property_validator import OasInfo, PropertyValidator
from .types import JsonType, check_value_type
from .validator import ConditionalVariant, DecodedResult, ValidationResult, Validator
from .violation import Violation

__all__ = [
    "BooleanOperator",
    "ConditionTarget",
    "ConditionalVariant",
    "DecodedResult",
    "JsonType",
    "OasInfo",
    "OtherGrouping",
    "OtherProperty",
    "OthersExpr",
    "PropertyValidator",
    "ValidationResult",
    "Validator",
    "ValidatorContext",
    "Violation",
    "check_value_type",
    "parse_expression",
]
