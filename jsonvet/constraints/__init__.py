"""Constraint library and registry."""
from .base import CheckResult, Constraint
from .common import (
    ArrayOf,
    ArrayUnique,
    GreaterThan,
    Length,
    LessThan,
    Maximum,
    Minimum,
    MultipleOf,
    Positive,
    Range,
    StringNotEmpty,
    StringPattern,
    StringValidToken,
    StringValidUnicodeNormalization,
    UnicodeForm,
)
from .composite import ArrayConditionalConstraint, ConditionalConstraint, ConstraintSet
from .conditions import (
    ClearCondition,
    FailingConstraint,
    FailWhen,
    SetConditionFrom,
    SetConditionIf,
    SetConditionProperty,
    VariablePropertyConstraint,
)
from .custom import CustomConstraint
from .registry import (
    clear_constraint_registry,
    get_registered_constraint,
    has_constraint,
    register_constraint,
    registered_constraint_names,
    reset_constraint_registry,
)

__all__ = [
    "CheckResult",
    "Constraint",
    "ArrayOf",
    "ArrayUnique",
    "GreaterThan",
    "Length",
    "LessThan",
    "Maximum",
    "Minimum",
    "MultipleOf",
    "Positive",
    "Range",
    "StringNotEmpty",
    "StringPattern",
    "StringValidToken",
    "StringValidUnicodeNormalization",
    "UnicodeForm",
    "ArrayConditionalConstraint",
    "ConditionalConstraint",
    "ConstraintSet",
    "ClearCondition",
    "FailingConstraint",
    "FailWhen",
    "SetConditionFrom",
    "SetConditionIf",
    "SetConditionProperty",
    "VariablePropertyConstraint",
    "CustomConstraint",
    "clear_constraint_registry",
    "get_registered_constraint",
    "has_constraint",
    "register_constraint",
    "registered_constraint_names",
    "reset_constraint_registry",
]
