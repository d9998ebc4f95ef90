"""Constraints that drive the condition set, plus other special-purpose constraints."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..i18n import Translator
from ..validation import engine
from ..validation.context import RESERVED_PREFIX, ConditionTarget, ValidatorContext
from ..validation.validator import Validator
from ..validation.violation import CODE_NULL_NOT_ALLOWED, MSG_NULL_NOT_ALLOWED
from .base import CheckResult, Constraint

LOGGER = logging.getLogger(__name__)

MSG_FAILURE = "Validation failed"


def _set_token(ctx: ValidatorContext, token: str, target: ConditionTarget) -> None:
    if token.lstrip("!").startswith(RESERVED_PREFIX):
        LOGGER.debug("Ignoring reserved condition token %r derived from data", token)
        return
    ctx.set_condition(token, target)


def _token_from(value: Any, prefix: str, mapping: Dict[str, str]) -> str | None:
    if not isinstance(value, str):
        return None
    return prefix + mapping.get(value, value)


@dataclass
class SetConditionFrom(Constraint):
    """Sets a condition named after the (string) value being checked.

    ``mapping`` translates values to tokens before ``prefix`` is applied.
    Never fails.
    """

    target: ConditionTarget = ConditionTarget.CURRENT
    prefix: str = ""
    mapping: Dict[str, str] = field(default_factory=dict)

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        token = _token_from(value, self.prefix, self.mapping)
        if token:
            _set_token(ctx, token, self.target)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return ""


@dataclass
class SetConditionIf(Constraint):
    """Checks ``constraint`` and sets ``set_ok`` or ``set_fail`` by outcome. Never fails."""

    constraint: Optional[Constraint] = None
    set_ok: str = ""
    set_fail: str = ""
    target: ConditionTarget = ConditionTarget.CURRENT

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if self.constraint is None:
            return True, ""
        ok, _ = self.constraint.check(value, ctx)
        token = self.set_ok if ok else self.set_fail
        if token:
            _set_token(ctx, token, self.target)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return ""


@dataclass
class SetConditionProperty(Constraint):
    """Object-level: sets a condition from the value of one of the object's properties."""

    property_name: str = ""
    target: ConditionTarget = ConditionTarget.CURRENT
    prefix: str = ""
    mapping: Dict[str, str] = field(default_factory=dict)

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, dict):
            token = _token_from(value.get(self.property_name), self.prefix, self.mapping)
            if token:
                _set_token(ctx, token, self.target)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return ""


@dataclass
class ClearCondition(Constraint):
    condition: str = ""
    target: ConditionTarget = ConditionTarget.CURRENT

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if self.condition and not self.condition.startswith(RESERVED_PREFIX):
            ctx.clear_condition(self.condition, self.target)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return ""


@dataclass
class FailingConstraint(Constraint):
    """Always fails."""

    message: str = ""
    stop: bool = False
    stop_all: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        return self.fail(ctx)

    def default_message(self, translator: Translator) -> str:
        return translator.translate_message(MSG_FAILURE)


@dataclass
class FailWhen(Constraint):
    """Fails when every token of ``conditions`` holds."""

    conditions: List[str] = field(default_factory=list)
    message: str = ""
    stop: bool = False
    stop_all: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if self.conditions and ctx.meets_when_conditions(self.conditions):
            return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return translator.translate_message(MSG_FAILURE)


@dataclass
class VariablePropertyConstraint(Constraint):
    """Object-level: validates every property of an object with unknown names.

    Each property name is checked against ``name_constraints`` and each value
    against ``object_validator``.  Violations are reported per property, so
    the constraint itself always passes.  Pair it with
    ``ignore_unknown_properties``.
    """

    name_constraints: List[Constraint] = field(default_factory=list)
    object_validator: Optional[Validator] = None
    allow_null: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, dict):
            return True, ""
        for name, item in value.items():
            ctx.push_property(name, item)
            try:
                self._check_entry(name, item, ctx)
            finally:
                ctx.pop()
            if not ctx.continue_all:
                break
        return True, ""

    def _check_entry(self, name: str, item: Any, ctx: ValidatorContext) -> None:
        for constraint in self.name_constraints:
            ok, message = constraint.check(name, ctx)
            if not ok:
                ctx.add_violation_for_current(message, constraint.violation_code, constraint=constraint)
                return
        if item is None:
            if not self.allow_null:
                ctx.add_violation_for_current(ctx.translate(MSG_NULL_NOT_ALLOWED), CODE_NULL_NOT_ALLOWED)
            return
        if self.object_validator is not None:
            engine.check_object_validation(item, self.object_validator, ctx)

    def default_message(self, translator: Translator) -> str:
        return ""


__all__ = [
    "SetConditionFrom",
    "SetConditionIf",
    "SetConditionProperty",
    "ClearCondition",
    "FailingConstraint",
    "FailWhen",
    "VariablePropertyConstraint",
]
