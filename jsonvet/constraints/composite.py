"""Composite constraints the engine and serializer know about directly."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..errors import SchemaError
from ..i18n import Translator
from ..validation.context import ValidatorContext
from ..validation.expression import OthersExpr, parse_expression
from ..validation.violation import CODE_CONSTRAINT_FAILED
from .base import CheckResult, Constraint

FMT_SET_ALL_OF = "Constraint set must pass all of {0} undisclosed validations"
FMT_SET_ONE_OF = "Constraint set must pass one of {0} undisclosed validations"


@dataclass
class ConstraintSet(Constraint):
    """Group of constraints checked as one.

    All-of (the default) fails on the first failing member; ``one_of`` passes
    when any member passes and otherwise reports the members' messages joined.
    ``message`` replaces whatever the members reported.
    """

    constraints: List[Constraint] = field(default_factory=list)
    one_of: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not self.constraints:
            return True, ""
        if self.one_of:
            return self._check_one_of(value, ctx)
        for constraint in self.constraints:
            ok, msg = constraint.check(value, ctx)
            if not ok:
                self.apply_stops(ctx)
                return False, self._failure_message(ctx, [msg])
        return True, ""

    def _check_one_of(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        # members of a one-of must not short-circuit the evaluation themselves
        continue_all, continue_property = ctx.continue_all, ctx.continue_property
        messages: List[str] = []
        try:
            for constraint in self.constraints:
                ok, msg = constraint.check(value, ctx)
                if ok:
                    return True, ""
                messages.append(msg)
        finally:
            ctx.continue_all, ctx.continue_property = continue_all, continue_property
        self.apply_stops(ctx)
        return False, self._failure_message(ctx, messages)

    def _failure_message(self, ctx: ValidatorContext, messages: List[str]) -> str:
        if self.message:
            return ctx.translator.translate_message(self.message)
        joined = "; ".join(msg for msg in messages if msg)
        return joined or self.default_message(ctx.translator)

    def default_message(self, translator: Translator) -> str:
        fmt = FMT_SET_ONE_OF if self.one_of else FMT_SET_ALL_OF
        return translator.translate_format(fmt, len(self.constraints))


@dataclass
class ConditionalConstraint(Constraint):
    """Checks ``constraint`` only when its gating holds.

    Gating is every token of ``when`` being set and, if given, the ``others``
    expression evaluating true against the current object.
    """

    constraint: Optional[Constraint] = None
    when: List[str] = field(default_factory=list)
    others: Optional[OthersExpr] = None

    def __post_init__(self) -> None:
        if isinstance(self.others, str):
            self.others = parse_expression(self.others) if self.others.strip() else None

    @property
    def violation_code(self) -> int:  # type: ignore[override]
        if self.constraint is None:
            return CODE_CONSTRAINT_FAILED
        return self.constraint.violation_code

    def gated(self, ctx: ValidatorContext) -> bool:
        if self.when and not ctx.meets_when_conditions(self.when):
            return False
        if self.others is not None:
            current, ancestry = ctx.current_object()
            if not self.others.evaluate(current, ancestry, ctx):
                return False
        return True

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if self.constraint is None or not self.gated(ctx):
            return True, ""
        return self.constraint.check(value, ctx)

    def default_message(self, translator: Translator) -> str:
        if self.constraint is None:
            return ""
        return self.constraint.default_message(translator)


def _parse_position_token(when: str) -> tuple[bool, str, int]:
    negated = when.startswith("!")
    token = when[1:] if negated else when
    if token in ("", "first", "last"):
        return negated, token, 0
    kind = token[0] if token[0] in "%<>" else "="
    number = token[1:] if kind != "=" else token
    if not number.isdigit():
        raise SchemaError(f"invalid array position condition '{when}'")
    if kind == "%" and int(number) == 0:
        raise SchemaError(f"invalid array position condition '{when}'")
    return negated, kind, int(number)


@dataclass
class ArrayConditionalConstraint(Constraint):
    """Checks ``constraint`` only for matching array element positions.

    ``when`` is ``first``, ``last``, ``%N`` (1-based position divisible by N),
    ``>N``, ``<N`` or an exact 0-based index ``N``; a leading ``!`` negates.
    ``ancestry`` picks an outer array (0 is the nearest element frame).
    Outside any array the constraint is skipped.
    """

    when: str = ""
    ancestry: int = 0
    constraint: Optional[Constraint] = None

    def __post_init__(self) -> None:
        _parse_position_token(self.when)

    @property
    def violation_code(self) -> int:  # type: ignore[override]
        if self.constraint is None:
            return CODE_CONSTRAINT_FAILED
        return self.constraint.violation_code

    def position_holds(self, index: int, length: int) -> bool:
        negated, kind, number = _parse_position_token(self.when)
        if kind == "":
            result = True
        elif kind == "first":
            result = index == 0
        elif kind == "last":
            result = index == length - 1
        elif kind == "%":
            result = (index + 1) % number == 0
        elif kind == ">":
            result = index > number
        elif kind == "<":
            result = index < number
        else:
            result = index == number
        return result != negated

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if self.constraint is None:
            return True, ""
        frame = ctx.array_frame(self.ancestry)
        if frame is None or not self.position_holds(frame.index, frame.length):
            return True, ""
        return self.constraint.check(value, ctx)

    def default_message(self, translator: Translator) -> str:
        if self.constraint is None:
            return ""
        return self.constraint.default_message(translator)


__all__ = ["ConstraintSet", "ConditionalConstraint", "ArrayConditionalConstraint"]
