"""Constraints backed by arbitrary Python callables."""
from __future__ import annotations

from typing import Any, Callable, Tuple, Union

from ..i18n import Translator
from ..validation.context import ValidatorContext
from .base import CheckResult, Constraint

CheckFunc = Callable[[Any, ValidatorContext], Union[bool, Tuple[bool, str]]]


class CustomConstraint(Constraint):
    """Wraps ``func(value, ctx)`` returning a bool or ``(bool, message)``.

    Holds code, so it cannot be written out by the serializer.
    """

    serializable = False

    def __init__(self, func: CheckFunc, message: str = "", stop: bool = False):
        self.func = func
        self.message = message
        self.stop = stop

    def __repr__(self) -> str:
        return f"CustomConstraint({getattr(self.func, '__name__', self.func)!r})"

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        outcome = self.func(value, ctx)
        if isinstance(outcome, tuple):
            ok, message = outcome
        else:
            ok, message = bool(outcome), ""
        if ok:
            return True, ""
        self.apply_stops(ctx)
        return False, ctx.translator.translate_message(message) if message else self.message_for(ctx)

    def default_message(self, translator: Translator) -> str:
        return translator.translate_message("Validation failed")


__all__ = ["CheckFunc", "CustomConstraint"]
