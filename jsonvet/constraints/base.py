"""Base class shared by every constraint."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Tuple

from ..i18n import Translator
from ..validation.context import ValidatorContext
from ..validation.violation import CODE_CONSTRAINT_FAILED

CheckResult = Tuple[bool, str]


class Constraint(ABC):
    """A value-like predicate checked against a property value or an object.

    Constraints are shared between clones of a schema and across parallel
    evaluations, so ``check`` must not mutate the constraint itself.
    Concrete constraints are dataclasses; their fields are what the
    serializer writes out.  Optional ``message``, ``stop`` and ``stop_all``
    fields are honoured by :meth:`fail`.
    """

    serializable: ClassVar[bool] = True
    violation_code: ClassVar[int] = CODE_CONSTRAINT_FAILED

    @abstractmethod
    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        """Return ``(passed, message)``; the message is only used on failure."""

    @abstractmethod
    def default_message(self, translator: Translator) -> str:
        """Translated message used when no ``message`` override is set."""

    @classmethod
    def constraint_name(cls) -> str:
        return cls.__name__

    def message_for(self, ctx: ValidatorContext) -> str:
        override = getattr(self, "message", "")
        if override:
            return ctx.translator.translate_message(override)
        return self.default_message(ctx.translator)

    def apply_stops(self, ctx: ValidatorContext) -> None:
        if getattr(self, "stop_all", False):
            ctx.stop()
        if getattr(self, "stop", False):
            ctx.cease_further()

    def fail(self, ctx: ValidatorContext) -> CheckResult:
        self.apply_stops(ctx)
        return False, self.message_for(ctx)


__all__ = ["CheckResult", "Constraint"]
