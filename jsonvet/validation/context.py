"""Per-evaluation walker state: path, ancestry, condition scopes and violations."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, List, Set, Tuple

from ..errors import ReservedConditionError
from ..i18n import DEFAULT_TRANSLATOR, Translator
from ..settings import settings
from .violation import Violation

LOGGER = logging.getLogger(__name__)

SYNTHETIC_FIRST = "first"
SYNTHETIC_LAST = "last"
RESERVED_PREFIX = "%"


class ConditionTarget(Enum):
    """Which condition scopes a set/clear operation touches."""

    CURRENT = "current"
    PARENT = "parent"
    GLOBAL = "global"


@dataclass
class _Frame:
    name: str | None
    index: int | None
    value: Any
    path: str
    length: int = 0
    object_level: bool = False


def join_path(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


class ValidatorContext:
    """State carried through one evaluation.

    A context is owned by a single evaluation and must not be retained by
    constraints after they return.
    """

    def __init__(
        self,
        root: Any,
        *,
        translator: Translator | None = None,
        stop_on_first: bool = False,
        use_number: bool = False,
        max_violations: int | None = None,
        conditions: Iterable[str] = (),
    ):
        self.root = root
        self.ok = True
        self.violations: List[Violation] = []
        self.continue_all = True
        self.continue_property = True
        self.translator: Translator = translator or DEFAULT_TRANSLATOR
        self.stop_on_first = stop_on_first
        self.use_number = use_number
        self.max_violations = settings.MAX_VIOLATIONS if max_violations is None else max_violations
        self._frames: List[_Frame] = [_Frame(None, None, root, "")]
        self._scopes: List[Set[str]] = [set()]
        for token in conditions:
            self.set_condition(token)

    # ------------------------------------------------------------------
    # Violations and short-circuit flags
    # ------------------------------------------------------------------
    def add_violation(self, violation: Violation) -> None:
        if self.stop_on_first and self.violations:
            self.continue_all = False
            return
        self.violations.append(violation)
        self.ok = False
        if self.stop_on_first:
            self.continue_all = False
        elif self.max_violations and len(self.violations) >= self.max_violations:
            LOGGER.debug("Violation cap of %d reached at %r", self.max_violations, violation.path)
            self.continue_all = False

    def add_violation_for_current(
        self, message: str, code: int, *, bad_request: bool = False, constraint: Any = None
    ) -> None:
        self.add_violation(
            Violation(self.current_property, self.current_path, message, code, bad_request, constraint)
        )

    def add_violation_for_property(
        self, name: str, message: str, code: int, *, bad_request: bool = False
    ) -> None:
        self.add_violation(
            Violation(name, join_path(self.current_path, name), message, code, bad_request)
        )

    def add_violation_for_index(self, index: int, message: str, code: int) -> None:
        self.add_violation(Violation("", index_path(self.current_path, index), message, code))

    def translate(self, message: str) -> str:
        return self.translator.translate_message(message)

    def stop(self) -> None:
        """Stop the whole evaluation."""
        self.continue_all = False

    def cease_further(self) -> None:
        """Stop further checks on the current property (or object)."""
        self.continue_property = False

    def resume_property(self) -> None:
        self.continue_property = True

    # ------------------------------------------------------------------
    # Path and ancestry
    # ------------------------------------------------------------------
    def push_property(self, name: str, value: Any) -> None:
        self._frames.append(_Frame(name, None, value, join_path(self.current_path, name)))

    def push_index(self, index: int, value: Any, length: int) -> None:
        self._frames.append(_Frame(None, index, value, index_path(self.current_path, index), length))

    def pop(self) -> None:
        if len(self._frames) > 1:
            self._frames.pop()

    @contextmanager
    def object_level(self) -> Iterator[None]:
        """Mark the current value as the object under check for expressions."""
        frame = self._frames[-1]
        previous = frame.object_level
        frame.object_level = True
        try:
            yield
        finally:
            frame.object_level = previous

    @property
    def current_path(self) -> str:
        return self._frames[-1].path

    @property
    def current_property(self) -> str:
        return self._frames[-1].name or ""

    @property
    def current_value(self) -> Any:
        return self._frames[-1].value

    @property
    def depth(self) -> int:
        return len(self._frames) - 1

    def current_object(self) -> Tuple[Any, List[Any]]:
        """Return the object expressions apply to and its ancestry, nearest first."""
        frames = self._frames if self._frames[-1].object_level else self._frames[:-1]
        objects = [frame.value for frame in reversed(frames) if isinstance(frame.value, dict)]
        if not objects:
            return None, []
        return objects[0], objects[1:]

    def ancestry_values(self) -> List[Any]:
        return self.current_object()[1]

    def array_frame(self, ancestry: int = 0) -> _Frame | None:
        """The enclosing array element frame, ``ancestry`` array levels out."""
        seen = 0
        for frame in reversed(self._frames):
            if frame.index is None:
                continue
            if seen == ancestry:
                return frame
            seen += 1
        return None

    # ------------------------------------------------------------------
    # Conditions
    # ------------------------------------------------------------------
    def push_conditions(self) -> None:
        self._scopes.append(set(self._scopes[-1]))

    def pop_conditions(self) -> None:
        if len(self._scopes) > 1:
            self._scopes.pop()

    def _target_scopes(self, target: ConditionTarget) -> List[Set[str]]:
        if target is ConditionTarget.GLOBAL:
            return self._scopes
        if target is ConditionTarget.PARENT:
            return self._scopes[-2:]
        return self._scopes[-1:]

    def set_condition(self, token: str, target: ConditionTarget = ConditionTarget.CURRENT) -> None:
        """Set ``token``; a leading ``!`` clears it instead."""
        if token.startswith("!"):
            self.clear_condition(token[1:], target)
            return
        if not token:
            return
        _check_reserved(token)
        for scope in self._target_scopes(target):
            scope.add(token)

    def clear_condition(self, token: str, target: ConditionTarget = ConditionTarget.CURRENT) -> None:
        if not token:
            return
        _check_reserved(token)
        for scope in self._target_scopes(target):
            scope.discard(token)

    def is_condition(self, token: str) -> bool:
        if token == SYNTHETIC_FIRST or token == SYNTHETIC_LAST or token.startswith(RESERVED_PREFIX):
            synthetic = self._synthetic(token)
            if synthetic is not None:
                return synthetic
        return token in self._scopes[-1]

    def _synthetic(self, token: str) -> bool | None:
        frame = self.array_frame()
        if token.startswith(RESERVED_PREFIX):
            if frame is None:
                return False
            divisor = token[1:]
            if not divisor.isdigit() or int(divisor) == 0:
                return False
            return (frame.index + 1) % int(divisor) == 0
        if frame is None:
            return None
        if token == SYNTHETIC_FIRST:
            return frame.index == 0
        return frame.index == frame.length - 1

    def _holds(self, token: str) -> bool:
        if token.startswith("!"):
            return not self.is_condition(token[1:])
        return self.is_condition(token)

    def meets_when_conditions(self, tokens: Iterable[str]) -> bool:
        return all(self._holds(token) for token in tokens)

    def meets_any_condition(self, tokens: Iterable[str]) -> bool:
        return any(self._holds(token) for token in tokens)

    @property
    def conditions(self) -> frozenset:
        return frozenset(self._scopes[-1])


def _check_reserved(token: str) -> None:
    if token.startswith(RESERVED_PREFIX):
        raise ReservedConditionError(token)


__all__ = [
    "ConditionTarget",
    "ValidatorContext",
    "SYNTHETIC_FIRST",
    "SYNTHETIC_LAST",
    "RESERVED_PREFIX",
    "index_path",
    "join_path",
]
