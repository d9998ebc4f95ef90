"""Process-wide registry mapping constraint names to prototypes.

The serializer rebuilds constraints by name from here.  Registries are meant
to be populated at startup; changing them while evaluations or
deserialization run is unsupported.
"""
from __future__ import annotations

import logging
import threading
from typing import Dict, List, Type, Union

from ..errors import ConstraintExistsError
from .base import Constraint
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

LOGGER = logging.getLogger(__name__)

BUILTIN_CONSTRAINTS: List[Type[Constraint]] = [
    ArrayConditionalConstraint,
    ArrayOf,
    ArrayUnique,
    ClearCondition,
    ConditionalConstraint,
    ConstraintSet,
    FailingConstraint,
    FailWhen,
    GreaterThan,
    Length,
    LessThan,
    Maximum,
    Minimum,
    MultipleOf,
    Positive,
    Range,
    SetConditionFrom,
    SetConditionIf,
    SetConditionProperty,
    StringNotEmpty,
    StringPattern,
    StringValidToken,
    StringValidUnicodeNormalization,
    VariablePropertyConstraint,
]

_lock = threading.Lock()
_registry: Dict[str, Constraint] = {}


def _builtin_prototypes() -> Dict[str, Constraint]:
    return {cls.constraint_name(): cls() for cls in BUILTIN_CONSTRAINTS}


def register_constraint(
    constraint: Union[Constraint, Type[Constraint]], name: str | None = None, *, overwrite: bool = False
) -> str:
    """Register a prototype (an instance, or a class constructible without arguments).

    Registering under an alias ``name`` keeps the prototype's field values,
    so a pre-configured constraint can be referenced by that name.
    """
    prototype = constraint() if isinstance(constraint, type) else constraint
    key = name or prototype.constraint_name()
    if not prototype.serializable:
        LOGGER.warning("Registering unserializable constraint '%s'; schemas using it cannot be written out", key)
    with _lock:
        if key in _registry and not overwrite:
            raise ConstraintExistsError(key)
        if key in _registry:
            LOGGER.warning("Overwriting registered constraint '%s'", key)
        _registry[key] = prototype
    return key


def get_registered_constraint(name: str) -> Constraint | None:
    with _lock:
        return _registry.get(name)


def has_constraint(name: str) -> bool:
    with _lock:
        return name in _registry


def registered_constraint_names() -> List[str]:
    with _lock:
        return sorted(_registry)


def clear_constraint_registry() -> None:
    """Remove everything, built-ins included."""
    with _lock:
        _registry.clear()


def reset_constraint_registry() -> None:
    """Restore the built-in constraints only."""
    prototypes = _builtin_prototypes()
    with _lock:
        _registry.clear()
        _registry.update(prototypes)


# Initial load during module import.
reset_constraint_registry()

__all__ = [
    "BUILTIN_CONSTRAINTS",
    "register_constraint",
    "get_registered_constraint",
    "has_constraint",
    "registered_constraint_names",
    "clear_constraint_registry",
    "reset_constraint_registry",
]
