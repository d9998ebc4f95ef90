"""Process-wide repository of named, reusable property validators.

A validator may leave a property's rules as ``None``; the engine then looks
the name up here.  In strict mode a miss raises
:class:`~jsonvet.errors.PropertyNotFoundError`, in lax mode the property is
treated as optional and of any type.
"""
from __future__ import annotations

import logging
import threading
from typing import Dict, Mapping, Optional

from ..errors import PropertyNotFoundError
from ..settings import settings
from .property_validator import PropertyValidator

LOGGER = logging.getLogger(__name__)

_lock = threading.Lock()
_repo: Dict[str, PropertyValidator] = {}
_strict: bool = settings.PROPERTIES_REPO_STRICT


def register(properties: Mapping[str, Optional[PropertyValidator]]) -> None:
    """Add or replace named property validators."""
    with _lock:
        for name, rules in properties.items():
            _repo[name] = rules if rules is not None else PropertyValidator()


def get(name: str) -> PropertyValidator:
    with _lock:
        rules = _repo.get(name)
        strict = _strict
    if rules is not None:
        return rules
    if strict:
        raise PropertyNotFoundError(name)
    LOGGER.warning("Property '%s' not in repository; treating as optional of any type", name)
    return PropertyValidator()


def has(name: str) -> bool:
    with _lock:
        return name in _repo


def fetch(properties: Mapping[str, Optional[PropertyValidator]]) -> Dict[str, PropertyValidator]:
    """Resolve a property map, replacing ``None`` rules from the repository."""
    resolved: Dict[str, PropertyValidator] = {}
    for name, rules in properties.items():
        resolved[name] = rules if rules is not None else get(name)
    return resolved


def clear() -> None:
    with _lock:
        _repo.clear()


def reset() -> None:
    """Clear the repository and restore the configured strictness."""
    global _strict
    with _lock:
        _repo.clear()
        _strict = settings.PROPERTIES_REPO_STRICT


def set_strict(strict: bool) -> None:
    global _strict
    with _lock:
        _strict = strict


def is_strict() -> bool:
    with _lock:
        return _strict


set_panics = set_strict

__all__ = ["register", "get", "has", "fetch", "clear", "reset", "set_strict", "set_panics", "is_strict"]
