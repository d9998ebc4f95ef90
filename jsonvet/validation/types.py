"""JSON value types understood by property validators."""
from __future__ import annotations

from decimal import Decimal
from enum import IntEnum
from typing import Any

from ..errors import SchemaError


class JsonType(IntEnum):
    """Expected JSON type of a property value.

    The integer codes are part of the serialized form and must not change.
    """

    ANY = 0
    STRING = 1
    NUMBER = 2
    INTEGER = 3
    BOOLEAN = 4
    OBJECT = 5
    ARRAY = 6

    @property
    def token(self) -> str:
        return self.name.lower()

    def __str__(self) -> str:
        return self.token

    @classmethod
    def parse(cls, value: Any) -> "JsonType":
        """Accept a JsonType, its integer code or its string token."""
        if isinstance(value, JsonType):
            return value
        if isinstance(value, bool):
            raise SchemaError(f"invalid property type {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError as exc:
                raise SchemaError(f"invalid property type code {value}") from exc
        if isinstance(value, str):
            token = value.strip().lower()
            if token == "":
                return cls.ANY
            for member in cls:
                if member.token == token:
                    return member
            raise SchemaError(f"invalid property type '{value}'")
        raise SchemaError(f"invalid property type {value!r}")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    return False


def check_value_type(value: Any, expected: JsonType) -> bool:
    """Return True when a non-null ``value`` matches ``expected``."""
    if expected is JsonType.ANY:
        return True
    if expected is JsonType.STRING:
        return isinstance(value, str)
    if expected is JsonType.NUMBER:
        return is_number(value)
    if expected is JsonType.INTEGER:
        return is_integer(value)
    if expected is JsonType.BOOLEAN:
        return isinstance(value, bool)
    if expected is JsonType.OBJECT:
        return isinstance(value, dict)
    if expected is JsonType.ARRAY:
        return isinstance(value, list)
    return False


def json_type_of(value: Any) -> str:
    """Token describing the JSON type of a decoded value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return JsonType.BOOLEAN.token
    if isinstance(value, str):
        return JsonType.STRING.token
    if is_integer(value) and not isinstance(value, float):
        return JsonType.INTEGER.token
    if is_number(value):
        return JsonType.NUMBER.token
    if isinstance(value, dict):
        return JsonType.OBJECT.token
    if isinstance(value, list):
        return JsonType.ARRAY.token
    return type(value).__name__


__all__ = ["JsonType", "check_value_type", "is_integer", "is_number", "json_type_of"]
