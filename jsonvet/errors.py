"""Structural errors raised when a schema (not the data) is at fault."""
from __future__ import annotations


class JsonVetError(Exception):
    """Base class for every structural error raised by jsonvet."""


class SchemaError(JsonVetError):
    """A schema or its serialized form is malformed."""


class UnknownConstraintError(SchemaError):
    def __init__(self, name: str):
        super().__init__(f"unknown constraint '{name}'")
        self.name = name


class ConstraintFieldError(SchemaError):
    """A serialized constraint field could not be applied."""


class NotSerializableError(SchemaError):
    """The schema holds a constraint that cannot be written out."""


class ExpressionError(SchemaError):
    """An others-expression could not be parsed.

    ``position`` is the 0-based offset of the offending character.
    """

    def __init__(self, message: str, position: int, expression: str = ""):
        super().__init__(message)
        self.position = position
        self.expression = expression


class PropertyNotFoundError(JsonVetError, KeyError):
    def __init__(self, name: str):
        super().__init__(f"property '{name}' was not found in the properties repository")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class ConstraintExistsError(JsonVetError):
    def __init__(self, name: str):
        super().__init__(f"constraint '{name}' is already registered")
        self.name = name


class ReservedConditionError(JsonVetError, ValueError):
    def __init__(self, token: str):
        super().__init__(f"condition token '{token}' is reserved (tokens starting with '%' cannot be set or cleared)")
        self.token = token


__all__ = [
    "JsonVetError",
    "SchemaError",
    "UnknownConstraintError",
    "ConstraintFieldError",
    "NotSerializableError",
    "ExpressionError",
    "PropertyNotFoundError",
    "ConstraintExistsError",
    "ReservedConditionError",
]
