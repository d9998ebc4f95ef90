"""Field-wise encoding and decoding of constraint dataclass fields."""
from __future__ import annotations

import copy
import dataclasses
import re
import types
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Dict, Union, get_args, get_origin, get_type_hints

from ..constraints.base import Constraint
from ..errors import ConstraintFieldError, NotSerializableError, SchemaError
from ..validation.expression import OthersExpr, parse_expression
from ..validation.types import JsonType, is_integer, is_number
from ..validation.validator import Validator

_UNION_TYPES = (Union, types.UnionType)


@lru_cache(maxsize=None)
def _field_hints(cls: type) -> Dict[str, Any]:
    return get_type_hints(cls)


class FieldCodec:
    """Converts constraint field values to and from their JSON form.

    Nested constraints and validators are delegated to the callables given
    by the serializer.
    """

    def __init__(
        self,
        encode_constraint: Callable[[Constraint], Dict[str, Any]],
        decode_constraint: Callable[[Any], Constraint],
        encode_validator: Callable[[Validator], Dict[str, Any]],
        decode_validator: Callable[[Any], Validator],
    ):
        self.encode_constraint = encode_constraint
        self.decode_constraint = decode_constraint
        self.encode_validator = encode_validator
        self.decode_validator = decode_validator

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------
    def encode_fields(self, constraint: Constraint) -> Dict[str, Any]:
        if not dataclasses.is_dataclass(constraint):
            return {}
        return {
            item.name: self.encode_value(getattr(constraint, item.name))
            for item in dataclasses.fields(constraint)
            if item.init
        }

    def encode_value(self, value: Any) -> Any:
        if isinstance(value, JsonType):
            return value.token
        if isinstance(value, Enum):
            return value.value
        if value is None or isinstance(value, (bool, int, float, str)):
            return value
        if isinstance(value, Decimal):
            return int(value) if is_integer(value) else float(value)
        if isinstance(value, Constraint):
            return self.encode_constraint(value)
        if isinstance(value, OthersExpr):
            return str(value)
        if isinstance(value, re.Pattern):
            return value.pattern
        if isinstance(value, Validator):
            return self.encode_validator(value)
        if isinstance(value, dict):
            return {str(key): self.encode_value(item) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [self.encode_value(item) for item in value]
        raise NotSerializableError(f"cannot serialize field value of type {type(value).__name__}")

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------
    def build(self, name: str, prototype: Constraint, raw: Dict[str, Any]) -> Constraint:
        """Fresh constraint from ``prototype`` with ``raw`` field values applied."""
        constraint = copy.deepcopy(prototype)
        if not dataclasses.is_dataclass(constraint):
            if raw:
                raise ConstraintFieldError(f"constraint '{name}' does not accept fields")
            return constraint
        settable = {item.name for item in dataclasses.fields(constraint) if item.init}
        hints = _field_hints(type(constraint))
        values: Dict[str, Any] = {}
        for key, value in raw.items():
            if key not in settable:
                raise ConstraintFieldError(f"constraint '{name}' has no field '{key}'")
            values[key] = self.decode_value(value, hints.get(key, Any), f"{name}.{key}")
        try:
            return dataclasses.replace(constraint, **values)
        except TypeError as exc:
            raise ConstraintFieldError(f"constraint '{name}': {exc}") from exc

    def decode_value(self, raw: Any, hint: Any, where: str) -> Any:
        if hint is Any:
            return raw
        origin = get_origin(hint)
        args = get_args(hint)
        if origin in _UNION_TYPES:
            options = [arg for arg in args if arg is not type(None)]
            if raw is None and len(options) < len(args):
                return None
            if len(options) == 1:
                return self.decode_value(raw, options[0], where)
            raise ConstraintFieldError(f"field '{where}' has an unsupported union type")
        if origin is list:
            if not isinstance(raw, list):
                raise _type_error(where, "array", raw)
            item_hint = args[0] if args else Any
            return [self.decode_value(item, item_hint, f"{where}[{i}]") for i, item in enumerate(raw)]
        if origin is dict:
            if not isinstance(raw, dict):
                raise _type_error(where, "object", raw)
            value_hint = args[1] if len(args) == 2 else Any
            return {str(key): self.decode_value(item, value_hint, f"{where}.{key}") for key, item in raw.items()}
        if hint is bool:
            if not isinstance(raw, bool):
                raise _type_error(where, "boolean", raw)
            return raw
        if hint is int:
            if not is_integer(raw):
                raise _type_error(where, "integer", raw)
            return int(raw)
        if hint is float:
            if not is_number(raw):
                raise _type_error(where, "number", raw)
            return float(raw)
        if hint is str:
            if not isinstance(raw, str):
                raise _type_error(where, "string", raw)
            return raw
        if isinstance(hint, type):
            return self._decode_typed(raw, hint, where)
        raise ConstraintFieldError(f"field '{where}' has an unsupported type {hint!r}")

    def _decode_typed(self, raw: Any, hint: type, where: str) -> Any:
        if issubclass(hint, JsonType):
            try:
                return JsonType.parse(raw)
            except SchemaError as exc:
                raise ConstraintFieldError(f"field '{where}': {exc}") from exc
        if issubclass(hint, Enum):
            try:
                return hint(raw)
            except ValueError:
                if isinstance(raw, str) and raw in hint.__members__:
                    return hint[raw]
                raise ConstraintFieldError(f"field '{where}' has invalid value {raw!r}") from None
        if issubclass(hint, Constraint):
            if not isinstance(raw, dict):
                raise _type_error(where, "constraint", raw)
            return self.decode_constraint(raw)
        if issubclass(hint, OthersExpr):
            if not isinstance(raw, str):
                raise _type_error(where, "expression string", raw)
            return parse_expression(raw)
        if issubclass(hint, re.Pattern):
            if not isinstance(raw, str):
                raise _type_error(where, "pattern string", raw)
            try:
                return re.compile(raw)
            except re.error as exc:
                raise ConstraintFieldError(f"field '{where}' has invalid pattern: {exc}") from exc
        if issubclass(hint, Validator):
            if not isinstance(raw, dict):
                raise _type_error(where, "validator", raw)
            return self.decode_validator(raw)
        raise ConstraintFieldError(f"field '{where}' has an unsupported type {hint.__name__}")


def _type_error(where: str, expected: str, raw: Any) -> ConstraintFieldError:
    return ConstraintFieldError(f"field '{where}' expected {expected}, got {type(raw).__name__}")


__all__ = ["FieldCodec"]
