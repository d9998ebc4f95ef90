"""A small library of leaf constraints.

Every leaf passes values it does not apply to (for example ``Length`` on a
number), so type policing stays with the property validator.
"""
from __future__ import annotations

import json
import re
import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List

from ..i18n import Translator
from ..validation.context import ValidatorContext
from ..validation.types import JsonType, check_value_type, is_integer, is_number
from .base import CheckResult, Constraint

FMT_MIN_LEN = "Value length must be at least {0}"
FMT_MIN_LEN_EXC = "Value length must be greater than {0}"
FMT_MIN_MAX_LEN = "Value length must be between {0} ({1}) and {2} ({3})"
FMT_RANGE = "Value must be between {0} ({1}) and {2} ({3})"
FMT_GT = "Value must be greater than {0}"
FMT_GTE = "Value must be greater than or equal to {0}"
FMT_LT = "Value must be less than {0}"
FMT_LTE = "Value must be less than or equal to {0}"
FMT_MULTIPLE_OF = "Value must be a multiple of {0}"
FMT_VALID_TOKEN = 'String value must be valid token - "{0}"'
FMT_ARRAY_ELEMENT_TYPE = "Array elements must be of type {0}"
FMT_ARRAY_ELEMENT_TYPE_OR_NULL = "Array elements must be of type {0} or null"
MSG_POSITIVE = "Value must be positive"
MSG_POSITIVE_OR_ZERO = "Value must be positive or zero"
MSG_NOT_EMPTY_STRING = "String value must not be an empty string"
MSG_VALID_PATTERN = "String value must have valid pattern"
MSG_UNICODE_NORMALIZATION = "String value must be correct normalization form {0}"
MSG_ARRAY_UNIQUE = "Array elements must be unique"

TOKEN_INCLUSIVE = "inclusive"
TOKEN_EXCLUSIVE = "exclusive"


def _inc_exc(translator: Translator, exclusive: bool) -> str:
    return translator.translate_token(TOKEN_EXCLUSIVE if exclusive else TOKEN_INCLUSIVE)


def _length_of(value: Any) -> int | None:
    if isinstance(value, (str, dict, list)):
        return len(value)
    return None


@dataclass
class Length(Constraint):
    """Length of a string, array or object; ``maximum`` of 0 means unbounded."""

    minimum: int = 0
    maximum: int = 0
    exclusive_min: bool = False
    exclusive_max: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        length = _length_of(value)
        if length is None:
            return True, ""
        if length < self.minimum or (self.exclusive_min and length == self.minimum):
            return self.fail(ctx)
        if self.maximum > 0 and (length > self.maximum or (self.exclusive_max and length == self.maximum)):
            return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        if self.maximum > 0:
            return translator.translate_format(
                FMT_MIN_MAX_LEN,
                self.minimum,
                _inc_exc(translator, self.exclusive_min),
                self.maximum,
                _inc_exc(translator, self.exclusive_max),
            )
        if self.exclusive_min:
            return translator.translate_format(FMT_MIN_LEN_EXC, self.minimum)
        return translator.translate_format(FMT_MIN_LEN, self.minimum)


@dataclass
class Range(Constraint):
    """Numeric value between two bounds."""

    minimum: float = 0.0
    maximum: float = 0.0
    exclusive_min: bool = False
    exclusive_max: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not is_number(value):
            return True, ""
        if value < self.minimum or (self.exclusive_min and value == self.minimum):
            return self.fail(ctx)
        if value > self.maximum or (self.exclusive_max and value == self.maximum):
            return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return translator.translate_format(
            FMT_RANGE,
            self.minimum,
            _inc_exc(translator, self.exclusive_min),
            self.maximum,
            _inc_exc(translator, self.exclusive_max),
        )


@dataclass
class Minimum(Constraint):
    value: float = 0.0
    exclusive: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_number(value) and (value < self.value or (self.exclusive and value == self.value)):
            return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return translator.translate_format(FMT_GT if self.exclusive else FMT_GTE, self.value)


@dataclass
class Maximum(Constraint):
    value: float = 0.0
    exclusive: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_number(value) and (value > self.value or (self.exclusive and value == self.value)):
            return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return translator.translate_format(FMT_LT if self.exclusive else FMT_LTE, self.value)


@dataclass
class GreaterThan(Constraint):
    value: float = 0.0
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_number(value) and value <= self.value:
            return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return translator.translate_format(FMT_GT, self.value)


@dataclass
class LessThan(Constraint):
    value: float = 0.0
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_number(value) and value >= self.value:
            return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return translator.translate_format(FMT_LT, self.value)


@dataclass
class Positive(Constraint):
    include_zero: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_number(value) and (value < 0 or (value == 0 and not self.include_zero)):
            return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return translator.translate_message(MSG_POSITIVE_OR_ZERO if self.include_zero else MSG_POSITIVE)


@dataclass
class MultipleOf(Constraint):
    value: int = 1
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not is_number(value) or self.value == 0:
            return True, ""
        if not is_integer(value) or int(value) % self.value != 0:
            return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return translator.translate_format(FMT_MULTIPLE_OF, self.value)


@dataclass
class StringNotEmpty(Constraint):
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str) and value == "":
            return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return translator.translate_message(MSG_NOT_EMPTY_STRING)


@dataclass
class StringPattern(Constraint):
    """String must contain a match for ``regexp``; anchor it with ``^...$`` to match whole values."""

    regexp: re.Pattern = field(default_factory=lambda: re.compile(""))
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str) and self.regexp.search(value) is None:
            return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return translator.translate_message(MSG_VALID_PATTERN)


@dataclass
class StringValidToken(Constraint):
    tokens: List[str] = field(default_factory=list)
    ignore_case: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, str):
            return True, ""
        if self.ignore_case:
            found = value.lower() in {token.lower() for token in self.tokens}
        else:
            found = value in self.tokens
        return (True, "") if found else self.fail(ctx)

    def default_message(self, translator: Translator) -> str:
        return translator.translate_format(FMT_VALID_TOKEN, '","'.join(self.tokens))


class UnicodeForm(Enum):
    NFC = "NFC"
    NFD = "NFD"
    NFKC = "NFKC"
    NFKD = "NFKD"


@dataclass
class StringValidUnicodeNormalization(Constraint):
    form: UnicodeForm = UnicodeForm.NFC
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str) and not unicodedata.is_normalized(self.form.value, value):
            return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return translator.translate_format(MSG_UNICODE_NORMALIZATION, self.form.value)


@dataclass
class ArrayOf(Constraint):
    """Every element of an array is of ``type``."""

    type: JsonType = JsonType.ANY
    allow_null_element: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, list):
            return True, ""
        for element in value:
            if element is None:
                if not self.allow_null_element:
                    return self.fail(ctx)
            elif not check_value_type(element, self.type):
                return self.fail(ctx)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        fmt = FMT_ARRAY_ELEMENT_TYPE_OR_NULL if self.allow_null_element else FMT_ARRAY_ELEMENT_TYPE
        return translator.translate_format(fmt, translator.translate_token(self.type.token))


def _unique_key(element: Any, ignore_case: bool) -> str:
    if isinstance(element, str) and ignore_case:
        element = element.lower()
    return json.dumps(element, sort_keys=True, default=str)


@dataclass
class ArrayUnique(Constraint):
    ignore_case: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, list):
            return True, ""
        seen = set()
        for element in value:
            key = _unique_key(element, self.ignore_case)
            if key in seen:
                return self.fail(ctx)
            seen.add(key)
        return True, ""

    def default_message(self, translator: Translator) -> str:
        return translator.translate_message(MSG_ARRAY_UNIQUE)


__all__ = [
    "Length",
    "Range",
    "Minimum",
    "Maximum",
    "GreaterThan",
    "LessThan",
    "Positive",
    "MultipleOf",
    "StringNotEmpty",
    "StringPattern",
    "StringValidToken",
    "UnicodeForm",
    "StringValidUnicodeNormalization",
    "ArrayOf",
    "ArrayUnique",
]
