"""Violation records, violation codes and the core message keys."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

# Request-shape problems (the document as a whole cannot be accepted).
CODE_REQUEST_BODY_EMPTY = 40001
CODE_UNABLE_TO_DECODE = 40002
CODE_NOT_JSON_NULL = 40003
CODE_NOT_JSON_ARRAY = 40004
CODE_NOT_JSON_OBJECT = 40005
CODE_EXPECTED_JSON_OBJECT_OR_ARRAY = 40006
CODE_INVALID_QUERY_PARAM = 40007
CODE_MULTIPLE_QUERY_VALUES = 40008
CODE_UNMARSHAL_FAILED = 40009

# Data violations.
CODE_MISSING_PROPERTY = 42201
CODE_UNWANTED_PROPERTY = 42202
CODE_UNKNOWN_PROPERTY = 42203
CODE_NULL_NOT_ALLOWED = 42204
CODE_INVALID_TYPE = 42205
CODE_CONSTRAINT_FAILED = 42206
CODE_ARRAY_ELEMENT_NULL = 42207
CODE_ARRAY_ELEMENT_NOT_OBJECT = 42208
CODE_VALUE_MUST_BE_OBJECT = 42209
CODE_VALUE_MUST_BE_ARRAY = 42210
CODE_VALUE_MUST_BE_OBJECT_OR_ARRAY = 42211
CODE_OBJECT_VALIDATOR_MALFORMED = 42212
CODE_VARIANT_CONFLICT = 42213

# Message keys double as the English text.
MSG_REQUEST_BODY_EMPTY = "Request body is empty"
MSG_UNABLE_TO_DECODE = "Unable to decode as JSON"
MSG_NOT_JSON_NULL = "JSON must not be JSON null"
MSG_NOT_JSON_ARRAY = "JSON must not be JSON array"
MSG_NOT_JSON_OBJECT = "JSON must not be JSON object"
MSG_EXPECTED_JSON_OBJECT_OR_ARRAY = "JSON expected to be JSON object or array"
MSG_EXPECTED_JSON_OBJECT = "JSON expected to be JSON object"
MSG_EXPECTED_JSON_ARRAY = "JSON expected to be JSON array"
MSG_ARRAY_ELEMENT_NULL = "JSON array element must not be null"
MSG_ARRAY_ELEMENT_NOT_OBJECT = "JSON array element must be an object"
MSG_MISSING_PROPERTY = "Missing property"
MSG_UNWANTED_PROPERTY = "Property must not be present"
MSG_UNKNOWN_PROPERTY = "Unknown property"
MSG_NULL_NOT_ALLOWED = "Value cannot be null"
MSG_VALUE_MUST_BE_OBJECT = "Value must be an object"
MSG_VALUE_MUST_BE_ARRAY = "Value must be an array"
MSG_VALUE_MUST_BE_OBJECT_OR_ARRAY = "Value must be an object or array"
MSG_OBJECT_VALIDATOR_MALFORMED = "Object validator allows neither objects nor arrays"
MSG_VARIANT_CONFLICT = "Conditional variants conflict for property"
MSG_INVALID_QUERY_PARAM = "Query parameter value is invalid"
MSG_MULTIPLE_QUERY_VALUES = "Query parameter must not be repeated"
MSG_UNMARSHAL_FAILED = "Unable to build model from document"

FMT_EXPECTED_TYPE = "Value expected to be of type {0}"


@dataclass
class Violation:
    """A single failure found while walking a document.

    ``path`` is the full location (``foo``, ``[1].n``, ``a.b[0].c``) and
    ``property`` the last property name on it (empty for array elements).
    """

    property: str
    path: str
    message: str
    code: int = CODE_CONSTRAINT_FAILED
    bad_request: bool = False
    constraint: Any = field(default=None, compare=False, repr=False)

    def to_dict(self) -> Dict[str, object]:
        return {
            "property": self.property,
            "path": self.path,
            "message": self.message,
            "code": self.code,
            "badRequest": self.bad_request,
        }


__all__ = [name for name in dir() if name.startswith(("CODE_", "MSG_", "FMT_"))] + ["Violation"]
