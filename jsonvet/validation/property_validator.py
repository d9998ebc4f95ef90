"""Rules for a single named property."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, List, Optional

from .expression import OthersExpr, parse_expression
from .types import JsonType

if TYPE_CHECKING:  # pragma: no cover
    from ..constraints.base import Constraint
    from .validator import Validator


@dataclass
class OasInfo:
    """Documentation metadata carried into OpenAPI output."""

    description: str = ""
    title: str = ""
    format: str = ""
    example: str = ""
    deprecated: bool = False

    def clone(self) -> "OasInfo":
        return replace(self)


def _as_expression(value: Any) -> Optional[OthersExpr]:
    if isinstance(value, str):
        return parse_expression(value) if value.strip() else None
    return value


@dataclass
class PropertyValidator:
    """How one property of an object is checked.

    ``required_with`` / ``unwanted_with`` may be given as expression strings
    and are parsed on construction.
    """

    type: JsonType = JsonType.ANY
    not_null: bool = False
    mandatory: bool = False
    mandatory_when: List[str] = field(default_factory=list)
    constraints: List["Constraint"] = field(default_factory=list)
    object_validator: Optional["Validator"] = None
    order: int = 0
    when_conditions: List[str] = field(default_factory=list)
    unwanted_conditions: List[str] = field(default_factory=list)
    required_with: Optional[OthersExpr] = None
    required_with_message: str = ""
    unwanted_with: Optional[OthersExpr] = None
    unwanted_with_message: str = ""
    oas_info: Optional[OasInfo] = None

    def __post_init__(self) -> None:
        self.type = JsonType.parse(self.type)
        self.required_with = _as_expression(self.required_with)
        self.unwanted_with = _as_expression(self.unwanted_with)

    def clone(self) -> "PropertyValidator":
        """Copy containers; constraint instances are shared with the original."""
        return PropertyValidator(
            type=self.type,
            not_null=self.not_null,
            mandatory=self.mandatory,
            mandatory_when=list(self.mandatory_when),
            constraints=list(self.constraints),
            object_validator=self.object_validator.clone() if self.object_validator is not None else None,
            order=self.order,
            when_conditions=list(self.when_conditions),
            unwanted_conditions=list(self.unwanted_conditions),
            required_with=self.required_with.clone() if self.required_with is not None else None,
            required_with_message=self.required_with_message,
            unwanted_with=self.unwanted_with.clone() if self.unwanted_with is not None else None,
            unwanted_with_message=self.unwanted_with_message,
            oas_info=self.oas_info.clone() if self.oas_info is not None else None,
        )


__all__ = ["OasInfo", "PropertyValidator"]
