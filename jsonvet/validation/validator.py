"""Object/array validators, conditional variants and the evaluation API."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, NamedTuple, Optional, Type

from pydantic import BaseModel, ValidationError

from ..i18n import Translator
from . import engine
from .context import ValidatorContext
from .property_validator import OasInfo, PropertyValidator
from .violation import (
    CODE_UNABLE_TO_DECODE,
    CODE_UNMARSHAL_FAILED,
    MSG_UNABLE_TO_DECODE,
    MSG_UNMARSHAL_FAILED,
    Violation,
)

if TYPE_CHECKING:  # pragma: no cover
    from ..constraints.base import Constraint

LOGGER = logging.getLogger(__name__)


class ValidationResult(NamedTuple):
    ok: bool
    violations: List[Violation]


class DecodedResult(NamedTuple):
    ok: bool
    violations: List[Violation]
    value: Any


@dataclass
class ConditionalVariant:
    """Extra constraints and properties that apply when all ``when_conditions`` hold."""

    when_conditions: List[str] = field(default_factory=list)
    constraints: List["Constraint"] = field(default_factory=list)
    properties: Dict[str, Optional[PropertyValidator]] = field(default_factory=dict)
    conditional_variants: List["ConditionalVariant"] = field(default_factory=list)

    def clone(self) -> "ConditionalVariant":
        return ConditionalVariant(
            when_conditions=list(self.when_conditions),
            constraints=list(self.constraints),
            properties=_clone_properties(self.properties),
            conditional_variants=[variant.clone() for variant in self.conditional_variants],
        )


@dataclass
class Validator:
    """Schema for an object, or for a uniform array of objects."""

    properties: Dict[str, Optional[PropertyValidator]] = field(default_factory=dict)
    constraints: List["Constraint"] = field(default_factory=list)
    array_constraints: List["Constraint"] = field(default_factory=list)
    ignore_unknown_properties: bool = False
    allow_array: bool = False
    disallow_object: bool = False
    allow_null_json: bool = False
    allow_null_items: bool = False
    stop_on_first: bool = False
    use_number: bool = False
    ordered_property_checks: bool = False
    when_conditions: List[str] = field(default_factory=list)
    conditional_variants: List[ConditionalVariant] = field(default_factory=list)
    oas_info: Optional[OasInfo] = None

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def new_context(self, value: Any, conditions=(), translator: Translator | None = None) -> ValidatorContext:
        return ValidatorContext(
            value,
            translator=translator,
            stop_on_first=self.stop_on_first,
            use_number=self.use_number,
            conditions=conditions,
        )

    def validate(
        self, value: Any, *conditions: str, translator: Translator | None = None
    ) -> ValidationResult:
        """Validate an already decoded JSON value.

        ``conditions`` seed the root condition scope.
        """
        ctx = self.new_context(value, conditions, translator)
        engine.validate_value(value, self, ctx)
        return ValidationResult(ctx.ok, ctx.violations)

    def decode(self, data: str | bytes) -> Any:
        if self.use_number:
            return json.loads(data, parse_float=Decimal)
        return json.loads(data)

    def validate_string(
        self, text: str | bytes, *conditions: str, translator: Translator | None = None
    ) -> DecodedResult:
        """Decode JSON text and validate it."""
        try:
            value = self.decode(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            LOGGER.debug("Undecodable document: %s", exc)
            ctx = self.new_context(None, conditions, translator)
            ctx.add_violation_for_current(ctx.translate(MSG_UNABLE_TO_DECODE), CODE_UNABLE_TO_DECODE, bad_request=True)
            return DecodedResult(False, ctx.violations, None)
        ok, violations = self.validate(value, *conditions, translator=translator)
        return DecodedResult(ok, violations, value)

    validate_bytes = validate_string

    def validate_into(
        self,
        data: Any,
        model: Type[BaseModel],
        *conditions: str,
        translator: Translator | None = None,
    ) -> DecodedResult:
        """Validate, then build ``model`` from the document.

        ``data`` may be JSON text or an already decoded value.  The returned
        ``value`` is the model instance, or None when validation failed.
        """
        if isinstance(data, (str, bytes)):
            ok, violations, value = self.validate_string(data, *conditions, translator=translator)
        else:
            value = data
            ok, violations = self.validate(data, *conditions, translator=translator)
        if not ok:
            return DecodedResult(False, violations, None)
        try:
            instance = model.model_validate(value)
        except ValidationError as exc:
            LOGGER.debug("Model %s rejected a valid document: %s", model.__name__, exc)
            ctx = self.new_context(value, conditions, translator)
            ctx.add_violation_for_current(ctx.translate(MSG_UNMARSHAL_FAILED), CODE_UNMARSHAL_FAILED, bad_request=True)
            return DecodedResult(False, ctx.violations, None)
        return DecodedResult(True, [], instance)

    def is_ordered_property_checks(self) -> bool:
        if self.ordered_property_checks:
            return True
        return any(rules is not None and rules.order != 0 for rules in self.properties.values())

    # ------------------------------------------------------------------
    # Cloning
    # ------------------------------------------------------------------
    def clone(self) -> "Validator":
        """Deep-copy the schema's containers; constraint instances stay shared."""
        return Validator(
            properties=_clone_properties(self.properties),
            constraints=list(self.constraints),
            array_constraints=list(self.array_constraints),
            ignore_unknown_properties=self.ignore_unknown_properties,
            allow_array=self.allow_array,
            disallow_object=self.disallow_object,
            allow_null_json=self.allow_null_json,
            allow_null_items=self.allow_null_items,
            stop_on_first=self.stop_on_first,
            use_number=self.use_number,
            ordered_property_checks=self.ordered_property_checks,
            when_conditions=list(self.when_conditions),
            conditional_variants=[variant.clone() for variant in self.conditional_variants],
            oas_info=self.oas_info.clone() if self.oas_info is not None else None,
        )


def _clone_properties(properties: Dict[str, Optional[PropertyValidator]]) -> Dict[str, Optional[PropertyValidator]]:
    return {name: rules.clone() if rules is not None else None for name, rules in properties.items()}


__all__ = ["ConditionalVariant", "DecodedResult", "ValidationResult", "Validator"]
