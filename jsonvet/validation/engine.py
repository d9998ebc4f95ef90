"""The evaluation engine: walks a decoded JSON value against a validator."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Set, Tuple

from . import properties_repo
from .context import ValidatorContext
from .property_validator import PropertyValidator
from .types import JsonType, check_value_type
from .violation import (
    CODE_ARRAY_ELEMENT_NOT_OBJECT,
    CODE_ARRAY_ELEMENT_NULL,
    CODE_EXPECTED_JSON_OBJECT_OR_ARRAY,
    CODE_INVALID_TYPE,
    CODE_MISSING_PROPERTY,
    CODE_NOT_JSON_ARRAY,
    CODE_NOT_JSON_NULL,
    CODE_NOT_JSON_OBJECT,
    CODE_NULL_NOT_ALLOWED,
    CODE_OBJECT_VALIDATOR_MALFORMED,
    CODE_UNKNOWN_PROPERTY,
    CODE_UNWANTED_PROPERTY,
    CODE_VALUE_MUST_BE_ARRAY,
    CODE_VALUE_MUST_BE_OBJECT,
    CODE_VALUE_MUST_BE_OBJECT_OR_ARRAY,
    CODE_VARIANT_CONFLICT,
    FMT_EXPECTED_TYPE,
    MSG_ARRAY_ELEMENT_NOT_OBJECT,
    MSG_ARRAY_ELEMENT_NULL,
    MSG_EXPECTED_JSON_OBJECT_OR_ARRAY,
    MSG_MISSING_PROPERTY,
    MSG_NOT_JSON_ARRAY,
    MSG_NOT_JSON_NULL,
    MSG_NOT_JSON_OBJECT,
    MSG_NULL_NOT_ALLOWED,
    MSG_OBJECT_VALIDATOR_MALFORMED,
    MSG_UNKNOWN_PROPERTY,
    MSG_UNWANTED_PROPERTY,
    MSG_VALUE_MUST_BE_ARRAY,
    MSG_VALUE_MUST_BE_OBJECT,
    MSG_VALUE_MUST_BE_OBJECT_OR_ARRAY,
    MSG_VARIANT_CONFLICT,
)

if TYPE_CHECKING:  # pragma: no cover
    from ..constraints.base import Constraint
    from .validator import ConditionalVariant, Validator

LOGGER = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Entry points
# ------------------------------------------------------------------
def validate_value(value: Any, validator: "Validator", ctx: ValidatorContext) -> None:
    """Validate a whole document (object, array or null) at the root."""
    if value is None:
        if not validator.allow_null_json:
            ctx.add_violation_for_current(ctx.translate(MSG_NOT_JSON_NULL), CODE_NOT_JSON_NULL, bad_request=True)
            ctx.stop()
        return
    if isinstance(value, dict):
        if validator.disallow_object:
            ctx.add_violation_for_current(ctx.translate(MSG_NOT_JSON_OBJECT), CODE_NOT_JSON_OBJECT, bad_request=True)
            ctx.stop()
            return
        validate_object(value, validator, ctx)
    elif isinstance(value, list):
        if not validator.allow_array:
            ctx.add_violation_for_current(ctx.translate(MSG_NOT_JSON_ARRAY), CODE_NOT_JSON_ARRAY, bad_request=True)
            ctx.stop()
            return
        validate_array(value, validator, ctx)
    else:
        ctx.add_violation_for_current(
            ctx.translate(MSG_EXPECTED_JSON_OBJECT_OR_ARRAY), CODE_EXPECTED_JSON_OBJECT_OR_ARRAY, bad_request=True
        )
        ctx.stop()


def validate_object(obj: Dict[str, Any], validator: "Validator", ctx: ValidatorContext) -> None:
    """Validate ``obj`` (the value of the context's current frame)."""
    if validator.when_conditions and not ctx.meets_when_conditions(validator.when_conditions):
        LOGGER.debug("Validator skipped at %r: when-conditions not met", ctx.current_path)
        return
    with ctx.object_level():
        ceased = _check_constraints(obj, validator.constraints, ctx)
        if not ctx.continue_all:
            return
        properties = properties_repo.fetch(validator.properties)
        ordered = validator.ordered_property_checks or _any_ordered(properties)
        covered: Set[str] = set(properties)
        if not ceased:
            _check_properties(obj, properties, ordered, ctx)
            if not ctx.continue_all:
                return
        # base properties are already checked; variants may only repeat them unchanged
        claims: Dict[str, PropertyValidator] = dict(properties)
        for variant in validator.conditional_variants:
            if ctx.meets_when_conditions(variant.when_conditions):
                _apply_variant(obj, variant, covered, claims, ordered, ctx)
                if not ctx.continue_all:
                    return
        if not validator.ignore_unknown_properties:
            for key in obj:
                if key not in covered:
                    ctx.add_violation_for_property(key, ctx.translate(MSG_UNKNOWN_PROPERTY), CODE_UNKNOWN_PROPERTY)
                    if not ctx.continue_all:
                        return


def validate_array(arr: List[Any], validator: "Validator", ctx: ValidatorContext) -> None:
    """Validate each element of ``arr`` as an object of ``validator``.

    ``array_constraints`` are checked once against the list itself. Each
    element then gets its own path frame and condition scope and is
    validated exactly as a plain object would be, object constraints
    included.
    """
    if validator.array_constraints:
        with ctx.object_level():
            ceased = _check_constraints(arr, validator.array_constraints, ctx)
        if not ctx.continue_all or ceased:
            return
    length = len(arr)
    for index, element in enumerate(arr):
        if element is None:
            if not validator.allow_null_items:
                ctx.add_violation_for_index(index, ctx.translate(MSG_ARRAY_ELEMENT_NULL), CODE_ARRAY_ELEMENT_NULL)
        elif isinstance(element, dict):
            ctx.push_index(index, element, length)
            ctx.push_conditions()
            try:
                validate_object(element, validator, ctx)
            finally:
                ctx.pop_conditions()
                ctx.pop()
        else:
            ctx.add_violation_for_index(
                index, ctx.translate(MSG_ARRAY_ELEMENT_NOT_OBJECT), CODE_ARRAY_ELEMENT_NOT_OBJECT
            )
        if not ctx.continue_all:
            return


def validate_property(value: Any, rules: PropertyValidator, ctx: ValidatorContext) -> None:
    """Validate a present property value; the context frame is already pushed."""
    if value is None:
        if rules.not_null:
            ctx.add_violation_for_current(ctx.translate(MSG_NULL_NOT_ALLOWED), CODE_NULL_NOT_ALLOWED)
        return
    if not _type_matches(value, rules):
        translator = ctx.translator
        message = translator.translate_format(FMT_EXPECTED_TYPE, translator.translate_token(rules.type.token))
        ctx.add_violation_for_current(message, CODE_INVALID_TYPE)
        return
    for constraint in rules.constraints:
        ok, message = constraint.check(value, ctx)
        if not ok:
            ctx.add_violation_for_current(message, constraint.violation_code, constraint=constraint)
        if not ctx.continue_all or not ctx.continue_property:
            return
    if rules.object_validator is not None:
        check_object_validation(value, rules.object_validator, ctx)


def check_object_validation(value: Any, validator: "Validator", ctx: ValidatorContext) -> None:
    """Dispatch a property value to a nested validator by its shape."""
    allow_object = not validator.disallow_object
    if isinstance(value, dict) and allow_object:
        ctx.push_conditions()
        try:
            validate_object(value, validator, ctx)
        finally:
            ctx.pop_conditions()
    elif isinstance(value, list) and validator.allow_array:
        validate_array(value, validator, ctx)
    elif allow_object and validator.allow_array:
        ctx.add_violation_for_current(
            ctx.translate(MSG_VALUE_MUST_BE_OBJECT_OR_ARRAY), CODE_VALUE_MUST_BE_OBJECT_OR_ARRAY
        )
    elif allow_object:
        ctx.add_violation_for_current(ctx.translate(MSG_VALUE_MUST_BE_OBJECT), CODE_VALUE_MUST_BE_OBJECT)
    elif validator.allow_array:
        ctx.add_violation_for_current(ctx.translate(MSG_VALUE_MUST_BE_ARRAY), CODE_VALUE_MUST_BE_ARRAY)
    else:
        ctx.add_violation_for_current(ctx.translate(MSG_OBJECT_VALIDATOR_MALFORMED), CODE_OBJECT_VALIDATOR_MALFORMED)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------
def _type_matches(value: Any, rules: PropertyValidator) -> bool:
    if rules.object_validator is not None and rules.type in (JsonType.OBJECT, JsonType.ARRAY):
        # shape is settled by the nested validator
        return isinstance(value, (dict, list))
    return check_value_type(value, rules.type)


def _any_ordered(properties: Mapping[str, PropertyValidator]) -> bool:
    return any(rules.order != 0 for rules in properties.values())


def _ordered_items(
    properties: Mapping[str, PropertyValidator], ordered: bool
) -> Iterable[Tuple[str, PropertyValidator]]:
    if not ordered:
        return list(properties.items())
    return sorted(properties.items(), key=lambda item: (item[1].order, item[0]))


def _check_constraints(value: Any, constraints: Iterable["Constraint"], ctx: ValidatorContext) -> bool:
    """Run object-level constraints; return True when property checks should be skipped."""
    ctx.resume_property()
    for constraint in constraints:
        ok, message = constraint.check(value, ctx)
        if not ok:
            ctx.add_violation_for_current(message, constraint.violation_code, constraint=constraint)
        if not ctx.continue_all or not ctx.continue_property:
            break
    ceased = not ctx.continue_property
    ctx.resume_property()
    return ceased


def _check_properties(
    obj: Dict[str, Any], properties: Mapping[str, PropertyValidator], ordered: bool, ctx: ValidatorContext
) -> None:
    for name, rules in _ordered_items(properties, ordered):
        ctx.resume_property()
        _check_property(obj, name, rules, ctx)
        if not ctx.continue_all:
            break
    ctx.resume_property()


def _check_property(obj: Dict[str, Any], name: str, rules: PropertyValidator, ctx: ValidatorContext) -> None:
    if rules.when_conditions and not ctx.meets_when_conditions(rules.when_conditions):
        LOGGER.debug("Property %r skipped: when-conditions not met", name)
        return
    if name not in obj:
        mandatory = rules.mandatory and ctx.meets_when_conditions(rules.mandatory_when)
        message = MSG_MISSING_PROPERTY
        if not mandatory and rules.required_with is not None:
            current, ancestry = ctx.current_object()
            if rules.required_with.evaluate(current, ancestry, ctx):
                mandatory = True
                message = rules.required_with_message or MSG_MISSING_PROPERTY
        if mandatory:
            ctx.add_violation_for_property(name, ctx.translate(message), CODE_MISSING_PROPERTY)
        return
    unwanted = bool(rules.unwanted_conditions) and ctx.meets_any_condition(rules.unwanted_conditions)
    message = MSG_UNWANTED_PROPERTY
    if not unwanted and rules.unwanted_with is not None:
        current, ancestry = ctx.current_object()
        if rules.unwanted_with.evaluate(current, ancestry, ctx):
            unwanted = True
            message = rules.unwanted_with_message or MSG_UNWANTED_PROPERTY
    if unwanted:
        ctx.add_violation_for_property(name, ctx.translate(message), CODE_UNWANTED_PROPERTY)
        return
    value = obj[name]
    ctx.push_property(name, value)
    try:
        validate_property(value, rules, ctx)
    finally:
        ctx.pop()


def _apply_variant(
    obj: Dict[str, Any],
    variant: "ConditionalVariant",
    covered: Set[str],
    claims: Dict[str, PropertyValidator],
    ordered: bool,
    ctx: ValidatorContext,
) -> None:
    LOGGER.debug("Conditional variant %r active at %r", variant.when_conditions, ctx.current_path)
    ceased = _check_constraints(obj, variant.constraints, ctx)
    if not ctx.continue_all:
        return
    properties = properties_repo.fetch(variant.properties)
    additions: Dict[str, PropertyValidator] = {}
    for name, rules in properties.items():
        prior = claims.get(name)
        if prior is None:
            claims[name] = rules
            additions[name] = rules
        elif prior != rules:
            ctx.add_violation_for_property(name, ctx.translate(MSG_VARIANT_CONFLICT), CODE_VARIANT_CONFLICT)
            if not ctx.continue_all:
                return
    covered.update(properties)
    if not ceased:
        _check_properties(obj, additions, ordered or _any_ordered(additions), ctx)
        if not ctx.continue_all:
            return
    for nested in variant.conditional_variants:
        if ctx.meets_when_conditions(nested.when_conditions):
            _apply_variant(obj, nested, covered, claims, ordered, ctx)
            if not ctx.continue_all:
                return


__all__ = [
    "validate_value",
    "validate_object",
    "validate_array",
    "validate_property",
    "check_object_validation",
]
