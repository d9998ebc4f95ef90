"""Convert validators to and from their self-describing JSON form.

Constraints are written as ``{"name": ..., "fields": {...}}`` and rebuilt
from prototypes held in the constraint registry.  A conditional constraint
is written as its inner constraint with ``whenConditions`` / ``othersExpr``
attached, and such a reference is wrapped again on the way back in.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..constraints.base import Constraint
from ..constraints.composite import ConditionalConstraint
from ..constraints.registry import get_registered_constraint, has_constraint
from ..errors import NotSerializableError, SchemaError, UnknownConstraintError
from ..validation.expression import parse_expression
from ..validation.property_validator import OasInfo, PropertyValidator
from ..validation.types import JsonType
from ..validation.validator import ConditionalVariant, Validator
from .fields import FieldCodec
from .models import (
    ConditionalVariantModel,
    ConstraintRef,
    OasInfoModel,
    PropertyValidatorModel,
    ValidatorModel,
)

LOGGER = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse_model(model: Type[ModelT], data: Any, label: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise SchemaError(f"invalid serialized {label}: {exc}") from exc


# ------------------------------------------------------------------
# To serialized form
# ------------------------------------------------------------------
def _oas_to_dict(info: OasInfo) -> Dict[str, Any]:
    return {
        "description": info.description,
        "title": info.title,
        "format": info.format,
        "example": info.example,
        "deprecated": info.deprecated,
    }


def _properties_to_dict(properties: Dict[str, Optional[PropertyValidator]]) -> Dict[str, Any]:
    return {
        name: property_validator_to_dict(rules) if rules is not None else None
        for name, rules in properties.items()
    }


def validator_to_dict(validator: Validator) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "ignoreUnknownProperties": validator.ignore_unknown_properties,
        "allowArray": validator.allow_array,
        "disallowObject": validator.disallow_object,
        "allowNullJson": validator.allow_null_json,
        "allowNullItems": validator.allow_null_items,
        "stopOnFirst": validator.stop_on_first,
        "useNumber": validator.use_number,
        "orderedPropertyChecks": validator.ordered_property_checks,
        "properties": _properties_to_dict(validator.properties),
    }
    if validator.constraints:
        out["constraints"] = [constraint_to_dict(c) for c in validator.constraints]
    if validator.array_constraints:
        out["arrayConstraints"] = [constraint_to_dict(c) for c in validator.array_constraints]
    if validator.when_conditions:
        out["whenConditions"] = list(validator.when_conditions)
    if validator.conditional_variants:
        out["conditionalVariants"] = [_variant_to_dict(v) for v in validator.conditional_variants]
    if validator.oas_info is not None:
        out["oasInfo"] = _oas_to_dict(validator.oas_info)
    return out


def _variant_to_dict(variant: ConditionalVariant) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "whenConditions": list(variant.when_conditions),
        "properties": _properties_to_dict(variant.properties),
    }
    if variant.constraints:
        out["constraints"] = [constraint_to_dict(c) for c in variant.constraints]
    if variant.conditional_variants:
        out["conditionalVariants"] = [_variant_to_dict(v) for v in variant.conditional_variants]
    return out


def property_validator_to_dict(rules: PropertyValidator) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "type": rules.type.token,
        "notNull": rules.not_null,
        "mandatory": rules.mandatory,
        "order": rules.order,
        "requiredWithMessage": rules.required_with_message,
        "unwantedWithMessage": rules.unwanted_with_message,
    }
    if rules.mandatory_when:
        out["mandatoryWhen"] = list(rules.mandatory_when)
    if rules.when_conditions:
        out["whenConditions"] = list(rules.when_conditions)
    if rules.unwanted_conditions:
        out["unwantedConditions"] = list(rules.unwanted_conditions)
    if rules.constraints:
        out["constraints"] = [constraint_to_dict(c) for c in rules.constraints]
    if rules.object_validator is not None:
        out["objectValidator"] = validator_to_dict(rules.object_validator)
    if rules.required_with is not None and not rules.required_with.is_empty:
        out["requiredWith"] = str(rules.required_with)
    if rules.unwanted_with is not None and not rules.unwanted_with.is_empty:
        out["unwantedWith"] = str(rules.unwanted_with)
    if rules.oas_info is not None:
        out["oasInfo"] = _oas_to_dict(rules.oas_info)
    return out


def constraint_to_dict(constraint: Constraint) -> Dict[str, Any]:
    """Serialized reference for one constraint.

    Raises :class:`~jsonvet.errors.NotSerializableError` for constraints that
    declare themselves unserializable.
    """
    if not constraint.serializable:
        raise NotSerializableError(f"constraint '{constraint.constraint_name()}' cannot be serialized")
    if isinstance(constraint, ConditionalConstraint) and not isinstance(
        constraint.constraint, (ConditionalConstraint, type(None))
    ):
        out = constraint_to_dict(constraint.constraint)
        out["whenConditions"] = list(constraint.when)
        if constraint.others is not None:
            out["othersExpr"] = str(constraint.others)
        return out
    name = constraint.constraint_name()
    if not has_constraint(name):
        LOGGER.warning("Constraint '%s' is not registered; the serialized schema will not load back", name)
    return {"name": name, "fields": _codec.encode_fields(constraint)}


def to_json(validator: Validator, *, indent: int | None = None) -> str:
    return json.dumps(validator_to_dict(validator), indent=indent)


# ------------------------------------------------------------------
# From serialized form
# ------------------------------------------------------------------
def _build_oas(model: Optional[OasInfoModel]) -> Optional[OasInfo]:
    if model is None:
        return None
    return OasInfo(
        description=model.description,
        title=model.title,
        format=model.format,
        example=model.example,
        deprecated=model.deprecated,
    )


def _build_constraint(ref: ConstraintRef) -> Constraint:
    prototype = get_registered_constraint(ref.name)
    if prototype is None:
        raise UnknownConstraintError(ref.name)
    constraint = _codec.build(ref.name, prototype, ref.field_values)
    if ref.when_conditions is not None or ref.others_expr is not None:
        others = parse_expression(ref.others_expr) if ref.others_expr else None
        constraint = ConditionalConstraint(
            constraint=constraint, when=list(ref.when_conditions or []), others=others
        )
    return constraint


def _build_constraints(refs: List[ConstraintRef]) -> List[Constraint]:
    return [_build_constraint(ref) for ref in refs]


def _build_properties(
    properties: Dict[str, Optional[PropertyValidatorModel]]
) -> Dict[str, Optional[PropertyValidator]]:
    return {
        name: _build_property(model) if model is not None else None
        for name, model in properties.items()
    }


def _build_property(model: PropertyValidatorModel) -> PropertyValidator:
    return PropertyValidator(
        type=JsonType.parse(model.type),
        not_null=model.not_null,
        mandatory=model.mandatory,
        mandatory_when=list(model.mandatory_when),
        constraints=_build_constraints(model.constraints),
        object_validator=_build_validator(model.object_validator) if model.object_validator else None,
        order=model.order,
        when_conditions=list(model.when_conditions),
        unwanted_conditions=list(model.unwanted_conditions),
        required_with=model.required_with,
        required_with_message=model.required_with_message,
        unwanted_with=model.unwanted_with,
        unwanted_with_message=model.unwanted_with_message,
        oas_info=_build_oas(model.oas_info),
    )


def _build_variant(model: ConditionalVariantModel) -> ConditionalVariant:
    return ConditionalVariant(
        when_conditions=list(model.when_conditions),
        constraints=_build_constraints(model.constraints),
        properties=_build_properties(model.properties),
        conditional_variants=[_build_variant(v) for v in model.conditional_variants],
    )


def _build_validator(model: ValidatorModel) -> Validator:
    return Validator(
        properties=_build_properties(model.properties),
        constraints=_build_constraints(model.constraints),
        array_constraints=_build_constraints(model.array_constraints),
        ignore_unknown_properties=model.ignore_unknown_properties,
        allow_array=model.allow_array,
        disallow_object=model.disallow_object,
        allow_null_json=model.allow_null_json,
        allow_null_items=model.allow_null_items,
        stop_on_first=model.stop_on_first,
        use_number=model.use_number,
        ordered_property_checks=model.ordered_property_checks,
        when_conditions=list(model.when_conditions),
        conditional_variants=[_build_variant(v) for v in model.conditional_variants],
        oas_info=_build_oas(model.oas_info),
    )


def validator_from_dict(data: Any) -> Validator:
    """Rebuild a validator; raises :class:`~jsonvet.errors.SchemaError` subclasses."""
    return _build_validator(_parse_model(ValidatorModel, data, "validator"))


def property_validator_from_dict(data: Any) -> PropertyValidator:
    return _build_property(_parse_model(PropertyValidatorModel, data, "property validator"))


def constraint_from_dict(data: Any) -> Constraint:
    return _build_constraint(_parse_model(ConstraintRef, data, "constraint"))


def from_json(text: str | bytes) -> Validator:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"serialized validator is not valid JSON: {exc}") from exc
    return validator_from_dict(data)


_codec = FieldCodec(constraint_to_dict, constraint_from_dict, validator_to_dict, validator_from_dict)

__all__ = [
    "constraint_from_dict",
    "constraint_to_dict",
    "from_json",
    "property_validator_from_dict",
    "property_validator_to_dict",
    "to_json",
    "validator_from_dict",
    "validator_to_dict",
]
