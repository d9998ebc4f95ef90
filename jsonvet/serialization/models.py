"""Pydantic models describing the serialized schema format.

Keys are camelCase on the wire; unknown keys are ignored.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class OasInfoModel(_WireModel):
    """Documentation metadata."""

    description: str = ""
    title: str = ""
    format: str = ""
    example: str = ""
    deprecated: bool = False


class ConstraintRef(_WireModel):
    """A constraint by registry name plus its field values."""

    name: str = Field(..., description="Registered constraint name")
    field_values: Dict[str, Any] = Field(default_factory=dict, alias="fields")
    when_conditions: Optional[List[str]] = Field(default=None, alias="whenConditions")
    others_expr: Optional[str] = Field(default=None, alias="othersExpr")


class PropertyValidatorModel(_WireModel):
    type: Union[StrictInt, StrictStr] = Field(default="any", description="Type token or numeric code")
    not_null: bool = Field(default=False, alias="notNull")
    mandatory: bool = False
    mandatory_when: List[str] = Field(default_factory=list, alias="mandatoryWhen")
    order: int = 0
    when_conditions: List[str] = Field(default_factory=list, alias="whenConditions")
    unwanted_conditions: List[str] = Field(default_factory=list, alias="unwantedConditions")
    constraints: List[ConstraintRef] = Field(default_factory=list)
    object_validator: Optional["ValidatorModel"] = Field(default=None, alias="objectValidator")
    required_with: str = Field(default="", alias="requiredWith")
    required_with_message: str = Field(default="", alias="requiredWithMessage")
    unwanted_with: str = Field(default="", alias="unwantedWith")
    unwanted_with_message: str = Field(default="", alias="unwantedWithMessage")
    oas_info: Optional[OasInfoModel] = Field(default=None, alias="oasInfo")


class ConditionalVariantModel(_WireModel):
    when_conditions: List[str] = Field(default_factory=list, alias="whenConditions")
    constraints: List[ConstraintRef] = Field(default_factory=list)
    properties: Dict[str, Optional[PropertyValidatorModel]] = Field(default_factory=dict)
    conditional_variants: List["ConditionalVariantModel"] = Field(
        default_factory=list, alias="conditionalVariants"
    )


class ValidatorModel(_WireModel):
    properties: Dict[str, Optional[PropertyValidatorModel]] = Field(default_factory=dict)
    constraints: List[ConstraintRef] = Field(default_factory=list)
    array_constraints: List[ConstraintRef] = Field(default_factory=list, alias="arrayConstraints")
    when_conditions: List[str] = Field(default_factory=list, alias="whenConditions")
    conditional_variants: List[ConditionalVariantModel] = Field(
        default_factory=list, alias="conditionalVariants"
    )
    ignore_unknown_properties: bool = Field(default=False, alias="ignoreUnknownProperties")
    allow_array: bool = Field(default=False, alias="allowArray")
    disallow_object: bool = Field(default=False, alias="disallowObject")
    allow_null_json: bool = Field(default=False, alias="allowNullJson")
    allow_null_items: bool = Field(default=False, alias="allowNullItems")
    stop_on_first: bool = Field(default=False, alias="stopOnFirst")
    use_number: bool = Field(default=False, alias="useNumber")
    ordered_property_checks: bool = Field(default=False, alias="orderedPropertyChecks")
    oas_info: Optional[OasInfoModel] = Field(default=None, alias="oasInfo")


PropertyValidatorModel.model_rebuild()
ConditionalVariantModel.model_rebuild()
ValidatorModel.model_rebuild()

__all__ = [
    "ConditionalVariantModel",
    "ConstraintRef",
    "OasInfoModel",
    "PropertyValidatorModel",
    "ValidatorModel",
]
