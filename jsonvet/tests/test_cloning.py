from __future__ import annotations

from jsonvet.constraints import Length
from jsonvet.validation import ConditionalVariant, JsonType, OasInfo, PropertyValidator, Validator


def _validator() -> Validator:
    length = Length(minimum=1)
    return Validator(
        constraints=[length],
        when_conditions=["A"],
        oas_info=OasInfo(title="T"),
        properties={
            "name": PropertyValidator(
                type=JsonType.STRING,
                constraints=[length],
                mandatory_when=["B"],
                required_with="x || y",
                object_validator=None,
            ),
            "child": PropertyValidator(
                type=JsonType.OBJECT,
                object_validator=Validator(properties={"c": PropertyValidator()}),
            ),
        },
        conditional_variants=[ConditionalVariant(when_conditions=["V"], properties={"v": PropertyValidator()})],
    )


def test_clone_equals_original() -> None:
    original = _validator()
    assert original.clone() == original


def test_clone_has_no_shared_containers() -> None:
    original = _validator()
    copy = original.clone()
    assert copy.properties is not original.properties
    assert copy.constraints is not original.constraints
    assert copy.when_conditions is not original.when_conditions
    assert copy.properties["name"] is not original.properties["name"]
    assert copy.properties["name"].mandatory_when is not original.properties["name"].mandatory_when
    assert copy.properties["name"].required_with is not original.properties["name"].required_with
    assert copy.properties["child"].object_validator is not original.properties["child"].object_validator
    assert copy.conditional_variants[0] is not original.conditional_variants[0]
    assert copy.oas_info is not original.oas_info


def test_mutating_clone_leaves_original_alone() -> None:
    original = _validator()
    copy = original.clone()
    copy.properties["extra"] = PropertyValidator()
    copy.properties["name"].mandatory = True
    copy.properties["child"].object_validator.properties.pop("c")
    copy.conditional_variants[0].when_conditions.append("W")
    copy.oas_info.title = "changed"
    assert "extra" not in original.properties
    assert not original.properties["name"].mandatory
    assert "c" in original.properties["child"].object_validator.properties
    assert original.conditional_variants[0].when_conditions == ["V"]
    assert original.oas_info.title == "T"


def test_leaf_constraints_are_shared() -> None:
    original = _validator()
    copy = original.clone()
    assert copy.constraints[0] is original.constraints[0]
    assert copy.properties["name"].constraints[0] is original.properties["name"].constraints[0]
