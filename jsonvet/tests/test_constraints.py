from __future__ import annotations

import re

import pytest

from jsonvet.constraints import (
    ArrayConditionalConstraint,
    ArrayOf,
    ArrayUnique,
    ClearCondition,
    ConstraintSet,
    CustomConstraint,
    FailWhen,
    Length,
    Maximum,
    Minimum,
    MultipleOf,
    Positive,
    Range,
    SetConditionFrom,
    SetConditionIf,
    StringNotEmpty,
    StringPattern,
    StringValidToken,
    StringValidUnicodeNormalization,
    UnicodeForm,
)
from jsonvet.errors import SchemaError
from jsonvet.i18n import DEFAULT_TRANSLATOR
from jsonvet.validation import JsonType
from jsonvet.validation.context import ConditionTarget, ValidatorContext


@pytest.fixture()
def ctx() -> ValidatorContext:
    return ValidatorContext({})


def test_length(ctx) -> None:
    c = Length(minimum=2, maximum=4)
    assert c.check("ab", ctx)[0]
    assert c.check([1, 2, 3, 4], ctx)[0]
    assert not c.check("a", ctx)[0]
    assert not c.check("abcde", ctx)[0]
    assert c.check(7, ctx)[0]
    assert not Length(minimum=2, exclusive_min=True).check("ab", ctx)[0]
    assert Length(minimum=1).check("x" * 1000, ctx)[0]


def test_length_messages() -> None:
    assert Length(minimum=1, maximum=10).default_message(DEFAULT_TRANSLATOR) == (
        "Value length must be between 1 (inclusive) and 10 (inclusive)"
    )
    assert Length(minimum=3).default_message(DEFAULT_TRANSLATOR) == "Value length must be at least 3"


def test_message_override(ctx) -> None:
    ok, message = Length(minimum=5, message="Too short").check("abc", ctx)
    assert not ok
    assert message == "Too short"


def test_numeric_bounds(ctx) -> None:
    assert Range(minimum=3, maximum=4).check(3.5, ctx)[0]
    assert not Range(minimum=3, maximum=4).check(5, ctx)[0]
    assert not Range(minimum=3, maximum=4, exclusive_max=True).check(4, ctx)[0]
    assert Range(minimum=3, maximum=4).check("not a number", ctx)[0]
    assert not Minimum(value=10).check(9, ctx)[0]
    assert not Minimum(value=10, exclusive=True).check(10, ctx)[0]
    assert Maximum(value=10).check(10, ctx)[0]
    assert not Maximum(value=10, exclusive=True).check(10, ctx)[0]


def test_positive_and_multiple_of(ctx) -> None:
    assert not Positive().check(0, ctx)[0]
    assert Positive(include_zero=True).check(0, ctx)[0]
    assert not Positive().check(-1, ctx)[0]
    assert MultipleOf(value=3).check(9, ctx)[0]
    assert not MultipleOf(value=3).check(10, ctx)[0]
    assert not MultipleOf(value=3).check(4.5, ctx)[0]


def test_string_constraints(ctx) -> None:
    assert not StringNotEmpty().check("", ctx)[0]
    assert StringNotEmpty().check(" ", ctx)[0]
    pattern = StringPattern(regexp=re.compile("[a-z]+"))
    assert pattern.check("abc1", ctx)[0]
    assert not pattern.check("123", ctx)[0]
    anchored = StringPattern(regexp=re.compile("^[a-z]+$"))
    assert anchored.check("abc", ctx)[0]
    assert not anchored.check("abc1", ctx)[0]
    tokens = StringValidToken(tokens=["tea", "coffee"], ignore_case=True)
    assert tokens.check("TEA", ctx)[0]
    ok, message = StringValidToken(tokens=["tea", "coffee"]).check("TEA", ctx)
    assert not ok
    assert message == 'String value must be valid token - "tea","coffee"'


def test_unicode_normalization(ctx) -> None:
    decomposed = "e\u0301"
    assert not StringValidUnicodeNormalization().check(decomposed, ctx)[0]
    assert StringValidUnicodeNormalization(form=UnicodeForm.NFD).check(decomposed, ctx)[0]


def test_array_constraints(ctx) -> None:
    assert ArrayOf(type=JsonType.STRING).check(["a", "b"], ctx)[0]
    assert not ArrayOf(type=JsonType.STRING).check(["a", 1], ctx)[0]
    assert not ArrayOf(type=JsonType.STRING).check(["a", None], ctx)[0]
    assert ArrayOf(type=JsonType.STRING, allow_null_element=True).check(["a", None], ctx)[0]
    assert not ArrayUnique().check([1, 2, 1], ctx)[0]
    assert ArrayUnique().check(["a", "A"], ctx)[0]
    assert not ArrayUnique(ignore_case=True).check(["a", "A"], ctx)[0]
    assert not ArrayUnique().check([{"a": 1, "b": 2}, {"b": 2, "a": 1}], ctx)[0]


def test_array_of_message() -> None:
    assert ArrayOf(type=JsonType.STRING).default_message(DEFAULT_TRANSLATOR) == "Array elements must be of type string"


# ------------------------------------------------------------------
# Composites
# ------------------------------------------------------------------
def test_constraint_set_all_of(ctx) -> None:
    group = ConstraintSet(constraints=[Length(minimum=1, maximum=10), StringPattern(regexp=re.compile("[a-z]+"))])
    assert group.check("hello", ctx)[0]
    ok, message = group.check("", ctx)
    assert not ok
    assert message.startswith("Value length must be between")


def test_constraint_set_one_of(ctx) -> None:
    group = ConstraintSet(
        one_of=True,
        constraints=[StringValidToken(tokens=["a"]), StringValidToken(tokens=["b"])],
    )
    assert group.check("b", ctx)[0]
    ok, message = group.check("c", ctx)
    assert not ok
    assert message == 'String value must be valid token - "a"; String value must be valid token - "b"'
    assert ConstraintSet(one_of=True, message="Pick a or b", constraints=group.constraints).check("c", ctx) == (
        False,
        "Pick a or b",
    )


def test_one_of_members_cannot_stop_evaluation(ctx) -> None:
    group = ConstraintSet(one_of=True, constraints=[Length(minimum=5, stop=True), StringNotEmpty()])
    assert group.check("abc", ctx)[0]
    assert ctx.continue_property and ctx.continue_all


def test_constraint_set_default_message() -> None:
    assert ConstraintSet(constraints=[Length(), Length()]).default_message(DEFAULT_TRANSLATOR) == (
        "Constraint set must pass all of 2 undisclosed validations"
    )


@pytest.mark.parametrize(
    "when, expected",
    [
        ("first", [True, False, False, False]),
        ("last", [False, False, False, True]),
        ("%2", [False, True, False, True]),
        ("%3", [False, False, True, False]),
        (">1", [False, False, True, True]),
        ("<1", [True, False, False, False]),
        ("2", [False, False, True, False]),
        ("!first", [False, True, True, True]),
        ("", [True, True, True, True]),
    ],
)
def test_array_position_tokens(when: str, expected: list) -> None:
    constraint = ArrayConditionalConstraint(when=when)
    assert [constraint.position_holds(i, 4) for i in range(4)] == expected


@pytest.mark.parametrize("when", ["%0", "%x", "odd", ">"])
def test_invalid_array_position_token(when: str) -> None:
    with pytest.raises(SchemaError):
        ArrayConditionalConstraint(when=when)


def test_array_conditional_skipped_outside_arrays(ctx) -> None:
    constraint = ArrayConditionalConstraint(when="first", constraint=StringNotEmpty())
    assert constraint.check("", ctx)[0]
    ctx.push_index(0, {}, 2)
    assert not constraint.check("", ctx)[0]


def test_array_conditional_ancestry(ctx) -> None:
    constraint = ArrayConditionalConstraint(when="last", ancestry=1, constraint=StringNotEmpty())
    ctx.push_index(1, {}, 2)
    ctx.push_property("inner", [])
    ctx.push_index(0, {}, 5)
    assert not constraint.check("", ctx)[0]


# ------------------------------------------------------------------
# Condition constraints
# ------------------------------------------------------------------
def test_set_condition_from_value(ctx) -> None:
    SetConditionFrom(prefix="KIND_", mapping={"b": "beta"}).check("b", ctx)
    SetConditionFrom(prefix="KIND_").check("a", ctx)
    assert ctx.is_condition("KIND_beta")
    assert ctx.is_condition("KIND_a")
    SetConditionFrom().check(42, ctx)
    assert ctx.conditions == frozenset({"KIND_beta", "KIND_a"})


def test_set_condition_from_ignores_reserved_tokens(ctx) -> None:
    assert SetConditionFrom().check("%2", ctx) == (True, "")
    assert ctx.conditions == frozenset()


def test_set_condition_if(ctx) -> None:
    constraint = SetConditionIf(constraint=StringNotEmpty(), set_ok="FILLED", set_fail="EMPTY")
    assert constraint.check("", ctx)[0]
    assert ctx.is_condition("EMPTY")
    constraint.check("x", ctx)
    assert ctx.is_condition("FILLED")


def test_clear_condition_targets(ctx) -> None:
    ctx.set_condition("A")
    ctx.push_conditions()
    ClearCondition(condition="A", target=ConditionTarget.PARENT).check(None, ctx)
    ctx.pop_conditions()
    assert not ctx.is_condition("A")


def test_fail_when(ctx) -> None:
    constraint = FailWhen(conditions=["A", "!B"], message="Not with A")
    assert constraint.check(1, ctx)[0]
    ctx.set_condition("A")
    assert constraint.check(1, ctx) == (False, "Not with A")
    ctx.set_condition("B")
    assert constraint.check(1, ctx)[0]


def test_custom_constraint(ctx) -> None:
    even = CustomConstraint(lambda value, _ctx: value % 2 == 0, message="Must be even")
    assert even.check(2, ctx)[0]
    assert even.check(3, ctx) == (False, "Must be even")
    detailed = CustomConstraint(lambda value, _ctx: (False, "Nope"))
    assert detailed.check(1, ctx) == (False, "Nope")
    assert not CustomConstraint.serializable
