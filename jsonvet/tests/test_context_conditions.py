from __future__ import annotations

import pytest

from jsonvet.errors import ReservedConditionError
from jsonvet.validation.context import ConditionTarget, ValidatorContext
from jsonvet.validation.violation import CODE_MISSING_PROPERTY, Violation


def _ctx(**kwargs) -> ValidatorContext:
    return ValidatorContext({}, **kwargs)


def test_set_has_clear() -> None:
    ctx = _ctx()
    ctx.set_condition("A")
    assert ctx.is_condition("A")
    ctx.clear_condition("A")
    assert not ctx.is_condition("A")


def test_leading_bang_clears() -> None:
    ctx = _ctx(conditions=["A"])
    ctx.set_condition("!A")
    assert not ctx.is_condition("A")


@pytest.mark.parametrize("token", ["%2", "%x"])
def test_reserved_tokens_cannot_be_set_or_cleared(token: str) -> None:
    ctx = _ctx()
    with pytest.raises(ReservedConditionError):
        ctx.set_condition(token)
    with pytest.raises(ReservedConditionError):
        ctx.clear_condition(token)


def test_reserved_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        _ctx(conditions=["%3"])


def test_scopes_copy_parent_and_do_not_leak_upward() -> None:
    ctx = _ctx(conditions=["ROOT"])
    ctx.push_conditions()
    assert ctx.is_condition("ROOT")
    ctx.set_condition("CHILD")
    ctx.pop_conditions()
    assert not ctx.is_condition("CHILD")
    assert ctx.is_condition("ROOT")


def test_parent_and_global_targets() -> None:
    ctx = _ctx()
    ctx.push_conditions()
    ctx.push_conditions()
    ctx.set_condition("P", ConditionTarget.PARENT)
    ctx.set_condition("G", ConditionTarget.GLOBAL)
    ctx.pop_conditions()
    assert ctx.is_condition("P")
    assert ctx.is_condition("G")
    ctx.pop_conditions()
    assert not ctx.is_condition("P")
    assert ctx.is_condition("G")


def test_clear_global_reaches_every_scope() -> None:
    ctx = _ctx(conditions=["G"])
    ctx.push_conditions()
    ctx.clear_condition("G", ConditionTarget.GLOBAL)
    ctx.pop_conditions()
    assert not ctx.is_condition("G")


def test_root_scope_is_never_popped() -> None:
    ctx = _ctx(conditions=["A"])
    ctx.pop_conditions()
    assert ctx.is_condition("A")


def test_synthetic_tokens_inside_array() -> None:
    ctx = _ctx()
    ctx.push_index(0, {}, 3)
    assert ctx.is_condition("first")
    assert not ctx.is_condition("last")
    assert not ctx.is_condition("%2")
    ctx.pop()
    ctx.push_index(1, {}, 3)
    assert ctx.is_condition("%2")
    assert not ctx.is_condition("%3")
    ctx.pop()
    ctx.push_index(2, {}, 3)
    assert ctx.is_condition("last")
    assert ctx.is_condition("%3")


def test_synthetic_tokens_outside_array() -> None:
    ctx = _ctx()
    assert not ctx.is_condition("%2")
    assert not ctx.is_condition("first")
    ctx.set_condition("first")
    assert ctx.is_condition("first")


def test_when_conditions_support_negation() -> None:
    ctx = _ctx(conditions=["A"])
    assert ctx.meets_when_conditions(["A", "!B"])
    assert not ctx.meets_when_conditions(["A", "B"])
    assert ctx.meets_when_conditions([])
    assert ctx.meets_any_condition(["B", "A"])
    assert not ctx.meets_any_condition([])


def test_paths() -> None:
    ctx = _ctx()
    ctx.push_property("items", [])
    ctx.push_index(0, {}, 1)
    ctx.push_property("name", "x")
    assert ctx.current_path == "items[0].name"
    assert ctx.current_property == "name"
    assert ctx.depth == 3
    ctx.pop()
    ctx.pop()
    ctx.pop()
    ctx.pop()
    assert ctx.current_path == ""


def test_current_object_and_ancestry() -> None:
    root = {"a": {"b": 1}}
    ctx = ValidatorContext(root)
    ctx.push_property("a", root["a"])
    # property level: the object under check is the enclosing one
    current, ancestry = ctx.current_object()
    assert current is root
    assert ancestry == []
    with ctx.object_level():
        current, ancestry = ctx.current_object()
        assert current == {"b": 1}
        assert ancestry == [root]


def test_stop_on_first_keeps_one_violation() -> None:
    ctx = _ctx(stop_on_first=True)
    ctx.add_violation_for_property("a", "Missing property", CODE_MISSING_PROPERTY)
    ctx.add_violation_for_property("b", "Missing property", CODE_MISSING_PROPERTY)
    assert len(ctx.violations) == 1
    assert not ctx.continue_all
    assert not ctx.ok


def test_violation_cap() -> None:
    ctx = _ctx(max_violations=2)
    for name in "abc":
        if ctx.continue_all:
            ctx.add_violation_for_property(name, "Missing property", CODE_MISSING_PROPERTY)
    assert [v.path for v in ctx.violations] == ["a", "b"]


def test_violation_to_dict() -> None:
    violation = Violation("b", "a.b", "Missing property", CODE_MISSING_PROPERTY)
    assert violation.to_dict() == {
        "property": "b",
        "path": "a.b",
        "message": "Missing property",
        "code": CODE_MISSING_PROPERTY,
        "badRequest": False,
    }
