"""Behaviour of the bundled schemas under config/schemas."""
from __future__ import annotations

import pytest

from jsonvet.schemas import resolve_schema, schema_ids
from jsonvet.serialization import validator_from_dict, validator_to_dict
from jsonvet.validation.violation import (
    CODE_CONSTRAINT_FAILED,
    CODE_MISSING_PROPERTY,
    CODE_NOT_JSON_OBJECT,
    CODE_UNWANTED_PROPERTY,
)


def _check(schema_id: str, document):
    return resolve_schema(schema_id).validator.validate(document)


def _codes(result):
    return [(v.path, v.code) for v in result.violations]


@pytest.mark.parametrize("schema_id", sorted(schema_ids()))
def test_bundled_schema_round_trips(schema_id: str) -> None:
    serialized = validator_to_dict(resolve_schema(schema_id).validator)
    assert validator_to_dict(validator_from_dict(serialized)) == serialized


def test_tea_order() -> None:
    assert _check("beverage_order", {"type": "tea", "blend": "Assam", "quantity": 2}).ok
    assert _codes(_check("beverage_order", {"type": "tea", "quantity": 2})) == [("blend", CODE_MISSING_PROPERTY)]


def test_coffee_order() -> None:
    assert _check("beverage_order", {"type": "coffee", "roast": "dark", "quantity": 1, "milk": True}).ok
    result = _check("beverage_order", {"type": "coffee", "roast": "dark", "blend": "assam", "quantity": 1})
    assert _codes(result) == [("blend", CODE_UNWANTED_PROPERTY)]


def test_milk_type_needs_milk() -> None:
    result = _check(
        "beverage_order", {"type": "coffee", "roast": "light", "quantity": 1, "milkType": "oat"}
    )
    assert _codes(result) == [("milkType", CODE_UNWANTED_PROPERTY)]
    assert result.violations[0].message == "Milk type requires milk"


def test_quantity_range() -> None:
    result = _check("beverage_order", {"type": "tea", "blend": "sencha", "quantity": 20})
    assert _codes(result) == [("quantity", CODE_CONSTRAINT_FAILED)]


def test_personal_profile() -> None:
    doc = {
        "accountType": "personal",
        "name": "Ada",
        "email": "ada@example.org",
        "address": {"street": "1 Main St", "city": "Oslo", "country": "NO"},
        "tags": ["a", "b"],
    }
    assert _check("user_profile", doc).ok


def test_business_profile_needs_company_and_postcode() -> None:
    doc = {
        "accountType": "business",
        "name": "Ada",
        "email": "ada@example.org",
        "address": {"street": "1 Main St", "city": "Oslo", "country": "NO"},
    }
    result = _check("user_profile", doc)
    assert _codes(result) == [("address.postcode", CODE_MISSING_PROPERTY), ("company", CODE_MISSING_PROPERTY)]

    doc["address"]["postcode"] = "0150"
    doc["company"] = "Analytical Engines AS"
    assert _check("user_profile", doc).ok


def test_profile_constraint_messages() -> None:
    doc = {"accountType": "personal", "name": "Ada", "email": "nope", "tags": ["a", "A"]}
    result = _check("user_profile", doc)
    assert [(v.path, v.message) for v in result.violations] == [
        ("email", "Email address is invalid"),
        ("tags", "Array elements must be unique"),
    ]


def test_order_lines() -> None:
    lines = [{"sku": "ABC-0001", "qty": 3}, {"sku": "ABC-0002", "qty": 60, "gift": True, "giftMessage": "Enjoy"}]
    result = _check("order_lines", lines)
    # only the last line is capped
    assert _codes(result) == [("[1].qty", CODE_CONSTRAINT_FAILED)]

    lines[1]["qty"] = 10
    assert _check("order_lines", lines).ok

    # sku patterns are anchored at both ends
    lines[0]["sku"] = "xABC-00012"
    assert _codes(_check("order_lines", lines)) == [("[0].sku", CODE_CONSTRAINT_FAILED)]


def test_order_lines_gift_message() -> None:
    result = _check("order_lines", [{"sku": "ABC-0001", "qty": 1, "gift": True}, {"sku": "ABC-0002", "qty": 1, "giftMessage": "x"}])
    assert _codes(result) == [("[0].giftMessage", CODE_MISSING_PROPERTY), ("[1].giftMessage", CODE_UNWANTED_PROPERTY)]


def test_order_lines_requires_array() -> None:
    assert _codes(_check("order_lines", {"sku": "ABC-0001", "qty": 1})) == [("", CODE_NOT_JSON_OBJECT)]
    assert _codes(_check("order_lines", [])) == [("", CODE_CONSTRAINT_FAILED)]
