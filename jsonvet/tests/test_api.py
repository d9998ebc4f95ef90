from __future__ import annotations

from jsonvet.schemas import register_schema, reload_registry
from jsonvet.validation import Validator
from jsonvet.validation.violation import (
    CODE_INVALID_TYPE,
    CODE_MISSING_PROPERTY,
    CODE_REQUEST_BODY_EMPTY,
    CODE_UNABLE_TO_DECODE,
)

TEA = {"type": "tea", "blend": "assam", "quantity": 1}


def test_list_schemas(client) -> None:
    response = client.get("/api/schemas")
    assert response.status_code == 200
    ids = [item["id"] for item in response.json()]
    assert {"beverage_order", "order_lines", "user_profile"} <= set(ids)


def test_get_schema(client) -> None:
    response = client.get("/api/schemas/Beverage_Order")
    assert response.status_code == 200
    payload = response.json()
    assert payload["id"] == "beverage_order"
    assert payload["schema"]["properties"]["type"]["order"] == -1


def test_get_schema_missing(client) -> None:
    assert client.get("/api/schemas/nothing-like-it").status_code == 404


def test_get_schema_openapi(client) -> None:
    response = client.get("/api/schemas/user_profile/openapi")
    assert response.status_code == 200
    schema = response.json()
    assert schema["type"] == "object"
    assert schema["title"] == "User profile"
    assert "email" in schema["required"]
    assert schema["properties"]["address"]["properties"]["city"]["type"] == "string"

    lines = client.get("/api/schemas/order_lines/openapi").json()
    assert lines["type"] == "array"
    assert lines["items"]["properties"]["qty"]["type"] == "integer"


def test_validate_named_ok(client) -> None:
    response = client.post("/api/validate/beverage_order", json=TEA)
    assert response.status_code == 200
    assert response.json() == {"ok": True, "schemaId": "beverage_order", "violations": []}


def test_validate_named_violations(client) -> None:
    response = client.post("/api/validate/beverage_order", json={"type": "tea", "quantity": "two"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is False
    assert [(v["path"], v["code"]) for v in payload["violations"]] == [
        ("blend", CODE_MISSING_PROPERTY),
        ("quantity", CODE_INVALID_TYPE),
    ]
    assert payload["violations"][0]["badRequest"] is False


def test_validate_named_translated(client) -> None:
    response = client.post(
        "/api/validate/beverage_order",
        json={"type": "tea", "quantity": 1},
        headers={"Accept-Language": "fr-FR,fr;q=0.9"},
    )
    assert response.json()["violations"][0]["message"] == "Propriété manquante"


def test_validate_named_bad_bodies(client) -> None:
    response = client.post(
        "/api/validate/beverage_order", content=b"{nope", headers={"content-type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["violations"][0]["code"] == CODE_UNABLE_TO_DECODE

    response = client.post("/api/validate/beverage_order", content=b"")
    assert response.status_code == 400
    assert response.json()["violations"][0]["code"] == CODE_REQUEST_BODY_EMPTY


def test_validate_named_with_conditions(client) -> None:
    # no "type", so only the seeded condition makes blend mandatory
    response = client.post("/api/validate/beverage_order", params={"condition": "TEA"}, json={"quantity": 1})
    assert {v["path"] for v in response.json()["violations"]} == {"type", "blend"}

    response = client.post("/api/validate/beverage_order", json={"quantity": 1})
    assert {v["path"] for v in response.json()["violations"]} == {"type"}

    response = client.post("/api/validate/beverage_order", params={"condition": "%2"}, json=TEA)
    assert response.status_code == 400


def test_validate_unknown_schema(client) -> None:
    assert client.post("/api/validate/nothing-like-it", json={}).status_code == 404


def test_validate_adhoc(client) -> None:
    schema = {
        "properties": {
            "a": {"type": "string"},
            "b": {"type": "string", "requiredWith": "a && !c"},
            "c": {"type": "string"},
        }
    }
    response = client.post("/api/validate", json={"schema": schema, "document": {"a": "x"}})
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is False
    assert payload["schemaId"] is None
    assert [v["path"] for v in payload["violations"]] == ["b"]

    response = client.post("/api/validate", json={"schema": schema, "document": {"a": "x", "c": "y"}})
    assert response.json()["ok"] is True


def test_validate_adhoc_with_conditions(client) -> None:
    schema = {"properties": {"plan": {"type": "string", "mandatory": True, "mandatoryWhen": ["IS_PREMIUM"]}}}
    response = client.post("/api/validate", json={"schema": schema, "document": {}, "conditions": ["IS_PREMIUM"]})
    assert [v["path"] for v in response.json()["violations"]] == ["plan"]


def test_validate_adhoc_bad_schema(client) -> None:
    response = client.post(
        "/api/validate",
        json={"schema": {"properties": {"a": {"constraints": [{"name": "Nope"}]}}}, "document": {}},
    )
    assert response.status_code == 400
    assert "unknown constraint 'Nope'" in response.json()["detail"]


def test_parse_expression(client) -> None:
    response = client.post("/api/expressions/parse", json={"expression": "a&&!(b||'c d')"})
    assert response.status_code == 200
    assert response.json() == {"ok": True, "expression": "a && !(b || 'c d')", "error": None, "position": None}

    response = client.post("/api/expressions/parse", json={"expression": "a &&"})
    assert response.status_code == 400
    payload = response.json()
    assert payload["ok"] is False
    assert payload["position"] == 3
    assert "unexpected end of expression" in payload["error"]


def test_validate_named_repository_miss(client) -> None:
    register_schema("repo_backed", Validator(properties={"sku": None}))
    try:
        response = client.post("/api/validate/repo_backed", json={"sku": "ABC-0001"})
    finally:
        reload_registry()
    assert response.status_code == 400
    assert "'sku' was not found in the properties repository" in response.json()["detail"]
