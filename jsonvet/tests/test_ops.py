import pytest
from fastapi.testclient import TestClient

from jsonvet.main import app
from jsonvet.settings import settings

client = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_rate_limits():
    app.state.limiter.reset()
    yield
    app.state.limiter.reset()


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload.get("status") == "ok"
    assert payload.get("schemas", 0) >= 3
    assert "strict_properties" in payload


def test_metrics_exposes():
    response = client.get("/metrics")
    assert response.status_code == 200
    body = response.text
    assert "http_requests_total" in body or "http_request_duration_seconds" in body


def test_oversized_body_rejected():
    response = client.post(
        "/api/validate/beverage_order",
        content=b" " * (settings.MAX_BODY_BYTES + 1),
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 413


def test_rate_limit_allows_configured_requests():
    for _ in range(settings.RATE_LIMIT_REQUESTS):
        assert client.get("/health").status_code == 200
    response = client.get("/health")
    assert response.status_code == 429
    assert "Rate limit exceeded" in response.json()["error"]
