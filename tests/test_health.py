"""Health endpoints and error rendering."""
from fastapi.testclient import TestClient


def test_health_returns_ok(client: TestClient):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_healthz_returns_ok(client: TestClient):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_unknown_route_uses_error_shape(client: TestClient):
    r = client.get("/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}


def test_validation_errors_use_error_shape(client: TestClient):
    r = client.post("/api/register", json=["not", "an", "object"])
    assert r.status_code == 422
    body = r.json()
    assert set(body) == {"error"}
    assert body["error"]
