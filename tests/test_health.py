from fastapi.testclient import TestClient

from chapa_quente.main import app


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "message" in r.json()


def test_health_reports_database(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["database"] == "connected"
    assert body["timestamp"]


def test_health_without_database_is_still_up():
    r = TestClient(app).get("/health")
    assert r.status_code == 200
    assert r.json()["database"] == "not initialized"


def test_validation_errors_are_400(client):
    r = client.post("/api/orders", json={"items": "nope", "total": "abc"})
    assert r.status_code == 400
    assert r.json()["detail"]
