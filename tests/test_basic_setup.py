"""
Basic test to verify the application wiring is working correctly.
"""

import pytest

from phrasebook_api.core.dependencies import get_sync_service


def test_app_creation(app):
    """Test that the FastAPI app can be created successfully."""
    assert app is not None
    assert app.title == "Arabic Phrasebook Backend"


def test_root_endpoint(client):
    """Test the root endpoint returns expected response."""
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert "version" in data
    assert data["status"] == "running"


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "route": "/api/health"}


def test_verbose_health_reports_dependencies(client):
    client.post("/api/sync/pull", json={"syncKey": "x"})

    data = client.get("/api/health", params={"verbose": "true"}).json()

    assert data["ok"] is True
    assert data["storage"] == {"backend": "memory", "status": "healthy"}
    assert data["translator"]["configured"] is False
    assert data["translator"]["model"] == "gpt-4o-mini"
    assert data["error_statistics"]["error_counts"] == {"INVALID_SYNC_KEY": 1}
    assert "sync_pull" in data["latency"]


def test_request_id_is_generated(client):
    response = client.get("/api/health")
    assert response.headers["X-Request-ID"]


def test_request_id_is_propagated(client):
    response = client.get("/api/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_cors_preflight_for_deployed_frontend(client):
    response = client.options(
        "/api/sync/push",
        headers={
            "Origin": "https://frontendarabicapp.vercel.app",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://frontendarabicapp.vercel.app"


def test_cors_rejects_unknown_origin(client):
    response = client.options(
        "/api/sync/push",
        headers={
            "Origin": "https://evil.example",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert "access-control-allow-origin" not in response.headers


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == "NOT_FOUND"
    assert "timestamp" in body


def test_wrong_method(client):
    response = client.get("/api/sync/push")

    assert response.status_code == 405
    assert response.json()["error_code"] == "METHOD_NOT_ALLOWED"


def test_unexpected_error_keeps_request_id_and_cors(app, client):
    def broken_sync_service():
        raise RuntimeError("store wiring exploded")

    app.dependency_overrides[get_sync_service] = broken_sync_service

    response = client.post(
        "/api/sync/pull",
        json={"syncKey": "device-0123456789"},
        headers={"Origin": "https://frontendarabicapp.vercel.app", "X-Request-ID": "req-500"},
    )

    assert response.status_code == 500
    assert response.json()["error_code"] == "INTERNAL_SERVER_ERROR"
    assert response.json()["request_id"] == "req-500"
    assert response.headers["X-Request-ID"] == "req-500"
    assert response.headers["access-control-allow-origin"] == "https://frontendarabicapp.vercel.app"
    assert "exploded" not in response.text


if __name__ == "__main__":
    pytest.main([__file__])
