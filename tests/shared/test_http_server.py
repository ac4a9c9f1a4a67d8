"""Tests for the shared FastAPI app factory."""

from __future__ import annotations

from fastapi.testclient import TestClient

from packages.ccsearch_shared.http import create_app, error_response


def test_create_app_allows_any_origin() -> None:
    """CORS should reflect permissive headers for cross-origin requests."""
    app = create_app(title="ccsearch-test")

    @app.get("/ping")
    def ping() -> dict[str, str]:
        return {"status": "ok"}

    client = TestClient(app)
    response = client.get("/ping", headers={"Origin": "https://example.net"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["access-control-allow-origin"] == "*"


def test_unhandled_route_errors_become_json_500() -> None:
    """Crashing handlers should be recovered into the error body."""
    app = create_app()

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("boom")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"error": "internal server error"}


def test_error_response_renders_error_body() -> None:
    response = error_response(400, "query is empty")

    assert response.status_code == 400
    assert response.body == b'{"error":"query is empty"}'
