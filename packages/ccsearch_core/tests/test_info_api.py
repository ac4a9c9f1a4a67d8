"""HTTP tests for service identity and readiness routes."""

from __future__ import annotations

import threading

from fastapi import APIRouter
from fastapi.testclient import TestClient

from packages.ccsearch_core.health import evaluate_health
from packages.ccsearch_core.info_api import register_routes
from packages.ccsearch_shared.config import InfoSettings
from packages.ccsearch_shared.http import create_app
from resources.substrates.redis import RedisHealthStatus


def _client(checks, *, info: InfoSettings | None = None) -> TestClient:
    app = create_app()
    router = APIRouter()
    register_routes(router=router, info=info or InfoSettings(), checks=checks)
    app.include_router(router)
    return TestClient(app)


def test_cc_info_reports_name_and_version() -> None:
    client = _client({}, info=InfoSettings(version="1.2.3"))

    response = client.get("/cc-info")

    assert response.status_code == 200
    assert response.json() == {
        "name": "github.com/concrnt/cc-search",
        "version": "1.2.3",
    }


def test_health_is_ok_when_every_check_is_ready() -> None:
    client = _client(
        {
            "postgres": lambda: {"ready": True, "detail": "ok"},
            "redis": lambda: RedisHealthStatus(ready=True, detail="ok"),
            "meilisearch": lambda: True,
        }
    )

    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["ready"] is True
    assert set(body["resources"]) == {"postgres", "redis", "meilisearch"}


def test_health_is_unavailable_when_a_check_fails() -> None:
    def _broken() -> object:
        raise ConnectionError("refused")

    client = _client(
        {
            "postgres": lambda: True,
            "redis": _broken,
        }
    )

    response = client.get("/health")

    assert response.status_code == 503
    body = response.json()
    assert body["ready"] is False
    assert body["resources"]["redis"] == {
        "ready": False,
        "detail": "health() raised ConnectionError",
    }


def test_slow_check_times_out() -> None:
    release = threading.Event()

    def _hang() -> bool:
        release.wait(timeout=5.0)
        return True

    try:
        result = evaluate_health({"meilisearch": _hang}, timeout_seconds=0.05)
    finally:
        release.set()

    assert result.ready is False
    assert "exceeded timeout" in result.resources["meilisearch"].detail


def test_unsupported_check_result_is_not_ready() -> None:
    result = evaluate_health({"postgres": lambda: "yes"})

    assert result.resources["postgres"].ready is False
