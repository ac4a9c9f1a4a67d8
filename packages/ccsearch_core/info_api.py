"""FastAPI routes for service identity and readiness."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from http import HTTPStatus

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from packages.ccsearch_core.health import (
    DEFAULT_HEALTH_TIMEOUT_SECONDS,
    evaluate_health,
)
from packages.ccsearch_shared.config import InfoSettings


def register_routes(
    *,
    router: APIRouter,
    info: InfoSettings,
    checks: Mapping[str, Callable[[], object]],
    timeout_seconds: float = DEFAULT_HEALTH_TIMEOUT_SECONDS,
) -> None:
    """Register ``/cc-info`` and ``/health`` on ``router``."""

    @router.get("/cc-info")
    def cc_info() -> JSONResponse:
        return JSONResponse(content={"name": info.name, "version": info.version})

    @router.get("/health")
    def health() -> JSONResponse:
        result = evaluate_health(checks, timeout_seconds=timeout_seconds)
        status = HTTPStatus.OK if result.ready else HTTPStatus.SERVICE_UNAVAILABLE
        return JSONResponse(status_code=status, content=result.model_dump(mode="json"))
