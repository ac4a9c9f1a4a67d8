"""Minimal FastAPI and uvicorn helpers for the public HTTP surface."""

from __future__ import annotations

import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from packages.ccsearch_shared.logging import get_logger

_LOGGER = get_logger(__name__)


def create_app(
    *,
    title: str = "ccsearch",
    version: str = "0.0.0",
    cors_allow_all: bool = True,
) -> FastAPI:
    """Create a FastAPI app with request logging and permissive CORS."""
    app = FastAPI(title=title, version=version)

    if cors_allow_all:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            _LOGGER.exception(
                "http request failed",
                extra={"method": request.method, "path": request.url.path},
            )
            return error_response(500, "internal server error")
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        _LOGGER.info(
            "%s %s %d %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    return app


def error_response(status_code: int, message: str) -> JSONResponse:
    """Render the public ``{"error": message}`` failure body."""
    return JSONResponse(status_code=status_code, content={"error": message})


def run_app(
    app: FastAPI,
    *,
    host: str = "0.0.0.0",
    port: int = 8000,
    log_level: str = "info",
) -> None:
    """Run one FastAPI app through uvicorn."""
    uvicorn.run(app, host=host, port=port, log_level=log_level)
