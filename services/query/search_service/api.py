"""FastAPI routes for timeline search."""

from __future__ import annotations

from http import HTTPStatus

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from packages.ccsearch_shared.envelope import Envelope, EnvelopeKind, new_meta
from packages.ccsearch_shared.errors import ErrorCategory
from packages.ccsearch_shared.http import error_response
from services.query.search_service.service import SearchService

_SOURCE = "http_search"


def register_routes(*, router: APIRouter, service: SearchService) -> None:
    """Register the versioned and legacy search routes on ``router``."""

    @router.get("/timeline/{timeline_id}")
    def search_timeline(
        timeline_id: str, q: str = "", offset: str | None = None
    ) -> JSONResponse:
        result = service.search_timeline(
            meta=new_meta(kind=EnvelopeKind.QUERY, source=_SOURCE),
            query=q,
            timeline=timeline_id,
            offset=offset,
        )
        return _respond(result)

    @router.get("/timeline/")
    def search_timeline_without_id(
        q: str = "", offset: str | None = None
    ) -> JSONResponse:
        return search_timeline(timeline_id="", q=q, offset=offset)

    @router.get("/search")
    def search_legacy(q: str = "", timeline: str = "") -> JSONResponse:
        result = service.search_legacy(
            meta=new_meta(kind=EnvelopeKind.QUERY, source=_SOURCE),
            query=q,
            timeline=timeline,
        )
        return _respond(result)


def _respond(result: Envelope) -> JSONResponse:
    if result.ok and result.payload is not None:
        return JSONResponse(content=result.payload.model_dump(mode="json"))
    error = result.errors[0]
    return error_response(_error_status(error.category), error.message)


def _error_status(category: ErrorCategory) -> int:
    """Map structured envelope error category to HTTP status code."""
    if category == ErrorCategory.VALIDATION:
        return HTTPStatus.BAD_REQUEST
    return HTTPStatus.INTERNAL_SERVER_ERROR
