"""Concrete search service over the Meilisearch substrate."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from packages.ccsearch_shared.envelope import Envelope, EnvelopeMeta, failure, success
from packages.ccsearch_shared.errors import (
    ErrorDetail,
    codes,
    dependency_error,
    exception_to_error,
    validation_error,
)
from packages.ccsearch_shared.logging import (
    fields,
    get_logger,
    public_api_instrumented,
)
from resources.substrates.meilisearch import MeilisearchSubstrate, SearchPage
from services.query.search_service.config import (
    SERVICE_COMPONENT_ID,
    SearchServiceSettings,
)
from services.query.search_service.domain import (
    LegacySearchResult,
    SearchHit,
    TimelineSearchResult,
)
from services.query.search_service.service import SearchService
from services.query.search_service.validation import SearchRequest, timeline_filter

_LOGGER = get_logger(__name__)


class DefaultSearchService(SearchService):
    """Default search service; read-only against the index."""

    def __init__(
        self, *, settings: SearchServiceSettings, index: MeilisearchSubstrate
    ) -> None:
        self._settings = settings
        self._index = index

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("timeline",),
    )
    def search_timeline(
        self,
        *,
        meta: EnvelopeMeta,
        query: str,
        timeline: str,
        offset: object = 0,
    ) -> Envelope[TimelineSearchResult]:
        request, errors = _validate(query=query, timeline=timeline, offset=offset)
        if errors:
            return failure(meta=meta, errors=errors)
        assert request is not None

        try:
            page = self._search(request, sort=self._settings.timeline_sort)
        except Exception as exc:  # noqa: BLE001
            return self._dependency_failure(meta=meta, request=request, exc=exc)

        return success(
            meta=meta,
            payload=TimelineSearchResult(
                content=_hits(page.hits),
                limit=page.limit,
                offset=page.offset,
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("timeline",),
    )
    def search_legacy(
        self,
        *,
        meta: EnvelopeMeta,
        query: str,
        timeline: str,
    ) -> Envelope[LegacySearchResult]:
        request, errors = _validate(query=query, timeline=timeline, offset=0)
        if errors:
            return failure(meta=meta, errors=errors)
        assert request is not None

        try:
            page = self._search(request, sort=None)
        except Exception as exc:  # noqa: BLE001
            return self._dependency_failure(meta=meta, request=request, exc=exc)

        return success(meta=meta, payload=LegacySearchResult(content=_hits(page.hits)))

    def _search(
        self, request: SearchRequest, *, sort: tuple[str, ...] | None
    ) -> SearchPage:
        return self._index.search(
            request.query,
            filter=timeline_filter(
                request.timeline, attribute=self._settings.timeline_attribute
            ),
            sort=list(sort) if sort else None,
            limit=self._settings.result_limit,
            offset=request.offset,
        )

    def _dependency_failure(
        self,
        *,
        meta: EnvelopeMeta,
        request: SearchRequest,
        exc: Exception,
    ) -> Envelope[Any]:
        """Map search engine exceptions into a dependency-category error.

        The normalized error supplies the message and retryability; any engine
        failure is reported as a dependency failure of the search call.
        """
        normalized = exception_to_error(exc)
        _LOGGER.warning(
            "search failed: exception_type=%s",
            type(exc).__name__,
            exc_info=exc,
            extra={
                fields.TIMELINE: request.timeline,
                fields.TRACE_ID: meta.trace_id,
                fields.ERROR_CATEGORY: normalized.category.value,
            },
        )
        return failure(
            meta=meta,
            errors=[
                dependency_error(
                    normalized.message,
                    code=codes.SEARCH_FAILED,
                    retryable=normalized.retryable,
                    metadata={
                        **normalized.metadata,
                        "resource": "substrate_meilisearch",
                        "normalized_code": normalized.code,
                    },
                )
            ],
        )


def _validate(
    *, query: str, timeline: str, offset: object
) -> tuple[SearchRequest | None, list[ErrorDetail]]:
    """Validate inputs, reporting only the first failing field."""
    try:
        request = SearchRequest.model_validate(
            {"query": query, "timeline": timeline, "offset": offset}
        )
    except ValidationError as exc:
        issue = exc.errors()[0]
        cause = issue.get("ctx", {}).get("error")
        message = str(cause) if cause is not None else str(issue.get("msg", "invalid"))
        return None, [validation_error(message, code=codes.MISSING_REQUIRED_FIELD)]
    return request, []


def _hits(raw_hits: list[dict[str, Any]]) -> list[SearchHit]:
    return [
        SearchHit(id=str(hit.get("id", "")), owner=str(hit.get("signer", "")))
        for hit in raw_hits
    ]
