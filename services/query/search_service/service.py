"""Authoritative in-process Python API for timeline search."""

from __future__ import annotations

from abc import ABC, abstractmethod

from packages.ccsearch_shared.config import CcSearchSettings
from packages.ccsearch_shared.envelope import Envelope, EnvelopeMeta
from resources.substrates.meilisearch import MeilisearchSubstrate
from services.query.search_service.domain import (
    LegacySearchResult,
    TimelineSearchResult,
)


class SearchService(ABC):
    """Public API for read-only searches scoped to one timeline."""

    @abstractmethod
    def search_timeline(
        self,
        *,
        meta: EnvelopeMeta,
        query: str,
        timeline: str,
        offset: object = 0,
    ) -> Envelope[TimelineSearchResult]:
        """Search newest-first within a timeline with an offset window."""

    @abstractmethod
    def search_legacy(
        self,
        *,
        meta: EnvelopeMeta,
        query: str,
        timeline: str,
    ) -> Envelope[LegacySearchResult]:
        """Search within a timeline in relevance order from the first hit."""


def build_search_service(
    *,
    settings: CcSearchSettings,
    index: MeilisearchSubstrate | None = None,
) -> SearchService:
    """Build the default search service from typed settings."""
    from resources.substrates.meilisearch import (
        MeilisearchClientSubstrate,
        resolve_meilisearch_settings,
    )
    from services.query.search_service.config import resolve_search_service_settings
    from services.query.search_service.implementation import DefaultSearchService

    return DefaultSearchService(
        settings=resolve_search_service_settings(settings),
        index=index
        or MeilisearchClientSubstrate(settings=resolve_meilisearch_settings(settings)),
    )
