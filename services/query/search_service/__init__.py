"""Timeline search service package exports."""

from services.query.search_service.config import SearchServiceSettings
from services.query.search_service.domain import (
    LegacySearchResult,
    SearchHit,
    TimelineSearchResult,
)
from services.query.search_service.implementation import DefaultSearchService
from services.query.search_service.service import SearchService, build_search_service

__all__ = [
    "DefaultSearchService",
    "LegacySearchResult",
    "SearchHit",
    "SearchService",
    "SearchServiceSettings",
    "TimelineSearchResult",
    "build_search_service",
]
