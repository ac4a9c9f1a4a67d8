"""Meilisearch substrate modules for the search index."""

from resources.substrates.meilisearch.config import (
    RESOURCE_COMPONENT_ID,
    MeilisearchSettings,
    resolve_meilisearch_settings,
)
from resources.substrates.meilisearch.meilisearch_substrate import (
    MeilisearchClientSubstrate,
)
from resources.substrates.meilisearch.substrate import (
    MeilisearchHealthStatus,
    MeilisearchSubstrate,
    SearchPage,
)

__all__ = [
    "RESOURCE_COMPONENT_ID",
    "MeilisearchClientSubstrate",
    "MeilisearchHealthStatus",
    "MeilisearchSettings",
    "MeilisearchSubstrate",
    "SearchPage",
    "resolve_meilisearch_settings",
]
