"""Substrate contract for the Meilisearch search engine."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field


class MeilisearchHealthStatus(BaseModel):
    """Meilisearch substrate readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    detail: str


class SearchPage(BaseModel):
    """One page of raw hits with the window the engine applied."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    hits: list[dict[str, Any]] = Field(default_factory=list)
    limit: int
    offset: int


class MeilisearchSubstrate(Protocol):
    """Protocol for the index operations ccsearch depends on."""

    def index_exists(self) -> bool:
        """Return whether the configured index exists."""

    def create_index(self) -> None:
        """Create the configured index with its primary key."""

    def get_filterable_attributes(self) -> list[str]:
        """Return current filterable attribute names."""

    def update_filterable_attributes(self, attributes: Sequence[str]) -> None:
        """Replace filterable attributes and wait for the settings task."""

    def get_sortable_attributes(self) -> list[str]:
        """Return current sortable attribute names."""

    def update_sortable_attributes(self, attributes: Sequence[str]) -> None:
        """Replace sortable attributes and wait for the settings task."""

    def add_documents(self, documents: Sequence[dict[str, Any]]) -> None:
        """Upsert documents by primary key and wait for the indexing task."""

    def search(
        self,
        query: str,
        *,
        filter: str | None = None,
        sort: Sequence[str] | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> SearchPage:
        """Run one search against the configured index."""

    def health(self) -> MeilisearchHealthStatus:
        """Check Meilisearch readiness."""
