"""Meilisearch client-backed substrate implementation."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from meilisearch_python_sdk import Client
from meilisearch_python_sdk.errors import MeilisearchApiError

from packages.ccsearch_shared.logging import get_logger
from resources.substrates.meilisearch.client import create_meilisearch_client
from resources.substrates.meilisearch.config import MeilisearchSettings
from resources.substrates.meilisearch.substrate import (
    MeilisearchHealthStatus,
    MeilisearchSubstrate,
    SearchPage,
)

_LOGGER = get_logger(__name__)
_INDEX_NOT_FOUND = "index_not_found"


class MeilisearchClientSubstrate(MeilisearchSubstrate):
    """Concrete substrate over the synchronous ``meilisearch_python_sdk`` client.

    Every write is followed by ``wait_for_task`` with ``raise_for_status`` so
    asynchronous engine-side failures surface to the caller.
    """

    def __init__(
        self, *, settings: MeilisearchSettings, client: Client | None = None
    ) -> None:
        self._settings = settings
        self._client = client if client is not None else create_meilisearch_client(settings)

    @property
    def index_name(self) -> str:
        return self._settings.index_name

    def index_exists(self) -> bool:
        try:
            self._client.get_index(self._settings.index_name)
        except MeilisearchApiError as exc:
            if exc.code == _INDEX_NOT_FOUND or exc.status_code == 404:
                return False
            raise
        return True

    def create_index(self) -> None:
        self._client.create_index(
            self._settings.index_name, primary_key=self._settings.primary_key
        )
        _LOGGER.info(
            "created search index",
            extra={"index": self._settings.index_name},
        )

    def get_filterable_attributes(self) -> list[str]:
        return _attribute_names(self._index().get_filterable_attributes())

    def update_filterable_attributes(self, attributes: Sequence[str]) -> None:
        task = self._index().update_filterable_attributes(list(attributes))
        self._wait(task.task_uid)

    def get_sortable_attributes(self) -> list[str]:
        return _attribute_names(self._index().get_sortable_attributes())

    def update_sortable_attributes(self, attributes: Sequence[str]) -> None:
        task = self._index().update_sortable_attributes(list(attributes))
        self._wait(task.task_uid)

    def add_documents(self, documents: Sequence[dict[str, Any]]) -> None:
        if not documents:
            return
        task = self._index().add_documents(
            list(documents), primary_key=self._settings.primary_key
        )
        self._wait(task.task_uid)

    def search(
        self,
        query: str,
        *,
        filter: str | None = None,
        sort: Sequence[str] | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> SearchPage:
        results = self._index().search(
            query,
            filter=filter,
            sort=list(sort) if sort else None,
            limit=limit,
            offset=offset,
        )
        return SearchPage(
            hits=list(results.hits),
            limit=results.limit if results.limit is not None else limit,
            offset=results.offset if results.offset is not None else offset,
        )

    def health(self) -> MeilisearchHealthStatus:
        try:
            health = self._client.health()
        except Exception as exc:  # noqa: BLE001
            return MeilisearchHealthStatus(
                ready=False,
                detail=f"meilisearch health check failed: {type(exc).__name__}",
            )
        ready = health.status == "available"
        return MeilisearchHealthStatus(
            ready=ready,
            detail="ok" if ready else f"meilisearch status: {health.status}",
        )

    def _index(self):
        return self._client.index(self._settings.index_name)

    def _wait(self, task_uid: int) -> None:
        self._client.wait_for_task(
            task_uid,
            timeout_in_ms=int(self._settings.task_timeout_seconds * 1000),
            interval_in_ms=self._settings.task_poll_interval_ms,
            raise_for_status=True,
        )


def _attribute_names(raw: Any) -> list[str]:
    """Flatten attribute settings into names.

    Newer engine versions may describe filterable attributes as objects with
    ``attribute_patterns`` rather than plain strings.
    """
    if not raw:
        return []
    names: list[str] = []
    for item in raw:
        if isinstance(item, str):
            names.append(item)
            continue
        names.extend(getattr(item, "attribute_patterns", None) or [])
    return names
