"""Authoritative in-process Python API for the index sync engine."""

from __future__ import annotations

from abc import ABC, abstractmethod

from packages.ccsearch_shared.config import CcSearchSettings
from resources.substrates.meilisearch import MeilisearchSubstrate
from resources.substrates.postgres import PostgresSubstrate
from resources.substrates.redis import CheckpointStore
from services.index.sync_engine.domain import SyncCycleResult


class SyncEngine(ABC):
    """Public API for incremental log-to-index synchronization."""

    @abstractmethod
    def run_cycle(self) -> SyncCycleResult:
        """Run one single-flight sync cycle and report how it ended.

        Never raises; failures are logged and reported in the result.
        """

    @abstractmethod
    def read_cursor(self) -> int:
        """Return the committed cursor."""

    @abstractmethod
    def reset_cursor(self, value: int = 0) -> bool:
        """Overwrite the committed cursor unless a cycle is running.

        Returns ``False`` without writing when a cycle holds the guard.
        """


def build_sync_engine(
    *,
    settings: CcSearchSettings,
    log_source: PostgresSubstrate | None = None,
    index: MeilisearchSubstrate | None = None,
    checkpoint: CheckpointStore | None = None,
) -> SyncEngine:
    """Build the default sync engine, creating any substrate not supplied."""
    from resources.substrates.meilisearch import (
        MeilisearchClientSubstrate,
        resolve_meilisearch_settings,
    )
    from resources.substrates.postgres import (
        SharedPostgresSubstrate,
        resolve_postgres_settings,
    )
    from resources.substrates.redis import (
        RedisCheckpointStore,
        RedisClientSubstrate,
        resolve_redis_settings,
    )
    from services.index.sync_engine.config import resolve_sync_engine_settings
    from services.index.sync_engine.implementation import DefaultSyncEngine

    sync_settings = resolve_sync_engine_settings(settings)
    if checkpoint is None:
        checkpoint = RedisCheckpointStore(
            substrate=RedisClientSubstrate(settings=resolve_redis_settings(settings)),
            key=sync_settings.checkpoint_key,
        )
    return DefaultSyncEngine(
        settings=sync_settings,
        log_source=log_source
        or SharedPostgresSubstrate(settings=resolve_postgres_settings(settings)),
        index=index
        or MeilisearchClientSubstrate(settings=resolve_meilisearch_settings(settings)),
        checkpoint=checkpoint,
    )
