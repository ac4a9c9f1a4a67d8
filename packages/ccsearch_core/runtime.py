"""Process wiring: build substrates once and share them across services."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from packages.ccsearch_shared.config import CcSearchSettings
from packages.ccsearch_shared.logging import get_logger
from resources.substrates.meilisearch import (
    MeilisearchClientSubstrate,
    MeilisearchSubstrate,
    resolve_meilisearch_settings,
)
from resources.substrates.postgres import (
    PostgresSubstrate,
    SharedPostgresSubstrate,
    resolve_postgres_settings,
)
from resources.substrates.redis import (
    RedisCheckpointStore,
    RedisClientSubstrate,
    RedisSubstrate,
    resolve_redis_settings,
)
from services.index.schema_reconciler import SchemaReconciler, build_schema_reconciler
from services.index.sync_engine import SyncEngine, build_sync_engine
from services.index.sync_engine.config import (
    SyncEngineSettings,
    resolve_sync_engine_settings,
)
from services.query.search_service import SearchService, build_search_service

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class Runtime:
    """Instantiated substrates and services for one process."""

    settings: CcSearchSettings
    sync_settings: SyncEngineSettings
    postgres: PostgresSubstrate
    redis: RedisSubstrate
    meilisearch: MeilisearchSubstrate
    sync_engine: SyncEngine
    reconciler: SchemaReconciler
    search: SearchService

    def health_checks(self) -> dict[str, Callable[[], object]]:
        return {
            "postgres": self.postgres.health,
            "redis": self.redis.health,
            "meilisearch": self.meilisearch.health,
        }

    def close(self) -> None:
        dispose = getattr(self.postgres, "dispose", None)
        if callable(dispose):
            dispose()


def build_runtime(settings: CcSearchSettings) -> Runtime:
    """Build every substrate and service from typed settings."""
    sync_settings = resolve_sync_engine_settings(settings)
    postgres = SharedPostgresSubstrate(settings=resolve_postgres_settings(settings))
    redis = RedisClientSubstrate(settings=resolve_redis_settings(settings))
    meilisearch = MeilisearchClientSubstrate(
        settings=resolve_meilisearch_settings(settings)
    )
    checkpoint = RedisCheckpointStore(substrate=redis, key=sync_settings.checkpoint_key)

    runtime = Runtime(
        settings=settings,
        sync_settings=sync_settings,
        postgres=postgres,
        redis=redis,
        meilisearch=meilisearch,
        sync_engine=build_sync_engine(
            settings=settings,
            log_source=postgres,
            index=meilisearch,
            checkpoint=checkpoint,
        ),
        reconciler=build_schema_reconciler(settings=settings, index=meilisearch),
        search=build_search_service(settings=settings, index=meilisearch),
    )
    _LOGGER.info(
        "runtime built",
        extra={
            "index": resolve_meilisearch_settings(settings).index_name,
            "checkpoint_key": sync_settings.checkpoint_key,
        },
    )
    return runtime
