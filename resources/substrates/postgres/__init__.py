"""Postgres substrate primitives for reading the commit log."""

from resources.substrates.postgres.config import (
    RESOURCE_COMPONENT_ID,
    PostgresSettings,
    normalize_postgres_url,
    resolve_postgres_settings,
)
from resources.substrates.postgres.engine import create_postgres_engine
from resources.substrates.postgres.health import ping
from resources.substrates.postgres.schema import commit_log_table, select_entries_after
from resources.substrates.postgres.substrate import (
    LogEntry,
    PostgresHealthStatus,
    PostgresSubstrate,
    SharedPostgresSubstrate,
)

__all__ = [
    "RESOURCE_COMPONENT_ID",
    "LogEntry",
    "PostgresHealthStatus",
    "PostgresSettings",
    "PostgresSubstrate",
    "SharedPostgresSubstrate",
    "commit_log_table",
    "create_postgres_engine",
    "normalize_postgres_url",
    "ping",
    "resolve_postgres_settings",
    "select_entries_after",
]
