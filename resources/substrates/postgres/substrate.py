"""Postgres log-source contract and implementation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Engine

from resources.substrates.postgres.config import PostgresSettings
from resources.substrates.postgres.engine import create_postgres_engine
from resources.substrates.postgres.health import ping
from resources.substrates.postgres.schema import commit_log_table, select_entries_after


@dataclass(frozen=True)
class LogEntry:
    """One immutable row of the commit log."""

    sequence: int
    document: str


class PostgresHealthStatus(BaseModel):
    """Postgres substrate readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    detail: str


class PostgresSubstrate(Protocol):
    """Protocol for ordered range reads of the commit log."""

    def fetch_after(self, *, cursor: int, limit: int) -> list[LogEntry]:
        """Return up to ``limit`` entries with sequence above ``cursor``."""

    def health(self) -> PostgresHealthStatus:
        """Check Postgres substrate readiness."""


class SharedPostgresSubstrate(PostgresSubstrate):
    """Concrete Postgres log source with a readiness check."""

    def __init__(
        self, *, settings: PostgresSettings, engine: Engine | None = None
    ) -> None:
        self._settings = settings
        self._engine = engine if engine is not None else create_postgres_engine(settings)
        self._table = commit_log_table(settings.log_table)

    @property
    def engine(self) -> Engine:
        """Return underlying SQLAlchemy engine."""
        return self._engine

    def fetch_after(self, *, cursor: int, limit: int) -> list[LogEntry]:
        """Range-scan the log table ascending from ``cursor`` (exclusive)."""
        if limit <= 0:
            raise ValueError("limit must be > 0")
        statement = select_entries_after(self._table, cursor=cursor, limit=limit)
        with self._engine.connect() as conn:
            rows = conn.execute(statement).all()
        return [LogEntry(sequence=int(row.id), document=str(row.document)) for row in rows]

    def health(self) -> PostgresHealthStatus:
        """Return readiness from a bounded Postgres ping."""
        try:
            ready = ping(
                self._engine,
                timeout_seconds=self._settings.health_timeout_seconds,
            )
        except Exception as exc:  # noqa: BLE001
            return PostgresHealthStatus(
                ready=False,
                detail=f"postgres health check failed: {type(exc).__name__}",
            )
        return PostgresHealthStatus(
            ready=ready,
            detail="ok" if ready else "postgres ping failed",
        )

    def dispose(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()
