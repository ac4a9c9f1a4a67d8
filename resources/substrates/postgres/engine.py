"""SQLAlchemy engine construction for the Postgres substrate."""

from __future__ import annotations

from sqlalchemy import Engine, create_engine

from resources.substrates.postgres.config import PostgresSettings


def create_postgres_engine(settings: PostgresSettings) -> Engine:
    """Construct a pooled SQLAlchemy engine using psycopg."""
    connect_args: dict[str, object] = {
        "connect_timeout": int(settings.connect_timeout_seconds),
    }
    if settings.sslmode is not None:
        connect_args["sslmode"] = settings.sslmode
    return create_engine(
        settings.url,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout_seconds,
        pool_pre_ping=settings.pool_pre_ping,
        connect_args=connect_args,
    )
