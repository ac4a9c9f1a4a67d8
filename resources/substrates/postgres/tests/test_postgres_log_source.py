"""Tests for ordered cursor range reads over the commit log table."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine, insert

from resources.substrates.postgres.config import PostgresSettings
from resources.substrates.postgres.schema import commit_log_table
from resources.substrates.postgres.substrate import LogEntry, SharedPostgresSubstrate


@pytest.fixture
def substrate() -> SharedPostgresSubstrate:
    """Substrate over an in-memory SQLite copy of the log table."""
    engine = create_engine("sqlite+pysqlite:///:memory:")
    table = commit_log_table("commit_logs")
    table.metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(
            insert(table),
            [
                {"id": 7, "document": "seven"},
                {"id": 2, "document": "two"},
                {"id": 5, "document": "five"},
                {"id": 9, "document": "nine"},
            ],
        )
    return SharedPostgresSubstrate(settings=PostgresSettings(), engine=engine)


def test_fetch_after_returns_ascending_entries_above_cursor(
    substrate: SharedPostgresSubstrate,
) -> None:
    """Gaps in sequence are tolerated; ordering is ascending by id."""
    entries = substrate.fetch_after(cursor=2, limit=10)

    assert entries == [
        LogEntry(sequence=5, document="five"),
        LogEntry(sequence=7, document="seven"),
        LogEntry(sequence=9, document="nine"),
    ]


def test_fetch_after_respects_limit(substrate: SharedPostgresSubstrate) -> None:
    entries = substrate.fetch_after(cursor=0, limit=2)

    assert [entry.sequence for entry in entries] == [2, 5]


def test_fetch_after_past_end_is_empty(substrate: SharedPostgresSubstrate) -> None:
    assert substrate.fetch_after(cursor=9, limit=10) == []


def test_fetch_after_rejects_non_positive_limit(
    substrate: SharedPostgresSubstrate,
) -> None:
    with pytest.raises(ValueError):
        substrate.fetch_after(cursor=0, limit=0)
