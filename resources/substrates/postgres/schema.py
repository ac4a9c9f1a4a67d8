"""Read-only table definition and queries for the signed-document log."""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, MetaData, Select, Table, Text, select


def commit_log_table(name: str = "commit_logs") -> Table:
    """Return a Core table bound to a private metadata for ``name``."""
    return Table(
        name,
        MetaData(),
        Column("id", BigInteger, primary_key=True),
        Column("document", Text, nullable=False),
    )


def select_entries_after(table: Table, *, cursor: int, limit: int) -> Select:
    """Select up to ``limit`` entries with ``id > cursor`` in ascending order."""
    return (
        select(table.c.id, table.c.document)
        .where(table.c.id > cursor)
        .order_by(table.c.id.asc())
        .limit(limit)
    )
