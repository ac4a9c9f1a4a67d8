"""Health-check utilities for the Postgres substrate."""

from __future__ import annotations

from sqlalchemy import Engine, text

from packages.ccsearch_shared.logging import get_logger

_LOGGER = get_logger(__name__)


def ping(engine: Engine, *, timeout_seconds: float = 1.0) -> bool:
    """Return True when the database answers a trivial query within the timeout."""
    timeout_ms = max(1, int(timeout_seconds * 1000))
    try:
        with engine.connect() as conn:
            conn.execute(
                text("SELECT set_config('statement_timeout', :timeout_value, false)"),
                {"timeout_value": f"{timeout_ms}ms"},
            )
            conn.execute(text("SELECT 1"))
    except Exception as exc:  # noqa: BLE001
        _LOGGER.debug("postgres ping failed: %s", type(exc).__name__)
        return False
    return True
