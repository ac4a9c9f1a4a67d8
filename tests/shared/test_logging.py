"""Tests for structured logging context and formatters."""

from __future__ import annotations

import json
import logging
import threading

from packages.ccsearch_shared.logging import (
    bind_context,
    clear_context,
    get_context,
    log_context,
)
from packages.ccsearch_shared.logging.config import ContextFilter, JsonFormatter


def _record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="ccsearch.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


def test_log_context_binds_and_restores() -> None:
    """Values bound in a block should disappear once it exits."""
    clear_context()
    bind_context(service="ccsearch")

    with log_context({"cycle_id": "c1", "cursor": 5, "skipped": None}):
        assert get_context() == {
            "service": "ccsearch",
            "cycle_id": "c1",
            "cursor": "5",
        }

    assert get_context() == {"service": "ccsearch"}
    clear_context()


def test_json_formatter_emits_static_and_bound_fields() -> None:
    """JSON output should merge static filter fields with bound context."""
    clear_context()
    record = _record()
    with log_context({"cycle_id": "c2"}):
        ContextFilter({"service": "ccsearch"}).filter(record)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["service"] == "ccsearch"
    assert payload["cycle_id"] == "c2"


def test_static_fields_reach_worker_threads() -> None:
    """Threads start with an empty context but still get static fields."""
    clear_context()
    seen: dict[str, str] = {}
    log_filter = ContextFilter({"service": "ccsearch"})

    def work() -> None:
        record = _record()
        log_filter.filter(record)
        seen.update(getattr(record, "context"))

    with log_context({"cycle_id": "main-only"}):
        worker = threading.Thread(target=work)
        worker.start()
        worker.join()

    assert seen == {"service": "ccsearch"}
