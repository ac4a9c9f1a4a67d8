"""Behavior tests for public API invocation instrumentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Mapping

import pytest

from packages.ccsearch_shared.envelope import EnvelopeKind, new_meta
from packages.ccsearch_shared.errors import codes, dependency_error
from packages.ccsearch_shared.logging import (
    PublicApiMetricsConcern,
    clear_context,
    get_context,
    public_api_instrumented,
)
from services.index.sync_engine.domain import CycleOutcome, SyncCycleResult


class _RecordingLogger:
    """Logger double capturing level, message and bound context per call."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, str]]] = []

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(("info", message, get_context()))

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(("warning", message, get_context()))


@dataclass
class _FakeCounter:
    calls: list[tuple[float, dict[str, str]]] = field(default_factory=list)

    def add(self, amount: int | float, attributes: Mapping[str, str]) -> None:
        self.calls.append((amount, dict(attributes)))


@dataclass
class _FakeHistogram:
    calls: list[tuple[float, dict[str, str]]] = field(default_factory=list)

    def record(self, amount: float, attributes: Mapping[str, str]) -> None:
        self.calls.append((amount, dict(attributes)))


@dataclass
class _Instruments:
    calls: _FakeCounter = field(default_factory=_FakeCounter)
    duration: _FakeHistogram = field(default_factory=_FakeHistogram)
    errors: _FakeCounter = field(default_factory=_FakeCounter)
    cycles: _FakeCounter = field(default_factory=_FakeCounter)
    upserted: _FakeCounter = field(default_factory=_FakeCounter)

    def concern(self) -> PublicApiMetricsConcern:
        return PublicApiMetricsConcern(
            public_api_calls_total=self.calls,
            public_api_duration_ms=self.duration,
            public_api_errors_total=self.errors,
            sync_cycles_total=self.cycles,
            sync_records_upserted_total=self.upserted,
        )


@pytest.fixture(autouse=True)
def _clean_context():
    clear_context()
    yield
    clear_context()


def test_logging_concern_emits_invocation_and_completion_records() -> None:
    logger = _RecordingLogger()
    meta = new_meta(kind=EnvelopeKind.QUERY, source="test")

    @public_api_instrumented(
        logger=logger,
        component_id="service_search",
        id_fields=("timeline",),
        telemetry=False,
    )
    def search_timeline(*, meta: Any, query: str, timeline: str) -> SimpleNamespace:
        return SimpleNamespace(ok=True, errors=[])

    search_timeline(meta=meta, query="hello", timeline="tl1")

    assert [(level, message) for level, message, _ in logger.records] == [
        ("info", "Public API invocation"),
        ("info", "Public API completion"),
    ]
    invocation = logger.records[0][2]
    assert invocation["event"] == "public_api_invocation"
    assert invocation["component_id"] == "service_search"
    assert invocation["api_name"] == "search_timeline"
    assert invocation["timeline"] == "tl1"
    assert invocation["trace_id"] == meta.trace_id
    assert invocation["envelope_id"] == meta.envelope_id

    completion = logger.records[1][2]
    assert completion["event"] == "public_api_completion"
    assert completion["success"] == "True"
    assert "duration_ms" in completion
    assert get_context() == {}


def test_failed_result_completes_at_warning_with_error_summary() -> None:
    logger = _RecordingLogger()

    @public_api_instrumented(
        logger=logger, component_id="service_search", telemetry=False
    )
    def search_legacy(*, meta: Any = None) -> SimpleNamespace:
        return SimpleNamespace(
            ok=False,
            errors=[
                dependency_error("meilisearch unreachable", code=codes.SEARCH_FAILED)
            ],
        )

    search_legacy()

    level, message, context = logger.records[-1]
    assert (level, message) == ("warning", "Public API completion")
    assert context["success"] == "False"
    assert "SEARCH_FAILED: meilisearch unreachable" in context["errors"]


def test_exception_is_logged_and_reraised() -> None:
    logger = _RecordingLogger()

    @public_api_instrumented(
        logger=logger, component_id="service_schema", telemetry=False
    )
    def reconcile() -> None:
        raise RuntimeError("index unreachable")

    with pytest.raises(RuntimeError, match="index unreachable"):
        reconcile()

    level, _, context = logger.records[-1]
    assert level == "warning"
    assert "RuntimeError: index unreachable" in context["errors"]


def test_cycle_report_fields_are_logged_on_completion() -> None:
    logger = _RecordingLogger()

    @public_api_instrumented(
        logger=logger, component_id="service_sync", telemetry=False
    )
    def run_cycle() -> SyncCycleResult:
        return SyncCycleResult(
            outcome=CycleOutcome.COMPLETED, records_upserted=3, cursor_after=9
        )

    run_cycle()

    context = logger.records[-1][2]
    assert context["outcome"] == "completed"
    assert context["records_upserted"] == "3"
    assert context["cursor"] == "9"


def test_metrics_concern_counts_completed_sync_cycles() -> None:
    instruments = _Instruments()

    @public_api_instrumented(
        component_id="service_sync",
        concerns=[instruments.concern()],
        telemetry=False,
    )
    def run_cycle() -> SyncCycleResult:
        return SyncCycleResult(outcome=CycleOutcome.COMPLETED, records_upserted=4)

    run_cycle()

    assert instruments.calls.calls == [
        (
            1,
            {
                "component_id": "service_sync",
                "api_name": "run_cycle",
                "outcome": "success",
            },
        )
    ]
    assert len(instruments.duration.calls) == 1
    assert instruments.cycles.calls == [(1, {"outcome": "completed"})]
    assert instruments.upserted.calls == [(4, {})]
    assert instruments.errors.calls == []


def test_metrics_concern_counts_failed_cycle_as_error() -> None:
    instruments = _Instruments()

    @public_api_instrumented(
        component_id="service_sync",
        concerns=[instruments.concern()],
        telemetry=False,
    )
    def run_cycle() -> SyncCycleResult:
        return SyncCycleResult(
            outcome=CycleOutcome.FAILED, error="log fetch: dependency unavailable"
        )

    run_cycle()

    assert instruments.cycles.calls == [(1, {"outcome": "failed"})]
    assert instruments.upserted.calls == []
    assert instruments.errors.calls[0][1]["error_category"] == "unknown"


def test_idle_cycle_records_no_upserts() -> None:
    instruments = _Instruments()

    @public_api_instrumented(
        component_id="service_sync",
        concerns=[instruments.concern()],
        telemetry=False,
    )
    def run_cycle() -> SyncCycleResult:
        return SyncCycleResult(outcome=CycleOutcome.IDLE)

    run_cycle()

    assert instruments.cycles.calls == [(1, {"outcome": "idle"})]
    assert instruments.upserted.calls == []


def test_concern_failure_does_not_break_wrapped_call() -> None:
    logger = _RecordingLogger()

    class _BrokenConcern:
        def on_invocation(self, context: Any) -> None:
            raise ValueError("broken")

        def on_completion(self, context: Any) -> None:
            return None

    @public_api_instrumented(
        logger=logger,
        component_id="service_sync",
        concerns=[_BrokenConcern()],
        telemetry=False,
    )
    def read_cursor() -> int:
        return 42

    assert read_cursor() == 42
    failures = [
        context
        for level, message, context in logger.records
        if message == "Public API instrumentation concern failed"
    ]
    assert len(failures) == 1
    assert failures[0]["concern"] == "_BrokenConcern"
    assert failures[0]["stage"] == "invocation"


def test_decorator_requires_a_concern() -> None:
    with pytest.raises(ValueError):
        public_api_instrumented(component_id="service_sync", telemetry=False)
