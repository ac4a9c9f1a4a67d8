"""Shared in-memory runtime doubles for process and CLI tests."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from packages.ccsearch_core.runtime import Runtime
from packages.ccsearch_shared.config import CcSearchSettings
from resources.substrates.meilisearch import SearchPage
from services.index.schema_reconciler import ReconcileResult, SchemaReconcileError
from services.index.sync_engine import CycleOutcome, SyncCycleResult
from services.index.sync_engine.config import SyncEngineSettings
from services.query.search_service import DefaultSearchService, SearchServiceSettings


@dataclass
class FakeSyncEngine:
    result: SyncCycleResult = field(
        default_factory=lambda: SyncCycleResult(
            outcome=CycleOutcome.COMPLETED,
            pages=1,
            entries_processed=3,
            records_upserted=3,
            cursor_before=0,
            cursor_after=3,
        )
    )
    cursor: int = 7
    cursor_error: Exception | None = None
    reset_allowed: bool = True
    resets: list[int] = field(default_factory=list)

    def run_cycle(self) -> SyncCycleResult:
        return self.result

    def read_cursor(self) -> int:
        if self.cursor_error is not None:
            raise self.cursor_error
        return self.cursor

    def reset_cursor(self, value: int = 0) -> bool:
        if not self.reset_allowed:
            return False
        self.resets.append(value)
        self.cursor = value
        return True


@dataclass
class FakeReconciler:
    fail: bool = False
    calls: int = 0

    def reconcile(self) -> ReconcileResult:
        self.calls += 1
        if self.fail:
            raise SchemaReconcileError("index schema reconciliation failed for 'messages'")
        return ReconcileResult(index="messages", index_created=True)


@dataclass
class FakeSubstrate:
    ready: bool = True
    disposed: bool = False

    def health(self) -> dict[str, object]:
        return {"ready": self.ready, "detail": "ok" if self.ready else "down"}

    def search(self, query: str, **kwargs: object) -> SearchPage:
        return SearchPage(hits=[], limit=kwargs["limit"], offset=kwargs["offset"])

    def dispose(self) -> None:
        self.disposed = True


def make_runtime(
    *,
    cycle_result: SyncCycleResult | None = None,
    cursor: int = 7,
    cursor_error: Exception | None = None,
    reset_allowed: bool = True,
    reconcile_fails: bool = False,
    sync_settings: SyncEngineSettings | None = None,
    settings: CcSearchSettings | None = None,
) -> Runtime:
    substrate = FakeSubstrate()
    sync_engine = FakeSyncEngine(
        cursor=cursor, cursor_error=cursor_error, reset_allowed=reset_allowed
    )
    if cycle_result is not None:
        sync_engine.result = cycle_result
    return Runtime(
        settings=settings or CcSearchSettings(),
        sync_settings=sync_settings or SyncEngineSettings(interval_seconds=60.0),
        postgres=substrate,
        redis=FakeSubstrate(),
        meilisearch=FakeSubstrate(),
        sync_engine=sync_engine,
        reconciler=FakeReconciler(fail=reconcile_fails),
        search=DefaultSearchService(settings=SearchServiceSettings(), index=substrate),
    )


@pytest.fixture
def runtime_factory():
    """Return a builder for runtimes wired to in-memory doubles."""
    return make_runtime
