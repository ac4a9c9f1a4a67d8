"""Concrete sync engine: poll, transform, batch-upsert, checkpoint."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from uuid import uuid4

from packages.ccsearch_shared.errors import exception_to_error
from packages.ccsearch_shared.logging import (
    fields,
    get_logger,
    log_context,
    public_api_instrumented,
)
from resources.substrates.meilisearch import MeilisearchSubstrate
from resources.substrates.postgres import LogEntry, PostgresSubstrate
from resources.substrates.redis import CheckpointStore
from services.index.sync_engine.config import SERVICE_COMPONENT_ID, SyncEngineSettings
from services.index.sync_engine.domain import (
    CycleOutcome,
    SearchableRecord,
    SyncCycleResult,
)
from services.index.sync_engine.service import SyncEngine
from services.index.sync_engine.transformer import (
    MalformedDocumentError,
    TransformerRegistry,
    default_registry,
    transform_entry,
)

_LOGGER = get_logger(__name__)


@dataclass
class _CycleProgress:
    """Mutable counters for one running cycle."""

    cursor_before: int
    committed: int
    pages: int = 0
    processed: int = 0
    skipped: int = 0
    upserted: int = 0

    def result(
        self, outcome: CycleOutcome, *, error: str | None = None
    ) -> SyncCycleResult:
        return SyncCycleResult(
            outcome=outcome,
            pages=self.pages,
            entries_processed=self.processed,
            entries_skipped=self.skipped,
            records_upserted=self.upserted,
            cursor_before=self.cursor_before,
            cursor_after=self.committed,
            error=error,
        )


class DefaultSyncEngine(SyncEngine):
    """Sync engine guarded by a process-wide non-blocking lock.

    The cursor is only written after a batch upsert succeeds, so a failed
    cycle leaves every unindexed entry eligible for the next one.
    """

    def __init__(
        self,
        *,
        settings: SyncEngineSettings,
        log_source: PostgresSubstrate,
        index: MeilisearchSubstrate,
        checkpoint: CheckpointStore,
        registry: TransformerRegistry | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._log_source = log_source
        self._index = index
        self._checkpoint = checkpoint
        self._registry = registry or default_registry()
        self._sleep = sleep
        self._guard = threading.Lock()

    @property
    def settings(self) -> SyncEngineSettings:
        return self._settings

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID)
    )
    def run_cycle(self) -> SyncCycleResult:
        if not self._guard.acquire(blocking=False):
            _LOGGER.debug("sync cycle already in flight, skipping tick")
            return SyncCycleResult(outcome=CycleOutcome.SKIPPED)
        try:
            with log_context({fields.CYCLE_ID: uuid4().hex}):
                return self._run_guarded()
        finally:
            self._guard.release()

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID)
    )
    def read_cursor(self) -> int:
        return self._checkpoint.read_cursor()

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID)
    )
    def reset_cursor(self, value: int = 0) -> bool:
        if not self._guard.acquire(blocking=False):
            return False
        try:
            self._checkpoint.write_cursor(value)
            _LOGGER.warning("checkpoint reset", extra={fields.CURSOR: value})
            return True
        finally:
            self._guard.release()

    def _run_guarded(self) -> SyncCycleResult:
        try:
            cursor = self._checkpoint.read_cursor()
        except Exception as exc:  # noqa: BLE001
            return self._failed(
                _CycleProgress(cursor_before=0, committed=0),
                stage="checkpoint read",
                exc=exc,
                cursor_known=False,
            )

        progress = _CycleProgress(cursor_before=cursor, committed=cursor)
        page_size = self._settings.page_size

        while True:
            try:
                entries = self._log_source.fetch_after(
                    cursor=progress.committed, limit=page_size
                )
            except Exception as exc:  # noqa: BLE001
                return self._failed(progress, stage="log fetch", exc=exc)

            try:
                records, running = self._transform_page(entries, progress)
            except Exception as exc:  # noqa: BLE001
                return self._failed(progress, stage="transform", exc=exc)

            if not records:
                return progress.result(
                    CycleOutcome.COMPLETED if progress.upserted else CycleOutcome.IDLE
                )

            try:
                self._index.add_documents([record.to_document() for record in records])
            except Exception as exc:  # noqa: BLE001
                return self._failed(progress, stage="index upsert", exc=exc)
            progress.upserted += len(records)

            try:
                self._checkpoint.write_cursor(running)
            except Exception as exc:  # noqa: BLE001
                return self._failed(progress, stage="checkpoint write", exc=exc)
            progress.committed = running
            progress.pages += 1
            _LOGGER.info(
                "indexed until %d",
                running,
                extra={fields.CURSOR: running, fields.PAGE: progress.pages},
            )

            if len(entries) < page_size:
                return progress.result(CycleOutcome.COMPLETED)
            self._sleep(self._settings.page_delay_seconds)

    def _transform_page(
        self, entries: Sequence[LogEntry], progress: _CycleProgress
    ) -> tuple[list[SearchableRecord], int]:
        """Transform one page, returning its records and the running cursor.

        Malformed entries are skipped and the cursor still moves past them.
        """
        records: list[SearchableRecord] = []
        running = progress.committed
        for entry in entries:
            running = max(running, entry.sequence)
            try:
                record = transform_entry(entry, registry=self._registry)
            except MalformedDocumentError as exc:
                progress.skipped += 1
                _LOGGER.warning(
                    "skipping malformed log entry %d",
                    entry.sequence,
                    extra={"sequence": entry.sequence, "reason": str(exc)[:200]},
                )
                continue
            progress.processed += 1
            if record is not None:
                records.append(record)
        return records, running

    def _failed(
        self,
        progress: _CycleProgress,
        *,
        stage: str,
        exc: Exception,
        cursor_known: bool = True,
    ) -> SyncCycleResult:
        error = exception_to_error(exc)
        _LOGGER.warning(
            "sync cycle failed during %s: %s",
            stage,
            type(exc).__name__,
            exc_info=exc,
            extra={
                fields.STAGE: stage,
                fields.ERROR_CATEGORY: error.category.value,
                "retryable": error.retryable,
            },
        )
        result = progress.result(
            CycleOutcome.FAILED, error=f"{stage}: {error.message}"
        )
        if cursor_known:
            return result
        return result.model_copy(update={"cursor_before": None, "cursor_after": None})
