"""Fixed-interval trigger for background sync cycles."""

from __future__ import annotations

import threading
from collections.abc import Callable

from packages.ccsearch_shared.logging import get_logger

_LOGGER = get_logger(__name__)


class SyncScheduler:
    """Tick every ``interval_seconds`` and run each cycle in its own thread.

    Ticks never wait for earlier cycles; overlapping cycles are expected to be
    rejected by the cycle's own single-flight guard. The first tick fires one
    interval after ``start()``.
    """

    def __init__(
        self,
        *,
        run_cycle: Callable[[], object],
        interval_seconds: float,
        name: str = "ccsearch-sync",
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._run_cycle = run_cycle
        self._interval_seconds = interval_seconds
        self._name = name
        self._stop_event = threading.Event()
        self._ticker: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._ticker is not None and self._ticker.is_alive()

    def start(self) -> None:
        """Start the ticker thread; calling twice is a no-op."""
        if self.running:
            return
        self._stop_event.clear()
        self._ticker = threading.Thread(
            target=self._tick_loop, name=f"{self._name}-ticker", daemon=True
        )
        self._ticker.start()
        _LOGGER.info(
            "sync scheduler started",
            extra={"interval_seconds": self._interval_seconds},
        )

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop ticking. In-flight cycles are left to finish on their own."""
        self._stop_event.set()
        ticker = self._ticker
        if ticker is not None and ticker is not threading.current_thread():
            ticker.join(timeout=timeout)
        self._ticker = None
        _LOGGER.info("sync scheduler stopped")

    def trigger(self) -> threading.Thread:
        """Start one detached cycle immediately and return its thread."""
        worker = threading.Thread(
            target=self._run_detached, name=f"{self._name}-cycle", daemon=True
        )
        worker.start()
        return worker

    def _tick_loop(self) -> None:
        while not self._stop_event.wait(self._interval_seconds):
            self.trigger()

    def _run_detached(self) -> None:
        try:
            self._run_cycle()
        except Exception:  # noqa: BLE001
            _LOGGER.exception("sync cycle raised unexpectedly")
