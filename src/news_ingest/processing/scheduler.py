from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

import schedule


class IngestionScheduler:
    """Triggers an ingestion cycle every N minutes; a trigger that finds a cycle running is skipped."""

    def __init__(
        self,
        *,
        run_cycle: Callable[[], Any],
        interval_minutes: int,
        run_on_start: bool = True,
        poll_seconds: float = 1.0,
        scheduler: schedule.Scheduler | None = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._run_cycle = run_cycle
        self._interval_minutes = max(1, int(interval_minutes))
        self._run_on_start = run_on_start
        self._poll_seconds = poll_seconds
        self._scheduler = scheduler or schedule.Scheduler()
        self._log = log or logging.getLogger(__name__)
        self._running = threading.Lock()
        self._stop = threading.Event()
        self._worker: threading.Thread | None = None

    @property
    def scheduler(self) -> schedule.Scheduler:
        return self._scheduler

    def _run_guarded(self) -> None:
        try:
            result = self._run_cycle()
            self._log.info("Scheduled cycle finished: %s", getattr(result, "inserted_count", result))
        except Exception:
            self._log.exception("Scheduled ingestion cycle failed")
        finally:
            self._running.release()

    def trigger(self) -> bool:
        """Start a cycle in the background. Returns False when one is still running."""
        if not self._running.acquire(blocking=False):
            self._log.warning("Previous ingestion cycle still running; skipping trigger")
            return False
        worker = threading.Thread(target=self._run_guarded, name="ingestion-cycle", daemon=True)
        self._worker = worker
        try:
            worker.start()
        except RuntimeError:
            self._running.release()
            raise
        return True

    def wait_idle(self, timeout: float | None = None) -> bool:
        worker = self._worker
        if worker is not None:
            worker.join(timeout)
            return not worker.is_alive()
        return True

    def install(self) -> None:
        self._scheduler.clear()
        self._scheduler.every(self._interval_minutes).minutes.do(self.trigger)

    def run_forever(self) -> None:
        self.install()
        self._log.info("Ingestion scheduled every %s minutes", self._interval_minutes)
        if self._run_on_start:
            self.trigger()
        while not self._stop.is_set():
            self._scheduler.run_pending()
            self._stop.wait(self._poll_seconds)
        self._scheduler.clear()
        self._log.info("Ingestion scheduler stopped")

    def stop(self) -> None:
        self._stop.set()
