from __future__ import annotations

import threading
from typing import Callable, Optional

import config
from .logging_utils import error, info
from .models import SyncStats


def log_summary(stats: SyncStats) -> None:
    if stats.synced > 0 or stats.errors > 0:
        info(f"Appointment sync completed: {stats.synced} synced, {stats.errors} errors")


class AutoSync:
    """Run a sync job now and then every ``interval_seconds``.

    The interval is measured from the end of one run to the start of the next.
    Failures of scheduled runs are logged; :meth:`run_now` raises them.
    """

    def __init__(
        self,
        job,
        interval_seconds: float = config.SYNC_INTERVAL_SECONDS,
        on_complete: Optional[Callable[[SyncStats], None]] = log_summary,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.job = job
        self.interval_seconds = interval_seconds
        self.on_complete = on_complete
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.completed_runs = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_now(self) -> SyncStats:
        stats = self.job.run()
        self.completed_runs += 1
        if self.on_complete:
            self.on_complete(stats)
        return stats

    def _tick(self) -> None:
        try:
            self.run_now()
        except Exception as e:
            error(f"Auto-sync failed: {e}")

    def _loop(self) -> None:
        while not self._stop.is_set():
            self._tick()
            if self._stop.wait(self.interval_seconds):
                break

    def start(self) -> "AutoSync":
        if self.running:
            return self
        info(f"Starting auto-sync with interval: {self.interval_seconds}s")
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="appointment-sync", daemon=True)
        self._thread.start()
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        """Cancel future runs; a run in progress is allowed to finish."""
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        info("Auto-sync stopped")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until stopped; True when the stop flag is set."""
        return self._stop.wait(timeout)


def start_auto_sync(job, interval_seconds: float = config.SYNC_INTERVAL_SECONDS) -> Callable[[], None]:
    """Start syncing in the background and return the function that stops it."""

    auto = AutoSync(job, interval_seconds).start()
    return auto.stop


__all__ = ["AutoSync", "log_summary", "start_auto_sync"]
