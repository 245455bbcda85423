"""
Sweep Scheduler

Runs the expired-file sweep on a fixed interval in a background thread.
The scheduler owns its thread and stop event, so starting and stopping
it is explicit and nothing lives at module level.
"""

import logging
import threading
from typing import Optional

from keydrop.domain.file_storage import FileLifecycleManager, SweepResult

logger = logging.getLogger(__name__)


class SweepScheduler:
    """
    Periodic trigger for FileLifecycleManager.sweep_expired().

    A tick that arrives while the previous sweep is still running is
    skipped rather than queued.
    """

    def __init__(self, lifecycle_manager: FileLifecycleManager, interval_seconds: float = 300):
        """
        Initialize the scheduler.

        Args:
            lifecycle_manager: Manager whose sweep is invoked
            interval_seconds: Seconds between sweeps
        """
        if interval_seconds <= 0:
            raise ValueError(f"Interval must be positive, got {interval_seconds}")

        self.lifecycle_manager = lifecycle_manager
        self.interval_seconds = interval_seconds
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._running = threading.Lock()
        self.last_result: Optional[SweepResult] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread. Calling start twice is a no-op."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop,
            name="keydrop-sweep",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"Sweep scheduler started (every {self.interval_seconds:g}s)")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Signal the thread to stop and wait for it to exit."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
            logger.info("Sweep scheduler stopped")

    def run_once(self) -> Optional[SweepResult]:
        """
        Run one sweep now.

        Returns:
            SweepResult, or None if a sweep triggered here is still running
        """
        if not self._running.acquire(blocking=False):
            logger.warning("Previous sweep still running, skipping tick")
            return None

        try:
            result = self.lifecycle_manager.sweep_expired()
        except Exception as e:
            # The sweep reports per-file failures itself; this guards the loop
            logger.error(f"Sweep failed: {e}", exc_info=True)
            return None
        finally:
            self._running.release()

        self.last_result = result
        if result.deleted or result.failed:
            logger.info(
                f"Sweep completed - deleted: {result.deleted_count}, failed: {len(result.failed)}"
            )
        return result

    def _loop(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            self.run_once()
