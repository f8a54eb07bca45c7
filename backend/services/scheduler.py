"""Debounced background task scheduling for remote backups."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

LOGGER = logging.getLogger(__name__)

Task = Callable[[], None]
ErrorCallback = Callable[[Exception], None]


class BackupScheduler:
    """Own a single pending task and re-arm it on every call to ``schedule``.

    Only the last task scheduled inside a quiet window ever runs. A task that
    is already running cannot be cancelled.
    """

    def __init__(
        self,
        delay_seconds: float,
        *,
        on_error: Optional[ErrorCallback] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ) -> None:
        self.delay_seconds = max(0.0, delay_seconds)
        self.on_error = on_error
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._pending: Optional[threading.Timer] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def schedule(self, task: Task) -> None:
        """Cancel any pending task and arm ``task`` after the quiet window."""

        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._generation += 1
            timer = self._timer_factory(
                self.delay_seconds,
                self._run,
                args=(task, self._generation),
            )
            timer.daemon = True
            self._pending = timer
            timer.start()
        LOGGER.debug("Backup push scheduled in %.1fs", self.delay_seconds)

    def cancel(self) -> bool:
        """Drop the pending task; return False when nothing was pending."""

        with self._lock:
            timer, self._pending = self._pending, None
        if timer is None:
            return False
        timer.cancel()
        LOGGER.debug("Pending backup push cancelled")
        return True

    def _run(self, task: Task, generation: int) -> None:
        with self._lock:
            if generation == self._generation:
                self._pending = None
        try:
            task()
        except Exception as exc:
            LOGGER.error("Scheduled backup failed: %s", exc)
            if self.on_error is not None:
                self.on_error(exc)
