"""
Dragonwood - Deferred Turn Scheduler

Runs callbacks after a fixed delay on daemon timer threads. The scripted
opponent's "thinking" pause is the only deferred work in the engine, so
the scheduler only needs schedule / cancel / shutdown.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class TurnScheduler:
    """Fixed-delay, cancellable callbacks backed by ``threading.Timer``."""

    def __init__(self) -> None:
        self._timers: dict[int, threading.Timer] = {}
        self._next_id = 0
        self._lock = threading.Lock()
        self._closed = False

    def schedule(self, delay: float, callback: Callable[[], None]) -> int | None:
        """Run ``callback`` after ``delay`` seconds.

        Returns:
            A handle for ``cancel``, or None if the scheduler is shut down
        """
        with self._lock:
            if self._closed:
                logger.debug("Scheduler closed; dropping callback")
                return None
            handle = self._next_id
            self._next_id += 1
            timer = threading.Timer(delay, self._run, args=(handle, callback))
            timer.daemon = True
            timer.name = f"turn-timer-{handle}"
            self._timers[handle] = timer
        timer.start()
        return handle

    def _run(self, handle: int, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._timers.pop(handle, None) is None:
                return
        try:
            callback()
        except Exception:
            logger.exception("Scheduled callback %d failed", handle)

    def cancel(self, handle: int) -> bool:
        """Cancel a pending callback. Returns False if it already ran."""
        with self._lock:
            timer = self._timers.pop(handle, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def cancel_all(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    @property
    def pending(self) -> int:
        return len(self._timers)

    def shutdown(self) -> None:
        """Cancel everything and refuse new work."""
        with self._lock:
            self._closed = True
        self.cancel_all()
