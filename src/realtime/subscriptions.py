"""
Dragonwood - Listener Registry

Observer list for engine notifications. Listeners are called
synchronously, in registration order, after each state mutation.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from src.realtime.events import EventPayload

logger = logging.getLogger(__name__)

Listener = Callable[[EventPayload], None]


class ListenerRegistry:
    """Registered notification callbacks.

    A listener that raises is logged and skipped; it never stops the
    remaining listeners or undoes the state change being announced.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``. Returns a function that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: Listener) -> None:
        """Remove ``listener``; unknown listeners are ignored."""
        with self._lock:
            self._listeners = [l for l in self._listeners if l is not listener]

    def dispatch(self, payload: EventPayload) -> None:
        """Deliver ``payload`` to every listener."""
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener failed handling %s", payload.event.name)

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)
