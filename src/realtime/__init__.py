"""
Dragonwood Engine Notifications.

Observer callbacks and deferred-turn scheduling for the rules engine.
"""

from src.realtime.events import EventPayload, GameEvent
from src.realtime.scheduler import TurnScheduler
from src.realtime.subscriptions import ListenerRegistry

__all__ = [
    "EventPayload",
    "GameEvent",
    "ListenerRegistry",
    "TurnScheduler",
]
