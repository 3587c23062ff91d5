"""
Dragonwood - Engine Event Definitions

Event types and payloads delivered to subscribers after every state change.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class GameEvent(Enum):
    """Events that can occur during a game."""

    CARD_DRAWN = auto()
    CAPTURE_SUCCEEDED = auto()
    CAPTURE_FAILED = auto()
    PENALTY_DISCARDED = auto()
    EVENT_TRIGGERED = auto()
    EVENT_RESOLVED = auto()
    TURN_ADVANCED = auto()
    PLAYER_RENAMED = auto()
    GAME_OVER = auto()
    STATE_UPDATED = auto()


@dataclass
class EventPayload:
    """Wrapper for a state-change notification."""

    event: GameEvent
    player_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


# Map the phase a command leaves behind to the event it announces
_PHASE_EVENT_MAP: dict[str, GameEvent] = {
    "penalty_discard": GameEvent.CAPTURE_FAILED,
    "resolve_event_discard": GameEvent.EVENT_TRIGGERED,
    "resolve_event_pass": GameEvent.EVENT_TRIGGERED,
    "game_over": GameEvent.GAME_OVER,
}


def classify_phase_change(
    old_phase: str, new_phase: str, default: GameEvent
) -> GameEvent:
    """Pick the event for a command given the phase before and after it.

    Entering a phase that needs attention (penalty, event sub-phase, game
    over) wins over the command's own event.
    """
    if new_phase != old_phase and new_phase in _PHASE_EVENT_MAP:
        return _PHASE_EVENT_MAP[new_phase]
    return default
