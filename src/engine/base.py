"""
Dragonwood - Game Engine Base Definitions

This module defines the enums, rule constants and error types shared by
every part of the rules engine.
"""

from enum import Enum


class Suit(str, Enum):
    """Suits of the adventurer deck."""
    RED = "red"
    ORANGE = "orange"
    PURPLE = "purple"
    GREEN = "green"
    BLUE = "blue"


class CardType(str, Enum):
    """Discriminator values for every card variant."""
    ADVENTURER = "adventurer"
    LUCKY_LADYBUG = "lucky_ladybug"
    CREATURE = "creature"
    ENHANCEMENT = "enhancement"
    EVENT = "event"


class ComboType(str, Enum):
    """Card combinations that can be declared against a landscape card."""
    STRIKE = "strike"              # Straight: consecutive values
    STOMP = "stomp"                # Flush: one suit
    SCREAM = "scream"              # Kind: one value
    DRAGON_SPELL = "dragon_spell"  # 3-card straight flush against a dragon


class GamePhase(str, Enum):
    """Phases of the turn state machine."""
    ACTION = "action"
    CAPTURE_ATTEMPT = "capture_attempt"
    PENALTY_DISCARD = "penalty_discard"
    RESOLVE_EVENT_DISCARD = "resolve_event_discard"
    RESOLVE_EVENT_PASS = "resolve_event_pass"
    GAME_OVER = "game_over"


class NotificationType(str, Enum):
    """Severity of a transient UI toast."""
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


# Adventurer deck
CARD_VALUES = tuple(range(1, 13))
LUCKY_LADYBUG_COUNT = 4

# Capture rules
MAX_CAPTURE_CARDS = 6
UNREACHABLE_COST = 99
MAX_NAME_LENGTH = 40
DRAGON_SPELL_DICE = 2
DRAGON_SPELL_TARGET = 6
DRAGON_SPELL_CARDS = 3
PENALTY_CARDS = 1
DRAGON_SPELL_PENALTY_CARDS = 2
DRAGONS_TO_WIN = 2


class EngineError(ValueError):
    """Base class for every command the engine rejects."""


class CardNotFoundError(EngineError):
    """A referenced card id is not where the command expects it."""


class InvalidSelectionError(EngineError):
    """The selected hand cards cannot be played as given."""


class InvalidCombinationError(EngineError):
    """The selection does not satisfy the declared combination."""
