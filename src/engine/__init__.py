"""
Dragonwood Game Engine.

Pure Python game logic with zero UI dependencies.
Handles deck building, dice and capture odds, combination validation,
capture resolution, events and the turn state machine.
"""

from src.engine.base import (
    CardNotFoundError,
    ComboType,
    EngineError,
    GamePhase,
    InvalidCombinationError,
    InvalidSelectionError,
    Suit,
)
from src.engine.dice import DICE_FACES, Dice
from src.engine.game import DragonwoodEngine
from src.engine.models import (
    AdventurerCard,
    CreatureCard,
    EnhancementCard,
    EventCard,
    GameState,
    LuckyLadybugCard,
    Player,
)
from src.engine.probability import success_chance

__all__ = [
    # Models
    "AdventurerCard",
    "CreatureCard",
    "EnhancementCard",
    "EventCard",
    "GameState",
    "LuckyLadybugCard",
    "Player",
    # Enums
    "ComboType",
    "GamePhase",
    "Suit",
    # Errors
    "CardNotFoundError",
    "EngineError",
    "InvalidCombinationError",
    "InvalidSelectionError",
    # Dice and odds
    "DICE_FACES",
    "Dice",
    "success_chance",
    # Engine
    "DragonwoodEngine",
]
