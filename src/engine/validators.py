"""
Dragonwood - Combination Validation

Shape checks for the card combinations players declare. Predicates return
booleans; ``validate_*`` functions either return normally or raise a
descriptive ``EngineError`` subclass (all of which are ``ValueError``).
"""

from typing import Sequence

from src.engine.base import (
    DRAGON_SPELL_CARDS,
    MAX_CAPTURE_CARDS,
    ComboType,
    InvalidCombinationError,
    InvalidSelectionError,
)
from src.engine.models import AdventurerCard, CreatureCard, EnhancementCard


def is_straight(cards: Sequence[AdventurerCard]) -> bool:
    """Values form one contiguous run with no duplicates (e.g. 4-5-6)."""
    values = sorted(card.value for card in cards)
    return all(b == a + 1 for a, b in zip(values, values[1:]))


def is_flush(cards: Sequence[AdventurerCard]) -> bool:
    """Every card shares one suit."""
    return len({card.suit for card in cards}) <= 1


def is_kind(cards: Sequence[AdventurerCard]) -> bool:
    """Every card shares one value."""
    return len({card.value for card in cards}) <= 1


def is_straight_flush(cards: Sequence[AdventurerCard]) -> bool:
    return is_straight(cards) and is_flush(cards)


_COMBO_CHECKS = {
    ComboType.STRIKE: is_straight,
    ComboType.STOMP: is_flush,
    ComboType.SCREAM: is_kind,
}


def validate_selection_size(
    count: int,
    max_count: int = MAX_CAPTURE_CARDS,
) -> int:
    """
    Validate how many cards are played in one capture.

    Raises:
        InvalidSelectionError: If nothing is selected
        InvalidCombinationError: If more than ``max_count`` cards are selected
    """
    if count < 1:
        raise InvalidSelectionError("Invalid cards selected: choose at least 1 card.")
    if count > max_count:
        raise InvalidCombinationError(f"Max {max_count} cards allowed")
    return count


def validate_combination(
    combo: ComboType,
    cards: Sequence[AdventurerCard],
    target: CreatureCard | EnhancementCard,
) -> None:
    """
    Validate that ``cards`` form ``combo`` against ``target``.

    Raises:
        InvalidCombinationError: On any shape mismatch, naming the combo
    """
    if combo == ComboType.DRAGON_SPELL:
        validate_dragon_spell(cards, target)
        return

    check = _COMBO_CHECKS[combo]
    if not cards or not check(cards):
        raise InvalidCombinationError(f"Invalid card combination for {combo.value}")


def validate_dragon_spell(
    cards: Sequence[AdventurerCard],
    target: CreatureCard | EnhancementCard,
) -> None:
    """
    A Dragon Spell needs a dragon target and a 3-card straight flush.

    Wrong target and wrong shape are reported separately.
    """
    if not (target.type == "creature" and target.is_dragon):
        raise InvalidCombinationError("Dragon Spell can only be used on a Dragon!")
    if len(cards) != DRAGON_SPELL_CARDS or not is_straight_flush(cards):
        raise InvalidCombinationError(
            "Dragon Spell requires a generic 3-card Straight Flush!"
        )
