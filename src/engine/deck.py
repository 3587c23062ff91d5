"""
Dragonwood - Deck Builder

Builds the adventurer and landscape decks. Both are lists whose *end* is
the top of the deck: cards are drawn with ``pop()``.

Landscape placement rule:
    Neither dragon may sit in the drawn-first half of the landscape deck
    (the array tail, ``ceil(len / 2)`` cards). The rule holds for every
    shuffle outcome, not just on average.
"""

import logging
import math
import random
from typing import MutableSequence, TypeVar

from src.engine.base import CARD_VALUES, LUCKY_LADYBUG_COUNT, Suit
from src.engine.cards import CREATURES, ENHANCEMENTS, EVENTS
from src.engine.models import (
    AdventurerCard,
    CaptureCost,
    CreatureCard,
    EnhancementCard,
    EventCard,
    LuckyLadybugCard,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def shuffle(cards: MutableSequence[T], rng: random.Random | None = None) -> MutableSequence[T]:
    """Uniform in-place Fisher-Yates shuffle. Returns the same sequence."""
    rand = rng or random
    for i in range(len(cards) - 1, 0, -1):
        j = rand.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]
    return cards


def build_adventurer_deck(
    rng: random.Random | None = None,
) -> list[AdventurerCard | LuckyLadybugCard]:
    """60 suited cards (5 suits x 12 values) plus the Lucky Ladybugs, shuffled."""
    deck: list[AdventurerCard | LuckyLadybugCard] = [
        AdventurerCard(id=f"adv_{suit.value}_{value}", suit=suit, value=value)
        for suit in Suit
        for value in CARD_VALUES
    ]
    deck.extend(
        LuckyLadybugCard(id=f"ladybug_{i}") for i in range(LUCKY_LADYBUG_COUNT)
    )
    return list(shuffle(deck, rng))


def _slug(name: str) -> str:
    return name.lower().replace(" ", "_")


def landscape_cards(include_events: bool = True) -> list[CreatureCard | EnhancementCard | EventCard]:
    """Expand every definition table into individual, uniquely-identified cards."""
    cards: list[CreatureCard | EnhancementCard | EventCard] = []

    for definition in CREATURES:
        for copy in range(definition.quantity):
            cards.append(CreatureCard(
                id=f"creature_{_slug(definition.name)}_{copy}",
                name=definition.name,
                victory_points=definition.victory_points,
                capture_cost=CaptureCost(
                    strike=definition.strike,
                    stomp=definition.stomp,
                    scream=definition.scream,
                ),
                is_dragon=definition.is_dragon,
                image=definition.image,
            ))

    for definition in ENHANCEMENTS:
        for copy in range(definition.quantity):
            cards.append(EnhancementCard(
                id=f"enhancement_{_slug(definition.name)}_{copy}",
                name=definition.name,
                effect_description=definition.effect_description,
                victory_points=definition.victory_points,
                capture_cost=CaptureCost(
                    strike=definition.strike,
                    stomp=definition.stomp,
                    scream=definition.scream,
                ),
                image=definition.image,
            ))

    if include_events:
        for definition in EVENTS:
            for copy in range(definition.quantity):
                cards.append(EventCard(
                    id=f"event_{_slug(definition.name)}_{copy}",
                    name=definition.name,
                    description=definition.description,
                ))

    return cards


def build_landscape_deck(
    include_events: bool = True,
    rng: random.Random | None = None,
) -> list[CreatureCard | EnhancementCard | EventCard]:
    """
    Build and shuffle the landscape deck, keeping dragons out of the top half.

    Non-dragons are shuffled and the last ``ceil(total / 2)`` of them form
    the drawn-first half. The remaining non-dragons and the dragons form
    the bottom half, which is shuffled on its own so the dragons land
    anywhere within it.

    Raises:
        ValueError: If there are too few non-dragon cards to fill the top half
    """
    cards = landscape_cards(include_events)
    dragons = [c for c in cards if c.type == "creature" and c.is_dragon]
    others = [c for c in cards if not (c.type == "creature" and c.is_dragon)]

    top_size = math.ceil(len(cards) / 2)
    if len(others) < top_size:
        raise ValueError(
            f"Need {top_size} non-dragon cards to fill the top half, got {len(others)}."
        )

    shuffle(others, rng)
    split = len(others) - top_size
    top = others[split:]
    bottom = others[:split] + dragons
    shuffle(bottom, rng)

    logger.debug(
        "Built landscape deck: %d cards, %d dragons in bottom %d",
        len(cards), len(dragons), len(bottom),
    )
    return bottom + top
