"""
Dragonwood - Scripted Opponent

Move selection for bot-controlled players. The bot groups its hand into
flush, kind and straight candidates and estimates each against every
capturable landscape card with an expected-value rule of thumb
(2.5 pips per die), not the exact odds calculator.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Sequence

from src.engine.base import MAX_CAPTURE_CARDS, ComboType
from src.engine.models import (
    AdventurerCard,
    CreatureCard,
    EnhancementCard,
    EventCard,
    LuckyLadybugCard,
)

EXPECTED_PIPS_PER_DIE = 2.5


@dataclass(frozen=True)
class BotMove:
    """A capture the bot has decided to declare."""
    target_id: str
    target_name: str
    combo: ComboType
    card_ids: tuple[str, ...]
    victory_points: int


def _adventurers(hand: Sequence[AdventurerCard | LuckyLadybugCard]) -> list[AdventurerCard]:
    return [c for c in hand if c.type == "adventurer"]


def group_by_suit(cards: Sequence[AdventurerCard]) -> list[list[AdventurerCard]]:
    """Flush candidates: one group per suit held."""
    groups: dict[str, list[AdventurerCard]] = defaultdict(list)
    for card in cards:
        groups[card.suit.value].append(card)
    return list(groups.values())


def group_by_value(cards: Sequence[AdventurerCard]) -> list[list[AdventurerCard]]:
    """Kind candidates: one group per value held."""
    groups: dict[int, list[AdventurerCard]] = defaultdict(list)
    for card in cards:
        groups[card.value].append(card)
    return list(groups.values())


def find_runs(cards: Sequence[AdventurerCard]) -> list[list[AdventurerCard]]:
    """
    Straight candidates: maximal runs of consecutive values.

    Duplicate values are skipped, so each run holds one card per value.
    """
    runs: list[list[AdventurerCard]] = []
    current: list[AdventurerCard] = []
    for card in sorted(cards, key=lambda c: c.value):
        if not current:
            current.append(card)
        elif card.value == current[-1].value + 1:
            current.append(card)
        elif card.value != current[-1].value:
            runs.append(current)
            current = [card]
    if current:
        runs.append(current)
    return runs


def candidate_groups(
    hand: Sequence[AdventurerCard | LuckyLadybugCard],
) -> list[tuple[ComboType, list[AdventurerCard]]]:
    """Every (combo, cards) pair worth considering, capped at the dice limit."""
    cards = _adventurers(hand)
    candidates = [(ComboType.STOMP, g) for g in group_by_suit(cards)]
    candidates += [(ComboType.SCREAM, g) for g in group_by_value(cards)]
    candidates += [(ComboType.STRIKE, r) for r in find_runs(cards)]
    return [(combo, group[:MAX_CAPTURE_CARDS]) for combo, group in candidates]


def choose_move(
    hand: Sequence[AdventurerCard | LuckyLadybugCard],
    landscape: Sequence[CreatureCard | EnhancementCard | EventCard],
) -> BotMove | None:
    """
    Pick the feasible capture with the most victory points.

    Ties on victory points go to the larger group; remaining ties keep the
    first candidate found.

    Returns:
        The chosen move, or None when nothing looks feasible
    """
    best: BotMove | None = None
    best_key: tuple[int, int] = (-1, -1)

    candidates = candidate_groups(hand)
    for target in landscape:
        if target.type not in ("creature", "enhancement"):
            continue
        for combo, group in candidates:
            required = target.capture_cost.for_combo(combo)
            if len(group) * EXPECTED_PIPS_PER_DIE < required:
                continue
            key = (target.victory_points, len(group))
            if key > best_key:
                best_key = key
                best = BotMove(
                    target_id=target.id,
                    target_name=target.name,
                    combo=combo,
                    card_ids=tuple(c.id for c in group),
                    victory_points=target.victory_points,
                )
    return best


def choose_event_card(hand: Sequence[AdventurerCard | LuckyLadybugCard]) -> str | None:
    """Card the bot gives up to a discard or pass event: its lowest value."""
    if not hand:
        return None
    cards = _adventurers(hand)
    if not cards:
        return hand[0].id
    return min(cards, key=lambda c: c.value).id
