"""
Dragonwood - Game State Models

Pydantic models for cards, players and the engine's single mutable game
state. Cards are closed tagged unions discriminated on ``type``; card
instances are frozen once created.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from src.engine.base import (
    ComboType,
    GamePhase,
    MAX_NAME_LENGTH,
    NotificationType,
    Suit,
    UNREACHABLE_COST,
)


# =============================================================================
# PLAYER CARDS (adventurer deck)
# =============================================================================

class AdventurerCard(BaseModel):
    """A suited, valued card used to build combinations."""

    id: str
    type: Literal["adventurer"] = "adventurer"
    suit: Suit
    value: int = Field(ge=1, le=12)

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.value} {self.suit.value}"


class LuckyLadybugCard(BaseModel):
    """Bonus card: discarded on draw and replaced by two more draws."""

    id: str
    type: Literal["lucky_ladybug"] = "lucky_ladybug"

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return "Lucky Ladybug"


PlayerCard = Annotated[
    Union[AdventurerCard, LuckyLadybugCard],
    Field(discriminator="type"),
]


# =============================================================================
# LANDSCAPE CARDS (dragonwood deck)
# =============================================================================

class CaptureCost(BaseModel):
    """Difficulty per combination type. ``None`` means not capturable that way."""

    strike: int | None = None
    stomp: int | None = None
    scream: int | None = None

    model_config = {"frozen": True}

    def for_combo(self, combo: ComboType) -> int:
        """Required total for ``combo``; missing costs are unreachable."""
        cost = getattr(self, combo.value, None)
        return UNREACHABLE_COST if cost is None else cost


class CreatureCard(BaseModel):
    """A capturable creature worth victory points."""

    id: str
    type: Literal["creature"] = "creature"
    name: str
    victory_points: int = 0
    capture_cost: CaptureCost = Field(default_factory=CaptureCost)
    is_dragon: bool = False
    image: str | None = None

    model_config = {"frozen": True}


class EnhancementCard(BaseModel):
    """A capturable item granting a passive or one-shot bonus."""

    id: str
    type: Literal["enhancement"] = "enhancement"
    name: str
    effect_description: str = ""
    victory_points: int = 0
    capture_cost: CaptureCost = Field(default_factory=CaptureCost)
    image: str | None = None

    model_config = {"frozen": True}


class EventCard(BaseModel):
    """A forced effect resolved as soon as it reaches the landscape."""

    id: str
    type: Literal["event"] = "event"
    name: str
    description: str = ""

    model_config = {"frozen": True}


DragonwoodCard = Annotated[
    Union[CreatureCard, EnhancementCard, EventCard],
    Field(discriminator="type"),
]


# =============================================================================
# PLAYERS AND GAME STATE
# =============================================================================

class Player(BaseModel):
    """A seat at the table, human or scripted."""

    id: str
    name: str = Field(max_length=MAX_NAME_LENGTH)
    hand: list[PlayerCard] = Field(default_factory=list)
    captured_cards: list[DragonwoodCard] = Field(default_factory=list)
    is_bot: bool = False

    def find_in_hand(self, card_id: str) -> AdventurerCard | LuckyLadybugCard | None:
        return next((c for c in self.hand if c.id == card_id), None)

    def find_captured(self, card_id: str) -> CreatureCard | EnhancementCard | EventCard | None:
        return next((c for c in self.captured_cards if c.id == card_id), None)

    def owns(self, card_name: str) -> bool:
        """Whether an enhancement with this name sits in captured cards."""
        return any(
            c.type == "enhancement" and c.name == card_name
            for c in self.captured_cards
        )

    @property
    def victory_points(self) -> int:
        return sum(
            c.victory_points for c in self.captured_cards if c.type != "event"
        )


class RollingPlayer(BaseModel):
    """Who rolled, for the dice display."""

    name: str
    is_bot: bool


class DiceRollConfig(BaseModel):
    """Display-only snapshot of the most recent capture roll."""

    count: int = 0
    pending: bool = False
    results: list[int] = Field(default_factory=list)
    bonus: int | None = None
    total: int | None = None
    required: int | None = None
    success: bool | None = None
    player: RollingPlayer | None = None
    target_card_name: str | None = None
    combo: ComboType | None = None


class Notification(BaseModel):
    """Transient toast for the UI."""

    message: str
    type: NotificationType = NotificationType.INFO
    id: int


class GameState(BaseModel):
    """Single source of truth for one game session."""

    players: list[Player]
    current_player_index: int = 0
    adventurer_deck: list[PlayerCard] = Field(default_factory=list)
    discard_pile: list[PlayerCard] = Field(default_factory=list)
    dragonwood_deck: list[DragonwoodCard] = Field(default_factory=list)
    landscape: list[DragonwoodCard] = Field(default_factory=list)
    dice_roll_config: DiceRollConfig = Field(default_factory=DiceRollConfig)
    phase: GamePhase = GamePhase.ACTION
    turn_log: list[str] = Field(default_factory=list)
    deck_cycles: int = 1
    turn_number: int = 1
    final_turns_left: int | None = None
    penalty_cards_needed: int | None = None
    pending_event_discards: list[str] | None = None
    pending_event_passes: list[str] | None = None
    latest_notification: Notification | None = None
    game_over_reason: str | None = None
    winner_ids: list[str] = Field(default_factory=list)

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    def get_player(self, player_id: str) -> Player | None:
        return next((p for p in self.players if p.id == player_id), None)

    def find_landscape_card(self, card_id: str) -> CreatureCard | EnhancementCard | EventCard | None:
        return next((c for c in self.landscape if c.id == card_id), None)

    def all_card_ids(self) -> list[str]:
        """Every card id in play, duplicates included."""
        ids = [c.id for c in self.adventurer_deck]
        ids.extend(c.id for c in self.discard_pile)
        ids.extend(c.id for c in self.dragonwood_deck)
        ids.extend(c.id for c in self.landscape)
        for player in self.players:
            ids.extend(c.id for c in player.hand)
            ids.extend(c.id for c in player.captured_cards)
        return ids
