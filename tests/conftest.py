"""
Dragonwood - Test Configuration and Fixtures

Common fixtures and test doubles for all test modules.
"""

from collections import deque
from typing import Callable, Iterable

import pytest

from src.config.settings import Settings
from src.engine.base import Suit
from src.engine.dice import Dice
from src.engine.game import DragonwoodEngine
from src.engine.models import (
    AdventurerCard,
    CaptureCost,
    CreatureCard,
    EnhancementCard,
    EventCard,
)


# =============================================================================
# TEST DOUBLES
# =============================================================================

class ScriptedDice(Dice):
    """Dice that return queued values, then ``fallback`` once the queue is empty."""

    def __init__(self, values: Iterable[int] = (), fallback: int = 1) -> None:
        super().__init__()
        self.queue: deque[int] = deque(values)
        self.fallback = fallback

    def load(self, *values: int) -> None:
        self.queue.extend(values)

    def roll_one(self) -> int:
        return self.queue.popleft() if self.queue else self.fallback


class ManualScheduler:
    """Records deferred callbacks and runs them only when told to."""

    def __init__(self) -> None:
        self.calls: list[tuple[float, Callable[[], None]]] = []
        self.closed = False

    def schedule(self, delay: float, callback: Callable[[], None]) -> int | None:
        if self.closed:
            return None
        self.calls.append((delay, callback))
        return len(self.calls) - 1

    def run_next(self) -> None:
        _, callback = self.calls.pop(0)
        callback()

    def run_all(self, limit: int = 50) -> None:
        """Run callbacks (including ones scheduled while running) up to ``limit``."""
        for _ in range(limit):
            if not self.calls:
                return
            self.run_next()

    @property
    def pending(self) -> int:
        return len(self.calls)

    def shutdown(self) -> None:
        self.closed = True
        self.calls.clear()


# =============================================================================
# CARD FACTORIES
# =============================================================================

@pytest.fixture
def adv() -> Callable[..., AdventurerCard]:
    """Factory: ``adv("red", 5)`` builds a test adventurer card."""
    def _make(suit: str, value: int, tag: str = "") -> AdventurerCard:
        return AdventurerCard(id=f"t_{suit}_{value}{tag}", suit=Suit(suit), value=value)
    return _make


@pytest.fixture
def creature() -> Callable[..., CreatureCard]:
    """Factory for landscape creatures with explicit costs."""
    def _make(
        name: str = "Test Beast",
        victory_points: int = 2,
        strike: int = 5,
        stomp: int = 5,
        scream: int = 5,
        is_dragon: bool = False,
        card_id: str | None = None,
    ) -> CreatureCard:
        return CreatureCard(
            id=card_id or f"c_{name.lower().replace(' ', '_')}",
            name=name,
            victory_points=victory_points,
            capture_cost=CaptureCost(strike=strike, stomp=stomp, scream=scream),
            is_dragon=is_dragon,
        )
    return _make


@pytest.fixture
def enhancement() -> Callable[..., EnhancementCard]:
    """Factory for landscape enhancements with explicit costs."""
    def _make(
        name: str,
        strike: int = 5,
        stomp: int = 5,
        scream: int = 5,
        card_id: str | None = None,
    ) -> EnhancementCard:
        return EnhancementCard(
            id=card_id or f"e_{name.lower().replace(' ', '_')}",
            name=name,
            capture_cost=CaptureCost(strike=strike, stomp=stomp, scream=scream),
        )
    return _make


@pytest.fixture
def event_card() -> Callable[[str], EventCard]:
    def _make(name: str) -> EventCard:
        return EventCard(id=f"ev_{name.lower().replace(' ', '_')}", name=name)
    return _make


# =============================================================================
# ENGINE
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    """Deterministic table: no events, no bot delays."""
    return Settings(
        include_events=False,
        bot_think_delay=0,
        bot_discard_delay=0,
    )


@pytest.fixture
def dice() -> ScriptedDice:
    return ScriptedDice()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def make_engine(settings, dice, scheduler):
    """Factory for engines wired to scripted dice and the manual scheduler."""
    engines: list[DragonwoodEngine] = []

    def _make(
        players: list[tuple[str, bool]] | None = None,
        **overrides,
    ) -> DragonwoodEngine:
        table = settings.model_copy(update=overrides) if overrides else settings
        engine = DragonwoodEngine(
            table,
            players=players or [("Alice", False), ("Bot: Bramble", True)],
            dice=dice,
            scheduler=scheduler,
        )
        engines.append(engine)
        return engine

    yield _make
    for engine in engines:
        engine.shutdown()


@pytest.fixture
def engine(make_engine) -> DragonwoodEngine:
    """Two-seat game (human first, bot second) after the opening deal."""
    return make_engine()


@pytest.fixture
def two_humans(make_engine) -> DragonwoodEngine:
    return make_engine(players=[("Alice", False), ("Bob", False)])
