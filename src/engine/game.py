"""
Dragonwood - Game Engine

The turn state machine and public command surface consumed by the board
view. One ``DragonwoodEngine`` instance owns one game's ``GameState``.

Phases:
    action -> capture_attempt -> action (success) or penalty_discard (failure)
    action -> resolve_event_discard / resolve_event_pass -> action
    any -> game_over

Commands issued outside their phase are silent no-ops. Rejected commands
raise an ``EngineError`` before anything is mutated. Subscribers are
notified synchronously after every completed command.
"""

from __future__ import annotations

import itertools
import logging
import random
import threading
from dataclasses import dataclass
from functools import partial
from typing import Callable, Sequence

from src.config.settings import Settings, get_settings
from src.engine.base import (
    DRAGON_SPELL_DICE,
    DRAGON_SPELL_PENALTY_CARDS,
    DRAGON_SPELL_TARGET,
    DRAGONS_TO_WIN,
    PENALTY_CARDS,
    CardNotFoundError,
    ComboType,
    EngineError,
    GamePhase,
    InvalidCombinationError,
    InvalidSelectionError,
    MAX_NAME_LENGTH,
    NotificationType,
)
from src.engine.bot import choose_event_card, choose_move
from src.engine.cards import (
    CONSUMABLES,
    PASSIVE_BONUSES,
    QUICKSAND,
    REROLL_MIN_FACE,
    SUNNY_DAY,
    THUNDER_STORM,
    WIND_STORM,
)
from src.engine.deck import build_adventurer_deck, build_landscape_deck, shuffle
from src.engine.dice import Dice
from src.engine.models import (
    AdventurerCard,
    CreatureCard,
    DiceRollConfig,
    EnhancementCard,
    EventCard,
    GameState,
    LuckyLadybugCard,
    Notification,
    Player,
    RollingPlayer,
)
from src.engine.probability import success_chance
from src.engine.validators import validate_combination, validate_selection_size
from src.realtime.events import EventPayload, GameEvent, classify_phase_change
from src.realtime.scheduler import TurnScheduler
from src.realtime.subscriptions import ListenerRegistry
from src.utils.names import generate_random_name

logger = logging.getLogger(__name__)

_EVENT_PHASES = (GamePhase.RESOLVE_EVENT_DISCARD, GamePhase.RESOLVE_EVENT_PASS)
_CONSUMABLE_NAMES = " and ".join(CONSUMABLES)


@dataclass(frozen=True)
class CapturePlan:
    """A fully validated capture, ready to roll."""
    target: CreatureCard | EnhancementCard
    combo: ComboType
    cards: tuple[AdventurerCard | LuckyLadybugCard, ...]
    consumables: tuple[EnhancementCard, ...]
    dice_count: int
    required: int
    bonus: int


class DragonwoodEngine:
    """
    Rules engine for one game of Dragonwood.

    Args:
        settings: Table rules and bot pacing (defaults to ``get_settings()``)
        players: ``(name, is_bot)`` seats in turn order; defaults to one
            human followed by one bot
        dice: Dice to roll captures with
        scheduler: Runs the bot's deferred moves
        rng: Randomness for shuffles
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        players: Sequence[tuple[str, bool]] | None = None,
        dice: Dice | None = None,
        scheduler: TurnScheduler | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.dice = dice or Dice()
        self._rng = rng or random.Random()
        self._scheduler = scheduler or TurnScheduler()
        self._listeners = ListenerRegistry()
        self._lock = threading.RLock()
        self._notification_ids = itertools.count(1)
        self._pass_choices: dict[str, str] = {}
        self._end_turn_after_event = False

        seats = players or [
            ("Player 1", False),
            (generate_random_name(is_bot=True, rng=self._rng), True),
        ]
        self.state = self._initialize_game(seats)

        if self.state.current_player.is_bot:
            self.state.turn_log.append(f"{self.state.current_player.name} is thinking...")
            self._schedule_bot_turn()

    # =========================================================================
    # SETUP
    # =========================================================================

    def _initialize_game(self, seats: Sequence[tuple[str, bool]]) -> GameState:
        if not seats:
            raise ValueError("At least one player is required.")

        players = [
            Player(
                id=f"p{i + 1}",
                name=name.strip()[:MAX_NAME_LENGTH] or f"Player {i + 1}",
                is_bot=is_bot,
            )
            for i, (name, is_bot) in enumerate(seats)
        ]
        adventurer_deck = build_adventurer_deck(self._rng)
        dragonwood_deck = build_landscape_deck(self.settings.include_events, self._rng)
        discard_pile: list[AdventurerCard | LuckyLadybugCard] = []

        # Ladybugs met while dealing are discarded, not replaced by two draws.
        for _ in range(self.settings.hand_size):
            for player in players:
                while adventurer_deck:
                    card = adventurer_deck.pop()
                    if card.type == "lucky_ladybug":
                        discard_pile.append(card)
                        continue
                    player.hand.append(card)
                    break

        # Events met while dealing the opening landscape go back under the deck.
        landscape: list[CreatureCard | EnhancementCard | EventCard] = []
        set_aside: list[EventCard] = []
        while len(landscape) < self.settings.landscape_size and dragonwood_deck:
            card = dragonwood_deck.pop()
            if card.type == "event":
                set_aside.append(card)
            else:
                landscape.append(card)
        dragonwood_deck[:0] = set_aside

        logger.info("New game: %s", ", ".join(p.name for p in players))
        return GameState(
            players=players,
            adventurer_deck=adventurer_deck,
            discard_pile=discard_pile,
            dragonwood_deck=dragonwood_deck,
            landscape=landscape,
            turn_log=["Game Started"],
        )

    # =========================================================================
    # OBSERVERS
    # =========================================================================

    def get_state(self) -> GameState:
        """The live game state. Treat it as read-only."""
        return self.state

    def subscribe(self, listener: Callable[[EventPayload], None]) -> Callable[[], None]:
        """Register a post-mutation callback. Returns the unsubscribe function."""
        return self._listeners.subscribe(listener)

    def shutdown(self) -> None:
        """Cancel pending bot moves and drop listeners."""
        self._scheduler.shutdown()
        self._listeners.clear()

    def _set_notification(self, message: str, kind: NotificationType) -> None:
        self.state.latest_notification = Notification(
            message=message, type=kind, id=next(self._notification_ids)
        )

    def _complete(
        self,
        event: GameEvent,
        *,
        player_id: str | None = None,
        old_phase: GamePhase | None = None,
        rotated: bool = False,
        **data,
    ) -> None:
        """Announce a finished command, then hand the turn to the bot if due."""
        state = self.state
        if old_phase is not None:
            event = classify_phase_change(old_phase.value, state.phase.value, event)

        bot_up = rotated and state.phase == GamePhase.ACTION and state.current_player.is_bot
        if bot_up:
            state.turn_log.append(f"{state.current_player.name} is thinking...")

        self._listeners.dispatch(EventPayload(event=event, player_id=player_id, data=data))
        if rotated:
            self._listeners.dispatch(EventPayload(
                event=GameEvent.TURN_ADVANCED,
                player_id=state.current_player.id,
                data={"turn_number": state.turn_number},
            ))
        if bot_up:
            self._schedule_bot_turn()

    def _is_turn_of(self, player_id: str | None) -> bool:
        return player_id is None or self.state.current_player.id == player_id

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def set_player_name(self, player_id: str, name: str) -> None:
        """Rename a player. Blank names and unknown ids are ignored."""
        with self._lock:
            player = self.state.get_player(player_id)
            name = name.strip()[:MAX_NAME_LENGTH]
            if player is None or not name:
                return
            player.name = name
            self._complete(GameEvent.PLAYER_RENAMED, player_id=player_id, name=name)

    def draw_card(self, player_id: str | None = None) -> None:
        """
        Draw one adventurer card and end the turn.

        A Lucky Ladybug is discarded and replaced by two more draws. With
        both the deck and the discard pile empty nothing happens and the
        turn does not end. When only Lucky Ladybugs are left the draw comes
        up short, the turn still ends and the final turns begin.

        Args:
            player_id: If given, the command is ignored unless it is this
                player's turn
        """
        with self._lock:
            state = self.state
            if state.phase != GamePhase.ACTION or not self._is_turn_of(player_id):
                return

            player = state.current_player
            if not state.adventurer_deck and not state.discard_pile:
                state.turn_log.append("Adventurer Deck is empty and Discard is empty!")
                self._complete(GameEvent.STATE_UPDATED, player_id=player.id)
                return

            drawn = self._perform_draw(player)
            logger.debug("%s drew %d card(s)", player.name, drawn)
            old_phase = state.phase
            rotated = self._end_turn()
            self._complete(
                GameEvent.CARD_DRAWN,
                player_id=player.id,
                old_phase=old_phase,
                rotated=rotated,
                drawn=drawn,
            )

    def declare_capture(
        self,
        target_card_id: str,
        combo: ComboType | str,
        hand_card_ids: Sequence[str],
        consumable_ids: Sequence[str] | None = None,
        player_id: str | None = None,
    ) -> None:
        """
        Play cards from hand against a landscape card and roll for it.

        One die is rolled per card played (a Dragon Spell always rolls 2),
        plus one per Friendly Bunny spent. Success moves the target into the
        player's captured cards and ends the turn; failure keeps the cards
        in hand and enters ``penalty_discard``.

        Raises:
            CardNotFoundError: Unknown target or consumable id
            InvalidSelectionError: Selected ids not all in hand
            InvalidCombinationError: Card cap, combination shape, Dragon
                Spell rules or a non-consumable used as a consumable
        """
        with self._lock:
            state = self.state
            if state.phase != GamePhase.ACTION or not self._is_turn_of(player_id):
                return
            player = state.current_player
            plan = self._plan_capture(
                player, target_card_id, combo, hand_card_ids, consumable_ids or ()
            )
            self._resolve_capture(player, plan)

    def capture_odds(
        self,
        target_card_id: str,
        combo: ComboType | str,
        hand_card_ids: Sequence[str],
        consumable_ids: Sequence[str] | None = None,
    ) -> float:
        """
        Percentage chance the current player's capture would succeed.

        Validates exactly like ``declare_capture`` but changes nothing.
        The Honey Pot re-roll is not included.
        """
        with self._lock:
            plan = self._plan_capture(
                self.state.current_player,
                target_card_id,
                combo,
                hand_card_ids,
                consumable_ids or (),
            )
            return success_chance(plan.dice_count, plan.required - plan.bonus, self.dice.faces)

    def resolve_penalty_discard(self, card_id: str, player_id: str | None = None) -> None:
        """
        Discard one card after a failed capture.

        Raises:
            CardNotFoundError: If the card is not in the acting player's hand
        """
        with self._lock:
            state = self.state
            if state.phase != GamePhase.PENALTY_DISCARD or not self._is_turn_of(player_id):
                return

            player = state.current_player
            card = player.find_in_hand(card_id)
            if card is None:
                raise CardNotFoundError("Card not found in hand")

            player.hand.remove(card)
            state.discard_pile.append(card)
            state.penalty_cards_needed = (state.penalty_cards_needed or 1) - 1
            state.turn_log.append(f"{player.name} discarded a penalty card.")
            self._set_notification(f"{player.name} discarded a penalty card.", NotificationType.INFO)

            rotated = False
            if state.penalty_cards_needed <= 0:
                state.penalty_cards_needed = None
                state.phase = GamePhase.ACTION
                rotated = self._end_turn()
            self._complete(
                GameEvent.PENALTY_DISCARDED,
                player_id=player.id,
                old_phase=GamePhase.PENALTY_DISCARD,
                rotated=rotated,
                card_id=card_id,
            )

    def handle_event_discard(self, player_id: str, card_id: str) -> None:
        """
        Discard a card for a Thunder Storm.

        Raises:
            CardNotFoundError: If the card is not in that player's hand
        """
        with self._lock:
            state = self.state
            pending = state.pending_event_discards or []
            if state.phase != GamePhase.RESOLVE_EVENT_DISCARD or player_id not in pending:
                return

            player = state.get_player(player_id)
            card = player.find_in_hand(card_id) if player else None
            if card is None:
                raise CardNotFoundError("Card not found in hand")

            self._discard_for_event(player, card)
            pending.remove(player_id)

            rotated = False
            if not pending:
                rotated = self._after_event_resolved()
            self._complete(
                GameEvent.EVENT_RESOLVED if not pending else GameEvent.STATE_UPDATED,
                player_id=player_id,
                old_phase=GamePhase.RESOLVE_EVENT_DISCARD,
                rotated=rotated,
                card_id=card_id,
            )

    def handle_event_pass(self, player_id: str, card_id: str) -> None:
        """
        Choose the card to pass for a Wind Storm.

        Passes are collected until every listed player has chosen, then
        applied together.

        Raises:
            CardNotFoundError: If the card is not in that player's hand
        """
        with self._lock:
            state = self.state
            pending = state.pending_event_passes or []
            if state.phase != GamePhase.RESOLVE_EVENT_PASS or player_id not in pending:
                return

            player = state.get_player(player_id)
            if player is None or player.find_in_hand(card_id) is None:
                raise CardNotFoundError("Card not found in hand")

            self._pass_choices[player_id] = card_id
            pending.remove(player_id)

            rotated = False
            if not pending:
                self._apply_passes()
                rotated = self._after_event_resolved()
            self._complete(
                GameEvent.EVENT_RESOLVED if not pending else GameEvent.STATE_UPDATED,
                player_id=player_id,
                old_phase=GamePhase.RESOLVE_EVENT_PASS,
                rotated=rotated,
                card_id=card_id,
            )

    # =========================================================================
    # DRAWING
    # =========================================================================

    def _start_final_turns(self, message: str) -> None:
        state = self.state
        if state.final_turns_left is not None:
            return
        state.final_turns_left = len(state.players) + 1
        state.turn_log.append(message)
        logger.info("Final turns started (%d)", state.final_turns_left)

    def _reshuffle_discard(self) -> None:
        state = self.state
        state.turn_log.append("Reshuffling Discard Pile into Deck...")
        state.deck_cycles += 1
        if state.deck_cycles > self.settings.deck_cycle_limit:
            self._start_final_turns(
                "Adventure Deck exhausted twice! Each player gets 1 final turn!"
            )

        deck = state.discard_pile
        shuffle(deck, self._rng)
        state.adventurer_deck = deck
        state.discard_pile = []

    def _adventurers_left(self) -> bool:
        state = self.state
        return any(
            c.type == "adventurer"
            for c in itertools.chain(state.adventurer_deck, state.discard_pile)
        )

    def _perform_draw(self, player: Player, count: int = 1) -> int:
        """
        Draw ``count`` cards into ``player``'s hand. Returns cards gained.

        Each Lucky Ladybug is discarded and adds two draws to the count.
        Drawing stops early once no adventurer card is left in the deck or
        the discard pile; that starts the final turns.
        """
        state = self.state
        pending = count
        gained = 0
        while pending > 0:
            if not state.adventurer_deck:
                if not state.discard_pile:
                    state.turn_log.append("Adventurer Deck is empty and Discard is empty!")
                    break
                self._reshuffle_discard()

            if not self._adventurers_left():
                state.turn_log.append("Only Lucky Ladybugs are left in the Adventurer Deck!")
                self._start_final_turns(
                    "No adventurers left to draw! Each player gets 1 final turn!"
                )
                break

            card = state.adventurer_deck.pop()
            if card.type == "lucky_ladybug":
                state.turn_log.append(
                    f"{player.name} drew a Lucky Ladybug! Discarding and drawing 2 more..."
                )
                self._set_notification(f"{player.name} found a Ladybug!", NotificationType.SUCCESS)
                state.discard_pile.append(card)
                pending += 1
                continue

            player.hand.append(card)
            if player.is_bot:
                state.turn_log.append(f"{player.name} drew a card")
            else:
                state.turn_log.append(f"{player.name} drew {card}")
            self._set_notification(f"{player.name} drew a card!", NotificationType.INFO)
            gained += 1
            pending -= 1
        return gained

    # =========================================================================
    # CAPTURING
    # =========================================================================

    def _plan_capture(
        self,
        player: Player,
        target_card_id: str,
        combo: ComboType | str,
        hand_card_ids: Sequence[str],
        consumable_ids: Sequence[str],
    ) -> CapturePlan:
        """Validate a capture request without touching state."""
        try:
            combo = ComboType(combo)
        except ValueError:
            raise InvalidCombinationError(f"Unknown combination {combo!r}") from None

        target = self.state.find_landscape_card(target_card_id)
        if target is None or target.type == "event":
            raise CardNotFoundError("Target card not found in landscape")

        cards = [player.find_in_hand(card_id) for card_id in hand_card_ids]
        if len(set(hand_card_ids)) != len(hand_card_ids) or any(c is None for c in cards):
            raise InvalidSelectionError("Invalid cards selected")

        validate_selection_size(len(cards), self.settings.max_capture_cards)

        adventurers = [c for c in cards if c.type == "adventurer"]
        validate_combination(combo, adventurers, target)

        consumables: list[EnhancementCard] = []
        for card_id in dict.fromkeys(consumable_ids):
            owned = player.find_captured(card_id)
            if owned is None:
                raise CardNotFoundError(f"Consumable card {card_id} not found")
            if owned.type != "enhancement" or owned.name not in CONSUMABLES:
                raise InvalidCombinationError(
                    f"Only {_CONSUMABLE_NAMES} can be used as consumables"
                )
            consumables.append(owned)

        flat_bonus = sum(CONSUMABLES[c.name][0] for c in consumables)
        extra_dice = sum(CONSUMABLES[c.name][1] for c in consumables)

        if combo == ComboType.DRAGON_SPELL:
            dice_count = DRAGON_SPELL_DICE + extra_dice
            required = DRAGON_SPELL_TARGET
        else:
            dice_count = len(adventurers) + extra_dice
            required = target.capture_cost.for_combo(combo)

        owned_names = {c.name for c in player.captured_cards if c.type == "enhancement"}
        passive_bonus = sum(
            bonus
            for name, (boosted, bonus) in PASSIVE_BONUSES.items()
            if name in owned_names and boosted == combo
        )

        # Enhancements can only be captured with raw dice.
        bonus = 0 if target.type == "enhancement" else passive_bonus + flat_bonus

        return CapturePlan(
            target=target,
            combo=combo,
            cards=tuple(cards),
            consumables=tuple(consumables),
            dice_count=dice_count,
            required=required,
            bonus=bonus,
        )

    def _roll(self, player: Player, count: int) -> list[int]:
        results = self.dice.roll_many(count)
        if player.owns(REROLL_MIN_FACE):
            low = self.dice.min_face
            rerolls = results.count(low)
            if rerolls:
                self.state.turn_log.append(
                    f"{player.name} uses {REROLL_MIN_FACE} to re-roll {rerolls} die(dice)!"
                )
                results = [self.dice.roll_one() if r == low else r for r in results]
        return results

    def _resolve_capture(self, player: Player, plan: CapturePlan) -> None:
        state = self.state
        target = plan.target

        state.phase = GamePhase.CAPTURE_ATTEMPT
        state.dice_roll_config = DiceRollConfig(
            count=plan.dice_count,
            pending=True,
            player=RollingPlayer(name=player.name, is_bot=player.is_bot),
            target_card_name=target.name,
            combo=plan.combo,
        )

        for consumable in plan.consumables:
            player.captured_cards.remove(consumable)
            state.turn_log.append(f"{player.name} uses {consumable.name}!")

        results = self._roll(player, plan.dice_count)
        roll_total = sum(results)
        total = roll_total + plan.bonus
        success = total >= plan.required

        config = state.dice_roll_config
        config.results = results
        config.pending = False
        config.bonus = plan.bonus
        config.total = total
        config.required = plan.required
        config.success = success

        message = f"{player.name} rolled {', '.join(map(str, results))} (Sum: {roll_total})"
        if plan.bonus > 0:
            message += f" + Bonus: {plan.bonus} = Total: {total}"
        else:
            message += f" = Total: {total}"
        message += f" for {plan.combo.value} on {target.name}"
        state.turn_log.append(message)

        if success:
            self._capture_succeeded(player, plan)
        else:
            self._capture_failed(player, plan)

    def _capture_succeeded(self, player: Player, plan: CapturePlan) -> None:
        state = self.state
        target = plan.target
        logger.info("%s captured %s with %s", player.name, target.name, plan.combo.value)

        state.turn_log.append("Capture Successful!")
        self._set_notification(f"{player.name} Captured {target.name}!", NotificationType.SUCCESS)

        state.landscape.remove(target)
        player.captured_cards.append(target)

        played = {c.id for c in plan.cards}
        player.hand = [c for c in player.hand if c.id not in played]
        state.discard_pile.extend(plan.cards)

        state.phase = GamePhase.ACTION
        self._refill_landscape()

        rotated = False
        if self._check_game_over():
            pass
        elif state.phase in _EVENT_PHASES:
            self._end_turn_after_event = True
        else:
            rotated = self._end_turn()

        self._complete(
            GameEvent.CAPTURE_SUCCEEDED,
            player_id=player.id,
            old_phase=GamePhase.CAPTURE_ATTEMPT,
            rotated=rotated,
            target_id=target.id,
            total=state.dice_roll_config.total,
        )

    def _capture_failed(self, player: Player, plan: CapturePlan) -> None:
        state = self.state
        logger.info("%s failed to capture %s", player.name, plan.target.name)

        state.turn_log.append("Capture Failed!")
        self._set_notification(f"{player.name} Failed Capture!", NotificationType.ERROR)

        # Played cards never left the hand, so they are already "returned".
        penalty = (
            DRAGON_SPELL_PENALTY_CARDS
            if plan.combo == ComboType.DRAGON_SPELL
            else PENALTY_CARDS
        )
        penalty = min(penalty, len(player.hand))

        rotated = False
        if penalty > 0:
            state.phase = GamePhase.PENALTY_DISCARD
            state.penalty_cards_needed = penalty
            noun = "card" if penalty == 1 else "cards"
            state.turn_log.append(f"{player.name} must discard {penalty} {noun} as penalty.")
        else:
            state.phase = GamePhase.ACTION
            rotated = self._end_turn()

        self._complete(
            GameEvent.CAPTURE_FAILED,
            player_id=player.id,
            rotated=rotated,
            target_id=plan.target.id,
            total=state.dice_roll_config.total,
        )

    def _refill_landscape(self) -> None:
        """Top the landscape up, resolving events as they come off the deck.

        Stops early while an event is waiting on players.
        """
        state = self.state
        while (
            len(state.landscape) < self.settings.landscape_size
            and state.dragonwood_deck
            and state.phase not in _EVENT_PHASES
        ):
            card = state.dragonwood_deck.pop()
            if card.type == "event":
                self._apply_event(card)
            else:
                state.landscape.append(card)

    # =========================================================================
    # EVENTS
    # =========================================================================

    def resolve_event(self, card: EventCard) -> None:
        """
        Apply an event card to every player. The card leaves the game.

        Thunder Storm and Wind Storm enter a sub-phase when a human must
        choose a card; bots choose on the spot. Ignored once the game is over.
        """
        with self._lock:
            if self.state.phase == GamePhase.GAME_OVER:
                return
            old_phase = self.state.phase
            self._apply_event(card)
            self._complete(
                GameEvent.EVENT_RESOLVED,
                old_phase=old_phase,
                event_name=card.name,
            )

    def _apply_event(self, card: EventCard) -> None:
        state = self.state
        state.turn_log.append(f"Event: {card.name}! {card.description}")
        self._set_notification(f"Event: {card.name}!", NotificationType.INFO)
        logger.info("Event %s", card.name)

        if card.name == SUNNY_DAY:
            for player in state.players:
                self._perform_draw(player, 2)
        elif card.name == THUNDER_STORM:
            self._start_event_discard()
        elif card.name == QUICKSAND:
            removed = [c for c in state.landscape if c.type == "enhancement"]
            state.landscape = [c for c in state.landscape if c.type != "enhancement"]
            if removed:
                state.turn_log.append(
                    "Quicksand swallows " + ", ".join(c.name for c in removed) + "."
                )
        elif card.name == WIND_STORM:
            self._start_event_pass()
        else:
            logger.warning("Event %s has no effect", card.name)

    def _start_event_discard(self) -> None:
        state = self.state
        waiting: list[str] = []
        for player in state.players:
            if not player.hand:
                continue
            if player.is_bot:
                card = player.find_in_hand(choose_event_card(player.hand))
                self._discard_for_event(player, card)
            else:
                waiting.append(player.id)

        if waiting:
            state.phase = GamePhase.RESOLVE_EVENT_DISCARD
            state.pending_event_discards = waiting

    def _discard_for_event(self, player: Player, card: AdventurerCard | LuckyLadybugCard) -> None:
        player.hand.remove(card)
        self.state.discard_pile.append(card)
        self.state.turn_log.append(f"{player.name} discarded a card to the storm.")

    def _start_event_pass(self) -> None:
        state = self.state
        self._pass_choices = {}
        waiting: list[str] = []
        for player in state.players:
            if not player.hand:
                continue
            if player.is_bot:
                self._pass_choices[player.id] = choose_event_card(player.hand)
            else:
                waiting.append(player.id)

        if waiting:
            state.phase = GamePhase.RESOLVE_EVENT_PASS
            state.pending_event_passes = waiting
        else:
            self._apply_passes()

    def _apply_passes(self) -> None:
        """Move every chosen card to the next player, all at once."""
        state = self.state
        count = len(state.players)
        outgoing: list[tuple[int, AdventurerCard | LuckyLadybugCard]] = []
        for index, player in enumerate(state.players):
            card_id = self._pass_choices.get(player.id)
            card = player.find_in_hand(card_id) if card_id else None
            if card is not None:
                player.hand.remove(card)
                outgoing.append((index, card))

        for index, card in outgoing:
            state.players[(index + 1) % count].hand.append(card)

        self._pass_choices = {}
        state.turn_log.append("The wind carries a card to each neighbour.")

    def _after_event_resolved(self) -> bool:
        """Leave the event sub-phase; returns True if the turn rotated."""
        state = self.state
        state.phase = GamePhase.ACTION
        state.pending_event_discards = None
        state.pending_event_passes = None

        self._refill_landscape()
        if state.phase in _EVENT_PHASES:
            return False
        if self._check_game_over():
            return False
        if self._end_turn_after_event:
            self._end_turn_after_event = False
            return self._end_turn()
        return False

    # =========================================================================
    # TURN FLOW
    # =========================================================================

    def _end_turn(self) -> bool:
        """Rotate to the next player. Returns False if the game ended instead."""
        state = self.state
        if state.final_turns_left is not None:
            state.final_turns_left -= 1
            if state.final_turns_left <= 0:
                self._trigger_game_over("Adventure deck exhausted!")
                return False

        if self._check_game_over():
            return False

        state.current_player_index = (state.current_player_index + 1) % len(state.players)
        state.phase = GamePhase.ACTION
        state.penalty_cards_needed = None
        state.turn_number += 1
        return True

    def dragons_captured(self) -> int:
        return sum(
            1
            for player in self.state.players
            for card in player.captured_cards
            if card.type == "creature" and card.is_dragon
        )

    def _check_game_over(self) -> bool:
        if self.state.phase == GamePhase.GAME_OVER:
            return True
        if self.dragons_captured() >= DRAGONS_TO_WIN:
            self._trigger_game_over("Both Dragons have been defeated!")
            return True
        return False

    def scores(self) -> dict[str, int]:
        """Victory points per player id."""
        return {p.id: p.victory_points for p in self.state.players}

    def _trigger_game_over(self, reason: str) -> None:
        state = self.state
        state.phase = GamePhase.GAME_OVER
        state.game_over_reason = reason
        scores = self.scores()
        best = max(scores.values(), default=0)
        state.winner_ids = [pid for pid, points in scores.items() if points == best]
        state.turn_log.append(f"Game Over! {reason}")
        logger.info("Game over: %s (scores %s)", reason, scores)

    # =========================================================================
    # SCRIPTED OPPONENT
    # =========================================================================

    def _schedule_bot_turn(self) -> None:
        state = self.state
        self._scheduler.schedule(
            self.settings.bot_think_delay,
            partial(self._bot_turn_due, state.turn_number, state.current_player.id),
        )

    def _bot_still_up(self, turn_number: int, bot_id: str, phase: GamePhase) -> bool:
        state = self.state
        return (
            state.turn_number == turn_number
            and state.phase == phase
            and state.current_player.id == bot_id
            and state.current_player.is_bot
        )

    def _bot_turn_due(self, turn_number: int, bot_id: str) -> None:
        with self._lock:
            if not self._bot_still_up(turn_number, bot_id, GamePhase.ACTION):
                logger.debug("Skipping stale bot turn %d", turn_number)
                return
            self.run_bot_turn()

    def run_bot_turn(self) -> None:
        """
        Play the current bot's turn: capture if anything looks feasible,
        otherwise draw. A rejected capture also falls back to drawing.
        """
        with self._lock:
            state = self.state
            bot = state.current_player
            if state.phase != GamePhase.ACTION or not bot.is_bot:
                return

            move = choose_move(bot.hand, state.landscape)
            if move is None:
                self._bot_draw(bot)
                return

            logger.debug("%s chose %s on %s", bot.name, move.combo.value, move.target_name)
            state.turn_log.append(f"{bot.name} attacks {move.target_name} with {move.combo.value}!")
            try:
                self.declare_capture(move.target_id, move.combo, move.card_ids)
            except EngineError:
                logger.exception("Bot capture rejected; drawing instead")
                self._bot_draw(bot)
                return

            if state.phase == GamePhase.PENALTY_DISCARD and state.current_player.id == bot.id:
                state.turn_log.append(f"{bot.name} failed capture! Choosing card to discard...")
                self._complete(GameEvent.STATE_UPDATED, player_id=bot.id)
                self._scheduler.schedule(
                    self.settings.bot_discard_delay,
                    partial(self._bot_penalty_due, state.turn_number, bot.id),
                )

    def _bot_draw(self, bot: Player) -> None:
        state = self.state
        if not state.adventurer_deck and not state.discard_pile:
            # Nothing to draw and nothing to capture: pass rather than stall.
            state.turn_log.append(f"{bot.name} passes.")
            rotated = self._end_turn()
            self._complete(
                GameEvent.STATE_UPDATED,
                player_id=bot.id,
                old_phase=GamePhase.ACTION,
                rotated=rotated,
            )
            return
        self.draw_card()

    def _bot_penalty_due(self, turn_number: int, bot_id: str) -> None:
        with self._lock:
            if not self._bot_still_up(turn_number, bot_id, GamePhase.PENALTY_DISCARD):
                return
            bot = self.state.current_player
            while self.state.phase == GamePhase.PENALTY_DISCARD and bot.hand:
                self.resolve_penalty_discard(bot.hand[0].id)
