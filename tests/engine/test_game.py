"""
Dragonwood - Game Engine Tests

Turn flow, capturing, penalties, enhancements and the win conditions.
"""

import pytest

from src.engine.base import (
    CardNotFoundError,
    ComboType,
    GamePhase,
    InvalidCombinationError,
    InvalidSelectionError,
)
from src.engine.models import LuckyLadybugCard
from src.realtime.events import GameEvent


def setup_table(engine, hand, landscape, deck=()):
    """Give the first player ``hand`` and replace the landscape and its deck."""
    engine.state.players[0].hand = list(hand)
    engine.state.landscape = list(landscape)
    engine.state.dragonwood_deck = list(deck)


@pytest.fixture
def events(engine):
    received = []
    engine.subscribe(lambda payload: received.append(payload))
    return received


# =============================================================================
# SETUP
# =============================================================================

class TestSetup:
    def test_opening_hands(self, engine):
        for player in engine.state.players:
            assert len(player.hand) == 5
            assert all(c.type == "adventurer" for c in player.hand)

    def test_opening_landscape(self, engine):
        assert len(engine.state.landscape) == 5
        assert engine.state.phase == GamePhase.ACTION
        assert engine.state.turn_log == ["Game Started"]

    def test_dealt_ladybugs_are_discarded(self, engine):
        assert all(c.type == "lucky_ladybug" for c in engine.state.discard_pile)

    def test_player_ids_follow_seat_order(self, engine):
        assert [p.id for p in engine.state.players] == ["p1", "p2"]
        assert [p.is_bot for p in engine.state.players] == [False, True]

    def test_every_card_accounted_for(self, make_engine):
        engine = make_engine(include_events=True)
        ids = engine.state.all_card_ids()
        assert len(ids) == 64 + 32
        assert len(ids) == len(set(ids))

    def test_opening_events_return_to_deck(self, make_engine):
        engine = make_engine(include_events=True)
        assert all(c.type != "event" for c in engine.state.landscape)
        assert sum(c.type == "event" for c in engine.state.dragonwood_deck) == 4

    def test_bot_first_is_scheduled(self, make_engine, scheduler):
        engine = make_engine(players=[("Bot: Moss", True), ("Alice", False)])
        assert scheduler.pending == 1
        assert engine.state.turn_log[-1] == "Bot: Moss is thinking..."

    def test_default_seats(self, settings, dice, scheduler):
        from src.engine.game import DragonwoodEngine

        engine = DragonwoodEngine(settings, dice=dice, scheduler=scheduler)
        try:
            assert engine.state.players[0].name == "Player 1"
            assert engine.state.players[1].is_bot
            assert engine.state.players[1].name.startswith("Bot: ")
        finally:
            engine.shutdown()


# =============================================================================
# DRAWING
# =============================================================================

class TestDrawCard:
    def test_draw_adds_card_and_ends_turn(self, engine, adv):
        card = adv("red", 7)
        engine.state.adventurer_deck.append(card)
        engine.draw_card()

        alice = engine.state.players[0]
        assert alice.hand[-1] == card
        assert engine.state.current_player.id == "p2"
        assert engine.state.turn_number == 2
        assert "Alice drew 7 red" in engine.state.turn_log

    def test_turn_passes_to_bot(self, engine, scheduler):
        engine.draw_card()
        assert scheduler.pending == 1
        assert engine.state.turn_log[-1] == "Bot: Bramble is thinking..."

    def test_lucky_ladybug_draws_two(self, engine, adv):
        ladybug = LuckyLadybugCard(id="lb_test")
        engine.state.adventurer_deck = [adv("red", 1), adv("red", 2), ladybug]
        engine.draw_card()

        alice = engine.state.players[0]
        assert len(alice.hand) == 7
        assert ladybug in engine.state.discard_pile
        assert any("Lucky Ladybug" in line for line in engine.state.turn_log)

    def test_chained_ladybugs(self, engine, adv):
        engine.state.adventurer_deck = [
            adv("red", 1),
            adv("red", 2),
            adv("red", 3),
            LuckyLadybugCard(id="lb_b"),
            LuckyLadybugCard(id="lb_a"),
        ]
        engine.draw_card()
        assert len(engine.state.players[0].hand) == 8

    def test_reshuffle_discard(self, engine, adv):
        card = adv("blue", 9)
        engine.state.adventurer_deck = []
        engine.state.discard_pile = [card]
        engine.draw_card()

        assert engine.state.deck_cycles == 2
        assert card in engine.state.players[0].hand
        assert engine.state.discard_pile == []
        assert "Reshuffling Discard Pile into Deck..." in engine.state.turn_log

    def test_nothing_to_draw(self, engine):
        engine.state.adventurer_deck = []
        engine.state.discard_pile = []
        engine.draw_card()

        assert engine.state.current_player.id == "p1"
        assert engine.state.turn_number == 1
        assert engine.state.turn_log[-1] == "Adventurer Deck is empty and Discard is empty!"

    def test_only_ladybugs_left(self, engine):
        ladybugs = [LuckyLadybugCard(id="lb_a"), LuckyLadybugCard(id="lb_b")]
        engine.state.adventurer_deck = []
        engine.state.discard_pile = list(ladybugs)
        engine.draw_card()

        state = engine.state
        assert len(state.players[0].hand) == 5
        assert state.deck_cycles == 2
        assert sorted(c.id for c in state.adventurer_deck) == ["lb_a", "lb_b"]
        assert "Only Lucky Ladybugs are left in the Adventurer Deck!" in state.turn_log
        assert state.final_turns_left == 2
        assert state.current_player.id == "p2"

    def test_ladybug_chain_into_empty_deck(self, engine):
        engine.state.adventurer_deck = [LuckyLadybugCard(id="lb_a")]
        engine.state.discard_pile = []
        engine.draw_card()

        state = engine.state
        assert len(state.players[0].hand) == 5
        assert state.final_turns_left == 2
        assert state.turn_number == 2

    def test_draw_only_game_ends(self, two_humans):
        engine = two_humans
        for _ in range(200):
            if engine.state.phase == GamePhase.GAME_OVER:
                break
            engine.draw_card()

        state = engine.state
        assert state.phase == GamePhase.GAME_OVER
        assert state.game_over_reason == "Adventure deck exhausted!"
        assert all(c.type == "lucky_ladybug" for c in state.adventurer_deck + state.discard_pile)

    def test_wrong_player_ignored(self, engine):
        engine.draw_card(player_id="p2")
        assert engine.state.current_player.id == "p1"
        assert len(engine.state.players[1].hand) == 5

    def test_outside_action_phase_ignored(self, engine):
        engine.state.phase = GamePhase.PENALTY_DISCARD
        engine.draw_card()
        assert len(engine.state.players[0].hand) == 5


class TestFinalTurns:
    def test_second_reshuffle_starts_final_turns(self, two_humans, adv):
        engine = two_humans
        engine.state.deck_cycles = 2
        engine.state.adventurer_deck = []
        engine.state.discard_pile = [adv("red", v) for v in range(1, 6)]

        engine.draw_card()
        assert engine.state.deck_cycles == 3
        assert engine.state.final_turns_left == 2
        assert "Adventure Deck exhausted twice! Each player gets 1 final turn!" in engine.state.turn_log

        engine.draw_card()
        assert engine.state.final_turns_left == 1
        assert engine.state.phase == GamePhase.ACTION

        engine.draw_card()
        assert engine.state.phase == GamePhase.GAME_OVER
        assert engine.state.game_over_reason == "Adventure deck exhausted!"

    def test_winner_by_points(self, two_humans, adv, creature):
        engine = two_humans
        engine.state.players[1].captured_cards = [creature(victory_points=4)]
        engine.state.final_turns_left = 1
        engine.draw_card()

        assert engine.state.phase == GamePhase.GAME_OVER
        assert engine.state.winner_ids == ["p2"]
        assert engine.state.turn_log[-1] == "Game Over! Adventure deck exhausted!"


# =============================================================================
# CAPTURING
# =============================================================================

class TestCaptureSuccess:
    def test_capture_moves_target_and_discards_cards(self, engine, dice, adv, creature):
        played = [adv("red", 2), adv("red", 9), adv("red", 11)]
        kept = adv("blue", 5)
        target = creature(stomp=7)
        setup_table(engine, played + [kept], [target])
        dice.load(3, 3, 2)

        engine.declare_capture(target.id, ComboType.STOMP, [c.id for c in played])

        alice = engine.state.players[0]
        assert target in alice.captured_cards
        assert target not in engine.state.landscape
        assert alice.hand == [kept]
        assert all(c in engine.state.discard_pile for c in played)
        assert engine.state.current_player.id == "p2"
        assert "Capture Successful!" in engine.state.turn_log

    def test_roll_snapshot(self, engine, dice, adv, creature):
        cards = [adv("red", 4), adv("blue", 5)]
        target = creature(strike=5)
        setup_table(engine, cards, [target])
        dice.load(2, 4)

        engine.declare_capture(target.id, "strike", [c.id for c in cards])

        config = engine.state.dice_roll_config
        assert config.results == [2, 4]
        assert config.total == 6
        assert config.required == 5
        assert config.success is True
        assert config.pending is False
        assert config.player.name == "Alice"
        assert config.combo == ComboType.STRIKE
        assert "Alice rolled 2, 4 (Sum: 6) = Total: 6 for strike on Test Beast" in engine.state.turn_log

    def test_landscape_refilled(self, engine, dice, adv, creature):
        card = adv("red", 4)
        target = creature(scream=1)
        replacement = creature("Wild Boar")
        setup_table(engine, [card], [target], deck=[replacement])
        dice.load(1)

        engine.declare_capture(target.id, ComboType.SCREAM, [card.id])
        assert engine.state.landscape == [replacement]


class TestCaptureFailure:
    def test_failure_keeps_cards_and_enters_penalty(self, engine, dice, adv, creature):
        cards = [adv("red", 4), adv("blue", 4), adv("green", 9)]
        target = creature(scream=8)
        setup_table(engine, cards, [target])
        dice.load(1, 1)

        engine.declare_capture(target.id, ComboType.SCREAM, [cards[0].id, cards[1].id])

        alice = engine.state.players[0]
        assert alice.hand == cards
        assert target in engine.state.landscape
        assert engine.state.phase == GamePhase.PENALTY_DISCARD
        assert engine.state.penalty_cards_needed == 1
        assert engine.state.current_player.id == "p1"
        assert "Capture Failed!" in engine.state.turn_log

    def test_penalty_discard_ends_turn(self, engine, dice, adv, creature):
        cards = [adv("red", 4), adv("green", 9)]
        target = creature(scream=8)
        setup_table(engine, cards, [target])
        dice.load(1)
        engine.declare_capture(target.id, ComboType.SCREAM, [cards[0].id])

        engine.resolve_penalty_discard(cards[1].id)

        assert engine.state.players[0].hand == [cards[0]]
        assert cards[1] in engine.state.discard_pile
        assert engine.state.phase == GamePhase.ACTION
        assert engine.state.penalty_cards_needed is None
        assert engine.state.current_player.id == "p2"

    def test_penalty_discard_unknown_card(self, engine, dice, adv, creature):
        card = adv("red", 4)
        target = creature(scream=8)
        setup_table(engine, [card], [target])
        dice.load(1)
        engine.declare_capture(target.id, ComboType.SCREAM, [card.id])

        with pytest.raises(CardNotFoundError, match="Card not found in hand"):
            engine.resolve_penalty_discard("nope")
        assert engine.state.phase == GamePhase.PENALTY_DISCARD

    def test_penalty_discard_outside_phase_ignored(self, engine):
        card_id = engine.state.players[0].hand[0].id
        engine.resolve_penalty_discard(card_id)
        assert len(engine.state.players[0].hand) == 5

    def test_capture_during_penalty_ignored(self, engine, dice, adv, creature):
        card = adv("red", 4)
        target = creature(scream=8)
        setup_table(engine, [card], [target])
        dice.load(1)
        engine.declare_capture(target.id, ComboType.SCREAM, [card.id])

        dice.load(4, 4, 4)
        engine.declare_capture(target.id, ComboType.SCREAM, [card.id])
        assert target in engine.state.landscape
        assert len(dice.queue) == 3


class TestCaptureValidation:
    def test_seven_cards_rejected(self, engine, adv, creature):
        cards = [adv("red", v) for v in range(1, 8)]
        target = creature()
        setup_table(engine, cards, [target])

        with pytest.raises(InvalidCombinationError, match="Max 6 cards allowed"):
            engine.declare_capture(target.id, ComboType.STOMP, [c.id for c in cards])
        assert engine.state.players[0].hand == cards
        assert engine.state.phase == GamePhase.ACTION

    def test_unknown_target(self, engine, adv, creature):
        card = adv("red", 1)
        setup_table(engine, [card], [creature()])
        with pytest.raises(CardNotFoundError, match="Target card not found in landscape"):
            engine.declare_capture("missing", ComboType.STOMP, [card.id])

    def test_card_not_in_hand(self, engine, adv, creature):
        target = creature()
        setup_table(engine, [adv("red", 1)], [target])
        with pytest.raises(InvalidSelectionError, match="Invalid cards selected"):
            engine.declare_capture(target.id, ComboType.STOMP, ["t_red_2"])

    def test_duplicate_ids(self, engine, adv, creature):
        card = adv("red", 1)
        target = creature()
        setup_table(engine, [card], [target])
        with pytest.raises(InvalidSelectionError):
            engine.declare_capture(target.id, ComboType.SCREAM, [card.id, card.id])

    def test_empty_selection(self, engine, creature):
        target = creature()
        setup_table(engine, [], [target])
        with pytest.raises(InvalidSelectionError, match="at least 1 card"):
            engine.declare_capture(target.id, ComboType.STOMP, [])

    def test_wrong_shape(self, engine, adv, creature):
        cards = [adv("red", 1), adv("blue", 5)]
        target = creature()
        setup_table(engine, cards, [target])
        with pytest.raises(InvalidCombinationError, match="for strike"):
            engine.declare_capture(target.id, ComboType.STRIKE, [c.id for c in cards])

    def test_unknown_combo(self, engine, adv, creature):
        card = adv("red", 1)
        target = creature()
        setup_table(engine, [card], [target])
        with pytest.raises(InvalidCombinationError, match="Unknown combination"):
            engine.declare_capture(target.id, "punch", [card.id])

    def test_rejected_capture_rolls_nothing(self, engine, dice, adv, creature):
        cards = [adv("red", 1), adv("blue", 5)]
        target = creature()
        setup_table(engine, cards, [target])
        dice.load(4, 4)
        with pytest.raises(InvalidCombinationError):
            engine.declare_capture(target.id, ComboType.SCREAM, [c.id for c in cards])
        assert len(dice.queue) == 2


# =============================================================================
# DRAGON SPELL
# =============================================================================

class TestDragonSpell:
    def test_rolls_two_dice_against_six(self, engine, dice, adv, creature):
        cards = [adv("blue", 5), adv("blue", 6), adv("blue", 7)]
        dragon = creature("Orange Dragon", victory_points=6, is_dragon=True)
        setup_table(engine, cards, [dragon])
        dice.load(3, 3)

        engine.declare_capture(dragon.id, ComboType.DRAGON_SPELL, [c.id for c in cards])

        config = engine.state.dice_roll_config
        assert config.results == [3, 3]
        assert config.required == 6
        assert dragon in engine.state.players[0].captured_cards

    def test_failure_costs_two_cards(self, engine, dice, adv, creature):
        cards = [adv("blue", 5), adv("blue", 6), adv("blue", 7), adv("red", 1)]
        dragon = creature("Blue Dragon", victory_points=7, is_dragon=True)
        setup_table(engine, cards, [dragon])
        dice.load(1, 2)

        engine.declare_capture(dragon.id, ComboType.DRAGON_SPELL, [c.id for c in cards[:3]])
        assert engine.state.penalty_cards_needed == 2

        engine.resolve_penalty_discard(cards[3].id)
        assert engine.state.phase == GamePhase.PENALTY_DISCARD
        assert engine.state.penalty_cards_needed == 1

        engine.resolve_penalty_discard(cards[0].id)
        assert engine.state.phase == GamePhase.ACTION
        assert engine.state.current_player.id == "p2"
        assert len(engine.state.players[0].hand) == 2

    def test_non_dragon_target(self, engine, adv, creature):
        cards = [adv("blue", 5), adv("blue", 6), adv("blue", 7)]
        target = creature()
        setup_table(engine, cards, [target])
        with pytest.raises(InvalidCombinationError, match="only be used on a Dragon"):
            engine.declare_capture(target.id, ComboType.DRAGON_SPELL, [c.id for c in cards])

    def test_not_a_straight_flush(self, engine, adv, creature):
        cards = [adv("blue", 5), adv("red", 6), adv("blue", 7)]
        dragon = creature("Orange Dragon", is_dragon=True)
        setup_table(engine, cards, [dragon])
        with pytest.raises(InvalidCombinationError, match="3-card Straight Flush"):
            engine.declare_capture(dragon.id, ComboType.DRAGON_SPELL, [c.id for c in cards])


# =============================================================================
# ENHANCEMENTS
# =============================================================================

class TestEnhancements:
    def test_passive_bonus_applies_to_matching_combo(self, engine, dice, adv, creature, enhancement):
        cards = [adv("red", 4), adv("blue", 5)]
        target = creature(strike=7)
        setup_table(engine, cards, [target])
        engine.state.players[0].captured_cards = [enhancement("Silver Sword")]
        dice.load(3, 2)

        engine.declare_capture(target.id, ComboType.STRIKE, [c.id for c in cards])

        config = engine.state.dice_roll_config
        assert config.bonus == 2
        assert config.total == 7
        assert config.success is True
        assert "Alice rolled 3, 2 (Sum: 5) + Bonus: 2 = Total: 7 for strike on Test Beast" in engine.state.turn_log

    def test_passive_bonus_ignores_other_combos(self, engine, dice, adv, creature, enhancement):
        cards = [adv("red", 4), adv("blue", 4)]
        target = creature(scream=7)
        setup_table(engine, cards, [target])
        engine.state.players[0].captured_cards = [enhancement("Silver Sword")]
        dice.load(3, 2)

        engine.declare_capture(target.id, ComboType.SCREAM, [c.id for c in cards])
        assert engine.state.dice_roll_config.bonus == 0
        assert engine.state.phase == GamePhase.PENALTY_DISCARD

    def test_enhancement_target_uses_raw_dice(self, engine, dice, adv, enhancement):
        cards = [adv("red", 4), adv("blue", 5)]
        target = enhancement("Magical Boots", strike=6)
        setup_table(engine, cards, [target])
        engine.state.players[0].captured_cards = [enhancement("Silver Sword")]
        dice.load(3, 2)

        engine.declare_capture(target.id, ComboType.STRIKE, [c.id for c in cards])
        assert engine.state.dice_roll_config.bonus == 0
        assert engine.state.dice_roll_config.success is False

    def test_lightning_bolt(self, engine, dice, adv, creature, enhancement):
        cards = [adv("red", 4), adv("blue", 4)]
        target = creature(scream=6)
        bolt = enhancement("Lightning Bolt")
        setup_table(engine, cards, [target])
        engine.state.players[0].captured_cards = [bolt]
        dice.load(1, 1)

        engine.declare_capture(
            target.id, ComboType.SCREAM, [c.id for c in cards], consumable_ids=[bolt.id]
        )

        alice = engine.state.players[0]
        assert engine.state.dice_roll_config.total == 6
        assert bolt not in alice.captured_cards
        assert target in alice.captured_cards
        assert "Alice uses Lightning Bolt!" in engine.state.turn_log

    def test_friendly_bunny_adds_a_die(self, engine, dice, adv, creature, enhancement):
        cards = [adv("red", 4), adv("blue", 4)]
        target = creature(scream=5)
        bunny = enhancement("Friendly Bunny")
        setup_table(engine, cards, [target])
        engine.state.players[0].captured_cards = [bunny]
        dice.load(1, 1, 1)

        engine.declare_capture(
            target.id, ComboType.SCREAM, [c.id for c in cards], consumable_ids=[bunny.id]
        )

        assert len(engine.state.dice_roll_config.results) == 3
        assert bunny not in engine.state.players[0].captured_cards

    def test_consumable_spent_on_enhancement_target(self, engine, dice, adv, enhancement):
        cards = [adv("red", 4), adv("blue", 4)]
        target = enhancement("Honey Pot", scream=6)
        bolt = enhancement("Lightning Bolt")
        setup_table(engine, cards, [target])
        engine.state.players[0].captured_cards = [bolt]
        dice.load(2, 2)

        engine.declare_capture(
            target.id, ComboType.SCREAM, [c.id for c in cards], consumable_ids=[bolt.id]
        )

        assert engine.state.dice_roll_config.bonus == 0
        assert engine.state.dice_roll_config.success is False
        assert bolt not in engine.state.players[0].captured_cards

    def test_unknown_consumable(self, engine, adv, creature):
        card = adv("red", 4)
        target = creature()
        setup_table(engine, [card], [target])
        with pytest.raises(CardNotFoundError, match="Consumable card e_x not found"):
            engine.declare_capture(target.id, ComboType.SCREAM, [card.id], consumable_ids=["e_x"])

    def test_passive_card_is_not_consumable(self, engine, adv, creature, enhancement):
        card = adv("red", 4)
        target = creature()
        sword = enhancement("Silver Sword")
        setup_table(engine, [card], [target])
        engine.state.players[0].captured_cards = [sword]
        with pytest.raises(
            InvalidCombinationError,
            match="Only Lightning Bolt and Friendly Bunny can be used as consumables",
        ):
            engine.declare_capture(target.id, ComboType.SCREAM, [card.id], consumable_ids=[sword.id])
        assert sword in engine.state.players[0].captured_cards

    def test_honey_pot_rerolls_ones(self, engine, dice, adv, creature, enhancement):
        cards = [adv("red", 4), adv("blue", 5)]
        target = creature(strike=7)
        setup_table(engine, cards, [target])
        engine.state.players[0].captured_cards = [enhancement("Honey Pot")]
        dice.load(1, 3, 4)

        engine.declare_capture(target.id, ComboType.STRIKE, [c.id for c in cards])

        assert engine.state.dice_roll_config.results == [4, 3]
        assert engine.state.dice_roll_config.success is True
        assert any("Honey Pot" in line for line in engine.state.turn_log)


class TestCaptureOdds:
    def test_matches_calculator(self, engine, adv, creature):
        cards = [adv("red", 4), adv("blue", 4)]
        target = creature(scream=6)
        setup_table(engine, cards, [target])
        assert engine.capture_odds(target.id, ComboType.SCREAM, [c.id for c in cards]) == pytest.approx(13 / 36 * 100)

    def test_consumable_counted_but_not_spent(self, engine, adv, creature, enhancement):
        cards = [adv("red", 4), adv("blue", 4)]
        target = creature(scream=6)
        bolt = enhancement("Lightning Bolt")
        setup_table(engine, cards, [target])
        engine.state.players[0].captured_cards = [bolt]

        odds = engine.capture_odds(target.id, ComboType.SCREAM, [c.id for c in cards], [bolt.id])
        assert odds == 100.0
        assert bolt in engine.state.players[0].captured_cards
        assert engine.state.phase == GamePhase.ACTION

    def test_validates_like_capture(self, engine, adv, creature):
        target = creature()
        setup_table(engine, [adv("red", 1)], [target])
        with pytest.raises(InvalidSelectionError):
            engine.capture_odds(target.id, ComboType.SCREAM, ["missing"])


# =============================================================================
# WINNING
# =============================================================================

class TestDragonVictory:
    def test_second_dragon_ends_game(self, engine, dice, scheduler, adv, creature):
        orange = creature("Orange Dragon", victory_points=6, is_dragon=True)
        blue = creature("Blue Dragon", victory_points=7, is_dragon=True)
        cards = [adv("green", 1), adv("green", 2), adv("green", 3)]
        setup_table(engine, cards, [blue])
        engine.state.players[1].captured_cards = [orange]
        dice.load(4, 4)

        engine.declare_capture(blue.id, ComboType.DRAGON_SPELL, [c.id for c in cards])

        state = engine.state
        assert state.phase == GamePhase.GAME_OVER
        assert state.game_over_reason == "Both Dragons have been defeated!"
        assert state.winner_ids == ["p1"]
        assert engine.dragons_captured() == 2
        assert engine.scores() == {"p1": 7, "p2": 6}
        assert state.current_player.id == "p1"
        assert scheduler.pending == 0

    def test_first_dragon_does_not_end_game(self, engine, dice, adv, creature):
        orange = creature("Orange Dragon", victory_points=6, is_dragon=True)
        cards = [adv("green", 1), adv("green", 2), adv("green", 3)]
        setup_table(engine, cards, [orange])
        dice.load(4, 4)

        engine.declare_capture(orange.id, ComboType.DRAGON_SPELL, [c.id for c in cards])

        state = engine.state
        assert orange in state.players[0].captured_cards
        assert engine.dragons_captured() == 1
        assert state.phase == GamePhase.ACTION
        assert state.game_over_reason is None
        assert state.current_player.id == "p2"
        assert state.turn_number == 2

    def test_commands_ignored_after_game_over(self, engine):
        engine.state.phase = GamePhase.GAME_OVER
        hand = list(engine.state.players[0].hand)
        engine.draw_card()
        assert engine.state.players[0].hand == hand

    def test_tie_shares_the_win(self, two_humans, creature):
        engine = two_humans
        engine.state.players[0].captured_cards = [creature(victory_points=3)]
        engine.state.players[1].captured_cards = [creature("Ogre", victory_points=3)]
        engine.state.final_turns_left = 1
        engine.draw_card()
        assert engine.state.winner_ids == ["p1", "p2"]


# =============================================================================
# NAMES AND NOTIFICATIONS
# =============================================================================

class TestSetPlayerName:
    def test_rename(self, engine):
        engine.set_player_name("p1", "  Rowan  ")
        assert engine.state.players[0].name == "Rowan"

    def test_truncated(self, engine):
        engine.set_player_name("p1", "x" * 60)
        assert len(engine.state.players[0].name) == 40

    def test_long_seat_name_truncated(self, make_engine):
        engine = make_engine(players=[("y" * 60, False), ("  ", False)])
        assert engine.state.players[0].name == "y" * 40
        assert engine.state.players[1].name == "Player 2"

    @pytest.mark.parametrize("player_id,name", [("p1", "   "), ("p9", "Ghost")])
    def test_ignored(self, engine, player_id, name):
        engine.set_player_name(player_id, name)
        assert engine.state.players[0].name == "Alice"


class TestNotifications:
    def test_draw_then_turn_advanced(self, engine, events):
        engine.draw_card()
        assert [p.event for p in events] == [GameEvent.CARD_DRAWN, GameEvent.TURN_ADVANCED]
        assert events[0].player_id == "p1"
        assert events[1].player_id == "p2"
        assert events[1].data == {"turn_number": 2}

    def test_failed_capture(self, engine, events, dice, adv, creature):
        card = adv("red", 4)
        target = creature(scream=8)
        setup_table(engine, [card], [target])
        dice.load(1)
        engine.declare_capture(target.id, ComboType.SCREAM, [card.id])
        assert [p.event for p in events] == [GameEvent.CAPTURE_FAILED]

    def test_game_over(self, two_humans):
        engine = two_humans
        received = []
        engine.subscribe(received.append)
        engine.state.final_turns_left = 1
        engine.draw_card()
        assert [p.event for p in received] == [GameEvent.GAME_OVER]

    def test_rejected_command_is_silent(self, engine, events, creature):
        setup_table(engine, [], [creature()])
        with pytest.raises(CardNotFoundError):
            engine.declare_capture("missing", ComboType.STOMP, ["x"])
        assert events == []

    def test_unsubscribe(self, engine):
        received = []
        unsubscribe = engine.subscribe(received.append)
        unsubscribe()
        engine.draw_card()
        assert received == []

    def test_listener_error_does_not_block_state(self, engine):
        def boom(payload):
            raise RuntimeError("listener broke")

        engine.subscribe(boom)
        engine.draw_card()
        assert engine.state.current_player.id == "p2"

    def test_notification_ids_increase(self, engine):
        engine.draw_card()
        first = engine.state.latest_notification.id
        engine.set_player_name("p2", "Bot: Fern")
        engine.state.current_player_index = 0
        engine.draw_card()
        assert engine.state.latest_notification.id > first

    def test_rename_event(self, engine, events):
        engine.set_player_name("p1", "Rowan")
        assert events[0].event == GameEvent.PLAYER_RENAMED
        assert events[0].data == {"name": "Rowan"}


# =============================================================================
# SCRIPTED OPPONENT
# =============================================================================

class TestBotTurns:
    def _hand_to_bot(self, engine, hand, landscape):
        engine.draw_card()
        engine.state.players[1].hand = list(hand)
        engine.state.landscape = list(landscape)
        engine.state.dragonwood_deck = []

    def test_bot_draws_without_feasible_capture(self, engine, scheduler, adv, creature):
        self._hand_to_bot(engine, [adv("red", 1)], [creature(strike=99, stomp=99, scream=99)])
        scheduler.run_next()

        bot = engine.state.players[1]
        assert len(bot.hand) >= 2
        assert engine.state.current_player.id == "p1"
        assert engine.state.turn_number == 3
        assert any(line.startswith("Bot: Bramble drew") for line in engine.state.turn_log)

    def test_bot_draw_hides_card(self, engine, scheduler, adv, creature):
        self._hand_to_bot(engine, [adv("red", 1)], [creature(strike=99, stomp=99, scream=99)])
        engine.state.adventurer_deck.append(adv("blue", 12))
        scheduler.run_next()
        assert "Bot: Bramble drew a card" in engine.state.turn_log
        assert "Bot: Bramble drew 12 blue" not in engine.state.turn_log

    def test_bot_captures(self, engine, scheduler, dice, adv, creature):
        target = creature(strike=99, stomp=99, scream=5)
        self._hand_to_bot(engine, [adv("red", 4), adv("blue", 4)], [target])
        dice.load(3, 3)
        scheduler.run_next()

        assert target in engine.state.players[1].captured_cards
        assert "Bot: Bramble attacks Test Beast with scream!" in engine.state.turn_log
        assert engine.state.current_player.id == "p1"

    def test_bot_pays_penalty(self, engine, scheduler, dice, adv, creature):
        target = creature(strike=99, stomp=99, scream=5)
        self._hand_to_bot(engine, [adv("red", 4), adv("blue", 4)], [target])
        dice.load(1, 1)
        scheduler.run_next()

        assert engine.state.phase == GamePhase.PENALTY_DISCARD
        assert "Bot: Bramble failed capture! Choosing card to discard..." in engine.state.turn_log
        assert scheduler.pending == 1

        scheduler.run_next()
        assert engine.state.phase == GamePhase.ACTION
        assert len(engine.state.players[1].hand) == 1
        assert engine.state.current_player.id == "p1"

    def test_stale_callback_ignored(self, engine, scheduler, adv, creature):
        self._hand_to_bot(engine, [adv("red", 1)], [creature(strike=99, stomp=99, scream=99)])
        _, callback = scheduler.calls[0]
        scheduler.run_next()

        hand_size = len(engine.state.players[1].hand)
        callback()
        assert len(engine.state.players[1].hand) == hand_size
        assert engine.state.turn_number == 3

    def test_bot_passes_with_nothing_to_do(self, engine, scheduler, adv, creature):
        self._hand_to_bot(engine, [adv("red", 1)], [creature(strike=99, stomp=99, scream=99)])
        engine.state.adventurer_deck = []
        engine.state.discard_pile = []
        scheduler.run_next()

        assert "Bot: Bramble passes." in engine.state.turn_log
        assert engine.state.current_player.id == "p1"

    def test_run_bot_turn_ignores_humans(self, engine):
        engine.run_bot_turn()
        assert engine.state.current_player.id == "p1"
        assert engine.state.turn_number == 1

    def test_shutdown_drops_bot_turn(self, engine, scheduler):
        engine.draw_card()
        engine.shutdown()
        assert scheduler.pending == 0
