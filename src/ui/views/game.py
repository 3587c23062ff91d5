"""Game page — landscape, hand, dice tray, scoreboard and turn log."""

from __future__ import annotations

import streamlit as st

from src.engine.base import ComboType, EngineError, GamePhase
from src.engine.game import DragonwoodEngine
from src.ui.components.dice_tray import render_dice_tray
from src.ui.components.hand import render_hand
from src.ui.components.landscape import render_landscape
from src.ui.components.scoreboard import render_scoreboard
from src.ui.themes.animations import render_game_over_banner


def render_game_page() -> None:
    """Render the main game page."""
    ss = st.session_state
    engine: DragonwoodEngine | None = ss.get("engine")
    player_id = ss.get("player_id")

    if engine is None or not player_id:
        ss["page"] = "home"
        st.rerun()
        return

    state = engine.get_state()
    me = state.get_player(player_id)
    is_my_turn = state.current_player.id == player_id

    _render_toast(state)

    if state.phase == GamePhase.GAME_OVER:
        _render_game_over(engine)
        return

    top_left, top_right = st.columns([3, 1])
    with top_right:
        render_scoreboard(state.players, state.current_player_index, player_id, engine.scores())
        st.caption(
            f"Adventurer deck: {len(state.adventurer_deck)} · "
            f"Discard: {len(state.discard_pile)} · "
            f"Landscape deck: {len(state.dragonwood_deck)}"
        )
        if state.final_turns_left is not None:
            st.warning(f"Final turns left: {state.final_turns_left}")

    with top_left:
        target_id = render_landscape(state.landscape, selectable=is_my_turn)

    render_dice_tray(state.dice_roll_config)

    st.subheader(f"{me.name}'s hand")
    selected = render_hand(me.hand, key_prefix=f"hand_t{state.turn_number}")

    if is_my_turn and state.phase == GamePhase.ACTION:
        _render_action_controls(engine, player_id, target_id, selected)
    elif is_my_turn and state.phase == GamePhase.PENALTY_DISCARD:
        _render_card_choice(
            f"Capture failed! Discard {state.penalty_cards_needed} card(s).",
            me.hand,
            lambda card_id: engine.resolve_penalty_discard(card_id, player_id=player_id),
            key="penalty",
        )
    elif state.phase == GamePhase.RESOLVE_EVENT_DISCARD and player_id in (state.pending_event_discards or []):
        _render_card_choice(
            "Thunder Storm! Discard 1 card.",
            me.hand,
            lambda card_id: engine.handle_event_discard(player_id, card_id),
            key="event_discard",
        )
    elif state.phase == GamePhase.RESOLVE_EVENT_PASS and player_id in (state.pending_event_passes or []):
        _render_card_choice(
            "Wind Storm! Pass 1 card to your neighbour.",
            me.hand,
            lambda card_id: engine.handle_event_pass(player_id, card_id),
            key="event_pass",
        )
    else:
        st.info(f"Waiting for {state.current_player.name}...")

    with st.expander("Turn log", expanded=False):
        for line in reversed(state.turn_log[-30:]):
            st.text(line)

    # Polling fragment so the bot's moves show up
    _poll_engine_state()


# === Controls ===


def _render_action_controls(engine, player_id, target_id, selected) -> None:
    state = engine.get_state()
    me = state.get_player(player_id)
    consumables = [
        c for c in me.captured_cards
        if c.type == "enhancement" and c.name in ("Lightning Bolt", "Friendly Bunny")
    ]

    combo = st.radio(
        "Attack",
        [c.value for c in ComboType],
        horizontal=True,
        key=f"combo_t{state.turn_number}",
    )
    spent = st.multiselect(
        "Spend consumables",
        options=[c.id for c in consumables],
        format_func=lambda cid: next(c.name for c in consumables if c.id == cid),
        key=f"consumables_t{state.turn_number}",
    )

    if target_id and selected:
        try:
            odds = engine.capture_odds(target_id, combo, selected, spent)
            st.caption(f"Chance of success: {odds:.1f}%")
        except EngineError as exc:
            st.caption(f"Not a valid attack: {exc}")

    cols = st.columns(2)
    with cols[0]:
        if st.button("Draw a card", use_container_width=True, key=f"draw_t{state.turn_number}"):
            engine.draw_card(player_id=player_id)
            st.rerun()
    with cols[1]:
        if st.button(
            "Attack!",
            use_container_width=True,
            type="primary",
            disabled=not (target_id and selected),
            key=f"attack_t{state.turn_number}",
        ):
            try:
                engine.declare_capture(target_id, combo, selected, spent, player_id=player_id)
            except EngineError as exc:
                st.error(str(exc))
                return
            st.rerun()


def _render_card_choice(prompt, hand, on_choose, key) -> None:
    st.warning(prompt)
    if not hand:
        return
    choice = st.selectbox(
        "Card",
        options=[c.id for c in hand],
        format_func=lambda cid: str(next(c for c in hand if c.id == cid)),
        key=f"{key}_select",
    )
    if st.button("Confirm", key=f"{key}_confirm", type="primary"):
        try:
            on_choose(choice)
        except EngineError as exc:
            st.error(str(exc))
            return
        st.rerun()


def _render_toast(state) -> None:
    note = state.latest_notification
    if note is None or st.session_state.get("_last_toast") == note.id:
        return
    st.session_state["_last_toast"] = note.id
    st.toast(note.message)


def _render_game_over(engine: DragonwoodEngine) -> None:
    render_game_over_banner(engine.get_state(), engine.scores())
    if st.button("Play again", type="primary"):
        engine.shutdown()
        st.session_state.pop("engine", None)
        st.session_state["page"] = "home"
        st.rerun()


@st.fragment(run_every=1)
def _poll_engine_state() -> None:
    """Rerun the page when the bot changes the state behind our back."""
    ss = st.session_state
    engine = ss.get("engine")
    if engine is None:
        return
    state = engine.get_state()
    marker = (state.turn_number, len(state.turn_log), state.phase)
    if ss.get("_state_marker") is None:
        ss["_state_marker"] = marker
        return
    if marker != ss["_state_marker"]:
        ss["_state_marker"] = marker
        st.rerun(scope="app")
