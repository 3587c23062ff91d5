"""Home page — title, player name, start a game against the bot."""

from __future__ import annotations

import streamlit as st

from src.engine.game import DragonwoodEngine
from src.utils.names import generate_random_name


def render_home_page() -> None:
    """Render the splash / name input page."""
    ss = st.session_state
    st.title("Dragonwood")
    st.caption("Gather adventurers, roll the dice, capture the dragons")

    if "default_name" not in ss:
        ss["default_name"] = generate_random_name()

    with st.form("start_game"):
        name = st.text_input("Your name", value=ss["default_name"], max_chars=40)
        started = st.form_submit_button("Enter the Dragonwood", type="primary")

    if started:
        old_engine = ss.get("engine")
        if old_engine is not None:
            old_engine.shutdown()
        engine = DragonwoodEngine(
            players=[
                (name.strip() or ss["default_name"], False),
                (generate_random_name(is_bot=True), True),
            ]
        )
        ss["engine"] = engine
        ss["player_id"] = engine.state.players[0].id
        ss["page"] = "game"
        st.rerun()
