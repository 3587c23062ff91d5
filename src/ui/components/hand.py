"""Hand component — adventurer cards with selection checkboxes."""

from __future__ import annotations

from typing import Sequence

import streamlit as st

from src.engine.models import AdventurerCard, LuckyLadybugCard


def render_hand(
    hand: Sequence[AdventurerCard | LuckyLadybugCard],
    key_prefix: str,
) -> list[str]:
    """Render the hand sorted by value. Returns the ids of ticked cards."""
    if not hand:
        st.caption("Your hand is empty. Draw a card!")
        return []

    ordered = sorted(
        hand,
        key=lambda c: (c.value, c.suit.value) if c.type == "adventurer" else (0, ""),
    )
    selected: list[str] = []
    cols = st.columns(min(len(ordered), 10))
    for i, card in enumerate(ordered):
        with cols[i % len(cols)]:
            if card.type == "adventurer":
                st.markdown(
                    f'<div class="adventurer suit-{card.suit.value}">{card.value}</div>',
                    unsafe_allow_html=True,
                )
            if st.checkbox(str(card), key=f"{key_prefix}_{card.id}"):
                selected.append(card.id)
    return selected
