"""Landscape component — the capturable cards, one column each."""

from __future__ import annotations

from typing import Sequence

import streamlit as st

from src.engine.models import CreatureCard, EnhancementCard, EventCard


def _card_html(card: CreatureCard | EnhancementCard | EventCard) -> str:
    if card.type == "event":
        return f'<div class="card event"><b>{card.name}</b><br>{card.description}</div>'

    cost = card.capture_cost
    classes = ["card", card.type]
    if card.type == "creature" and card.is_dragon:
        classes.append("dragon")
    detail = (
        f"{card.victory_points} VP"
        if card.type == "creature"
        else card.effect_description
    )
    return (
        f'<div class="{" ".join(classes)}">'
        f"<b>{card.name}</b><br>{detail}<br>"
        f'<span class="cost">Strike {cost.strike} · Stomp {cost.stomp} · Scream {cost.scream}</span>'
        "</div>"
    )


def render_landscape(
    landscape: Sequence[CreatureCard | EnhancementCard | EventCard],
    selectable: bool,
) -> str | None:
    """Render the landscape and return the id of the card picked as target."""
    st.subheader("The Dragonwood")
    if not landscape:
        st.caption("The landscape is empty.")
        return None

    cols = st.columns(len(landscape))
    for col, card in zip(cols, landscape):
        with col:
            st.markdown(_card_html(card), unsafe_allow_html=True)

    if not selectable:
        return None

    return st.radio(
        "Target",
        options=[c.id for c in landscape],
        format_func=lambda cid: next(c.name for c in landscape if c.id == cid),
        horizontal=True,
        key="landscape_target",
    )
