"""Scoreboard component — victory points and turn indicator."""

from __future__ import annotations

import streamlit as st

from src.engine.models import Player


def render_scoreboard(
    players: list[Player],
    current_player_index: int,
    my_player_id: str,
    scores: dict[str, int],
) -> None:
    """Render the scoreboard panel.

    Args:
        players: All players in turn order.
        current_player_index: Index into ``players`` for whose turn it is.
        my_player_id: The local player's id.
        scores: Victory points per player id.
    """
    html = ['<div class="scoreboard">']
    html.append('<div class="scoreboard-title">Victory Points</div>')

    for idx, player in enumerate(players):
        is_active = idx == current_player_index
        is_me = player.id == my_player_id

        row_classes = ["player-row"]
        if is_active:
            row_classes.append("active")
        if is_me:
            row_classes.append("is-me")

        name_display = player.name
        if is_me:
            name_display += " (You)"

        indicator = "&#9876; " if is_active else ""
        captured = len(player.captured_cards)

        html.append(
            f'<div class="{" ".join(row_classes)}">'
            f'<span class="name">{indicator}{name_display}</span>'
            f'<span class="score">{scores.get(player.id, 0)}'
            f'<span class="captured"> ({captured} captured, {len(player.hand)} in hand)</span></span>'
            f"</div>"
        )

    html.append("</div>")
    st.markdown("".join(html), unsafe_allow_html=True)
