"""Dice tray component — the most recent capture roll."""

from __future__ import annotations

import streamlit as st

from src.engine.models import DiceRollConfig


def render_dice_tray(config: DiceRollConfig) -> None:
    """Render the last roll with its bonus, total and outcome.

    Args:
        config: Display snapshot of the most recent roll.
    """
    if not config.results:
        st.markdown(
            '<div class="dice-tray">'
            '<span class="muted">No dice rolled yet.</span>'
            "</div>",
            unsafe_allow_html=True,
        )
        return

    html_parts = ['<div class="dice-tray">']
    for value in config.results:
        html_parts.append(f'<div class="die">{value}</div>')
    html_parts.append("</div>")
    st.markdown("".join(html_parts), unsafe_allow_html=True)

    who = config.player.name if config.player else "Someone"
    combo = config.combo.value if config.combo else "attack"
    line = f"{who} used {combo} on {config.target_card_name}: {sum(config.results)}"
    if config.bonus:
        line += f" + {config.bonus} bonus"
    line += f" = {config.total} (needed {config.required})"

    if config.success:
        st.success(line)
    else:
        st.error(line)
