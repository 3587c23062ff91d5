"""
Dragonwood - Theme Helpers

Woodland stylesheet injection and the end-of-game banner.
"""

from functools import lru_cache
from html import escape
from pathlib import Path

import streamlit as st

from src.engine.models import GameState

_THEME_FILE = Path(__file__).parent / "dragonwood.css"

# Banner icon per way the game can end.
_REASON_ICONS = {
    "Both Dragons have been defeated!": "&#128009;",
    "Adventure deck exhausted!": "&#127810;",
}


@lru_cache(maxsize=1)
def _stylesheet() -> str:
    return _THEME_FILE.read_text(encoding="utf-8")


def load_css() -> None:
    """Inject the woodland stylesheet."""
    st.markdown(f"<style>{_stylesheet()}</style>", unsafe_allow_html=True)


def render_game_over_banner(state: GameState, scores: dict[str, int]) -> None:
    """
    Render the game-over banner: winners, why the game ended, and standings.

    Args:
        state: Finished game state
        scores: Victory points per player id
    """
    winners = [escape(p.name) for p in state.players if p.id in state.winner_ids]
    if not winners:
        headline = "The Dragonwood keeps its secrets"
    elif len(winners) == 1:
        headline = f"{winners[0]} rules the Dragonwood!"
    else:
        headline = f"{' &amp; '.join(winners)} share the Dragonwood!"

    reason = state.game_over_reason or ""
    icon = _REASON_ICONS.get(reason, "&#127795;")

    rows = []
    ranked = sorted(state.players, key=lambda p: scores.get(p.id, 0), reverse=True)
    for player in ranked:
        css = "standing winner" if player.id in state.winner_ids else "standing"
        dragons = sum(
            1 for c in player.captured_cards if c.type == "creature" and c.is_dragon
        )
        slain = f" &middot; {dragons} dragon{'s' if dragons != 1 else ''}" if dragons else ""
        rows.append(
            f'<li class="{css}"><span>{escape(player.name)}</span>'
            f"<b>{scores.get(player.id, 0)} VP</b>{slain}</li>"
        )

    st.markdown(
        f'<div class="victory-overlay"><span class="crown">{icon}</span>'
        f"<h1>{headline}</h1>"
        f'<p class="reason">{escape(reason)}</p>'
        f'<ol class="standings">{"".join(rows)}</ol></div>',
        unsafe_allow_html=True,
    )
