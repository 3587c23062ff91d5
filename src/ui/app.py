"""Dragonwood — Streamlit Application Entrypoint."""

from __future__ import annotations

import streamlit as st

from src.config import configure_logging


_RULES = """\
**Goal:** Capture creatures for victory points. The game ends when both
dragons are captured or the adventurer deck runs out for the second time.

**On your turn, either:**
- **Draw** one adventurer card (a Lucky Ladybug draws two more), or
- **Capture** a landscape card with a combination from your hand.

**Combinations (one die per card, max 6):**
| Attack | Cards |
|---|---|
| Strike | Consecutive values |
| Stomp | One suit |
| Scream | One value |
| Dragon Spell | 3-card straight flush vs a dragon: 2 dice, need 6 |

Dice show 1, 2, 2, 3, 3, 4. Reach the card's number to capture it.
Fail and you discard a card (two after a failed Dragon Spell).

Enhancements add bonuses to later attacks, but never help capture
another enhancement.
"""


def _render_sidebar_rules() -> None:
    """Show the rules in the sidebar."""
    with st.sidebar:
        st.divider()
        st.markdown("### Dragonwood Rules")
        st.markdown(_RULES)


def main() -> None:
    """Application entrypoint. Must call ``st.set_page_config`` first."""
    st.set_page_config(
        page_title="Dragonwood",
        page_icon="🐉",
        layout="wide",
        initial_sidebar_state="collapsed",
    )
    configure_logging()

    from src.ui.themes import load_css
    load_css()

    if "page" not in st.session_state:
        st.session_state["page"] = "home"

    # Page routing (lazy imports to avoid circular deps)
    page = st.session_state["page"]

    if page == "home":
        from src.ui.views.home import render_home_page
        render_home_page()
    elif page == "game":
        from src.ui.views.game import render_game_page
        render_game_page()
    else:
        st.session_state["page"] = "home"
        st.rerun()

    if page == "game":
        _render_sidebar_rules()


if __name__ == "__main__":
    main()
