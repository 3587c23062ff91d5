"""UI components for Dragonwood."""

from src.ui.components.dice_tray import render_dice_tray
from src.ui.components.hand import render_hand
from src.ui.components.landscape import render_landscape
from src.ui.components.scoreboard import render_scoreboard

__all__ = [
    "render_dice_tray",
    "render_hand",
    "render_landscape",
    "render_scoreboard",
]
