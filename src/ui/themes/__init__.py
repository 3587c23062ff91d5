"""Woodland theme for Dragonwood."""

from src.ui.themes.animations import load_css, render_game_over_banner

__all__ = ["load_css", "render_game_over_banner"]
