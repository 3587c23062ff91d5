"""Small helpers shared by the engine and the board view."""

from src.utils.names import generate_random_name

__all__ = ["generate_random_name"]
