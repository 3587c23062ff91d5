"""
Dragonwood - Application Settings

Loads configuration from environment variables using Pydantic Settings.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # Scripted opponent pacing (seconds)
    bot_think_delay: float = Field(default=1.5, ge=0)
    bot_discard_delay: float = Field(default=1.0, ge=0)

    # Table rules
    hand_size: int = Field(default=5, ge=0)
    landscape_size: int = Field(default=5, ge=1)
    max_capture_cards: int = Field(default=6, ge=1)
    deck_cycle_limit: int = Field(default=2, ge=1)
    include_events: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)
