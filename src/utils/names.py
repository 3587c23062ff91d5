"""
Dragonwood - Default Player Names

Fantasy "Adjective Noun" names for seats the player has not named.
"""

import random

FANTASY_ADJECTIVES = (
    "Brave", "Mighty", "Wise", "Swift", "Silent",
    "Ancient", "Shadowy", "Radiant", "Fierce", "Noble",
    "Crimson", "Azure", "Savage", "Grand", "Mystic",
    "Wandering", "Eternal", "Iron", "Golden", "Stormy",
)

FANTASY_NOUNS = (
    "Knight", "Wizard", "Rogue", "Hunter", "Seeker",
    "Wanderer", "Guardian", "Shadow", "Spirit", "Wolf",
    "Bear", "Falcon", "Warrior", "Sage", "Druid",
    "Paladin", "Sorcerer", "Ranger", "Titan", "Blade",
)

BOT_PREFIX = "Bot: "


def generate_random_name(is_bot: bool = False, rng: random.Random | None = None) -> str:
    """Random fantasy name; bot names carry a ``"Bot: "`` prefix."""
    rand = rng or random
    name = f"{rand.choice(FANTASY_ADJECTIVES)} {rand.choice(FANTASY_NOUNS)}"
    return f"{BOT_PREFIX}{name}" if is_bot else name
