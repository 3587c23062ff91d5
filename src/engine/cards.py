"""
Dragonwood - Card Definitions

Static tables for the landscape (Dragonwood) deck and the enhancement
effects the engine understands. Costs are tuned for the 1-2-2-3-3-4 die,
which averages 2.5 per roll.

Enhancements:
    - Silver Sword / Magical Boots / Cloak of Darkness: +2 to every
      Strike / Stomp / Scream (passive)
    - Honey Pot: re-roll any 1s once (passive)
    - Lightning Bolt: +4 to one roll, then discarded (consumable)
    - Friendly Bunny: +1 die on one roll, then discarded (consumable)
"""

from dataclasses import dataclass

from src.engine.base import ComboType


@dataclass(frozen=True)
class CreatureDef:
    """Definition row for a creature; ``quantity`` copies are built."""
    name: str
    victory_points: int
    strike: int
    stomp: int
    scream: int
    quantity: int = 1
    is_dragon: bool = False
    image: str | None = None


@dataclass(frozen=True)
class EnhancementDef:
    """Definition row for an enhancement."""
    name: str
    effect_description: str
    strike: int
    stomp: int
    scream: int
    victory_points: int = 0
    quantity: int = 1
    image: str | None = None


@dataclass(frozen=True)
class EventDef:
    """Definition row for an event."""
    name: str
    description: str
    quantity: int = 1


# Card names the engine keys behaviour on
ORANGE_DRAGON = "Orange Dragon"
BLUE_DRAGON = "Blue Dragon"
SILVER_SWORD = "Silver Sword"
MAGICAL_BOOTS = "Magical Boots"
CLOAK_OF_DARKNESS = "Cloak of Darkness"
HONEY_POT = "Honey Pot"
LIGHTNING_BOLT = "Lightning Bolt"
FRIENDLY_BUNNY = "Friendly Bunny"
SUNNY_DAY = "Sunny Day"
THUNDER_STORM = "Thunder Storm"
QUICKSAND = "Quicksand"
WIND_STORM = "Wind Storm"

DRAGON_NAMES = frozenset({ORANGE_DRAGON, BLUE_DRAGON})


CREATURES: tuple[CreatureDef, ...] = (
    CreatureDef("Fire Ants", 1, strike=4, stomp=5, scream=3, quantity=2, image="fire_ants"),
    CreatureDef("Spooky Spiders", 1, strike=3, stomp=5, scream=4, quantity=2, image="spooky_spiders"),
    CreatureDef("Crazy Bats", 2, strike=5, stomp=5, scream=6, quantity=2, image="crazy_bats"),
    CreatureDef("Gooey Glob", 2, strike=6, stomp=4, scream=5, quantity=2, image="gooey_glob"),
    CreatureDef("Goblin Raiders", 2, strike=5, stomp=6, scream=5, quantity=2, image="goblin_raiders"),
    CreatureDef("Hungry Bear", 3, strike=7, stomp=6, scream=7, quantity=2, image="hungry_bear"),
    CreatureDef("Wild Boar", 3, strike=6, stomp=7, scream=7, quantity=1, image="wild_boar"),
    CreatureDef("Grumpy Troll", 3, strike=7, stomp=7, scream=6, quantity=2, image="grumpy_troll"),
    CreatureDef("Angry Ogre", 4, strike=9, stomp=8, scream=8, quantity=2, image="angry_ogre"),
    CreatureDef("Gigantic Giant", 5, strike=10, stomp=11, scream=9, quantity=1, image="gigantic_giant"),
    CreatureDef(ORANGE_DRAGON, 6, strike=12, stomp=14, scream=13, is_dragon=True, image="orange_dragon"),
    CreatureDef(BLUE_DRAGON, 7, strike=13, stomp=12, scream=14, is_dragon=True, image="blue_dragon"),
)

ENHANCEMENTS: tuple[EnhancementDef, ...] = (
    EnhancementDef(SILVER_SWORD, "Add +2 to all Strikes", strike=6, stomp=7, scream=7, image="silver_sword"),
    EnhancementDef(MAGICAL_BOOTS, "Add +2 to all Stomps", strike=7, stomp=6, scream=7, image="magical_boots"),
    EnhancementDef(CLOAK_OF_DARKNESS, "Add +2 to all Screams", strike=7, stomp=7, scream=6, image="cloak_of_darkness"),
    EnhancementDef(HONEY_POT, "Re-roll any 1s once", strike=5, stomp=6, scream=5, image="honey_pot"),
    EnhancementDef(LIGHTNING_BOLT, "Use once to add 4 to a roll", strike=7, stomp=5, scream=7, quantity=2, image="lightning_bolt"),
    EnhancementDef(FRIENDLY_BUNNY, "Use once to roll 1 extra die", strike=5, stomp=7, scream=6, quantity=2, image="friendly_bunny"),
)

EVENTS: tuple[EventDef, ...] = (
    EventDef(SUNNY_DAY, "All players draw 2 cards."),
    EventDef(THUNDER_STORM, "All players must discard 1 card."),
    EventDef(QUICKSAND, "Remove all enhancements from the landscape."),
    EventDef(WIND_STORM, "All players pass 1 card to the next player."),
)


# Passive bonuses: enhancement name -> (combo it boosts, bonus)
PASSIVE_BONUSES: dict[str, tuple[ComboType, int]] = {
    SILVER_SWORD: (ComboType.STRIKE, 2),
    MAGICAL_BOOTS: (ComboType.STOMP, 2),
    CLOAK_OF_DARKNESS: (ComboType.SCREAM, 2),
}

# Consumables: enhancement name -> (flat bonus, extra dice)
CONSUMABLES: dict[str, tuple[int, int]] = {
    LIGHTNING_BOLT: (4, 0),
    FRIENDLY_BUNNY: (0, 1),
}

REROLL_MIN_FACE = HONEY_POT
