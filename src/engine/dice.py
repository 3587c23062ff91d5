"""
Dragonwood - Dice

The Dragonwood die is six-sided but not numbered 1-6: its faces are
1, 2, 2, 3, 3, 4. Every roll and every odds calculation reads the face
multiset from ``DICE_FACES``.
"""

import random
from typing import Sequence

# Named, swappable face multiset. Capture costs in src.engine.cards are
# tuned for this die.
DICE_FACES: tuple[int, ...] = (1, 2, 2, 3, 3, 4)


class Dice:
    """Rolls dice drawn uniformly from a face multiset."""

    def __init__(
        self,
        faces: Sequence[int] = DICE_FACES,
        rng: random.Random | None = None,
    ) -> None:
        if not faces:
            raise ValueError("A die needs at least one face.")
        self.faces = tuple(faces)
        self._rng = rng or random.Random()

    @property
    def min_face(self) -> int:
        return min(self.faces)

    @property
    def max_face(self) -> int:
        return max(self.faces)

    def roll_one(self) -> int:
        """Roll a single die."""
        return self._rng.choice(self.faces)

    def roll_many(self, count: int) -> list[int]:
        """Roll ``count`` independent dice. ``count <= 0`` rolls nothing."""
        return [self.roll_one() for _ in range(max(count, 0))]

    @staticmethod
    def total(results: Sequence[int]) -> int:
        return sum(results)


_default_dice = Dice()


def roll_one() -> int:
    """Roll one die with the default face set."""
    return _default_dice.roll_one()


def roll_many(count: int) -> list[int]:
    """Roll ``count`` dice with the default face set."""
    return _default_dice.roll_many(count)


def total(results: Sequence[int]) -> int:
    """Integer sum of a roll."""
    return sum(results)
