"""
Dragonwood - Capture Odds

Exact probability that a handful of Dragonwood dice reaches a target.
The distribution of sums is built by convolving the face multiset one
die at a time; results are memoized for repeated UI queries.
"""

from functools import lru_cache

from src.engine.dice import DICE_FACES


def success_chance(
    dice_count: int,
    target: int,
    faces: tuple[int, ...] = DICE_FACES,
) -> float:
    """
    Percentage chance (0-100) that ``dice_count`` dice sum to at least ``target``.

    Args:
        dice_count: Number of dice rolled
        target: Total needed (after bonuses have been subtracted)
        faces: Face multiset, defaults to the Dragonwood die

    Returns:
        Probability as a percentage
    """
    if dice_count <= 0:
        return 0.0
    # Minimum face is 1, so one pip per die is guaranteed.
    if target <= dice_count:
        return 100.0
    if target > dice_count * max(faces):
        return 0.0
    return _cached_chance(dice_count, target, tuple(faces))


@lru_cache(maxsize=None)
def _cached_chance(dice_count: int, target: int, faces: tuple[int, ...]) -> float:
    ways = sum_distribution(dice_count, faces)
    winning = sum(count for total, count in ways.items() if total >= target)
    return winning / len(faces) ** dice_count * 100


def sum_distribution(dice_count: int, faces: tuple[int, ...] = DICE_FACES) -> dict[int, int]:
    """
    Number of face-slot combinations producing each attainable sum.

    A repeated face counts once per slot, so the counts add up to
    ``len(faces) ** dice_count``.
    """
    ways: dict[int, int] = {0: 1}
    for _ in range(dice_count):
        next_ways: dict[int, int] = {}
        for subtotal, count in ways.items():
            for face in faces:
                next_ways[subtotal + face] = next_ways.get(subtotal + face, 0) + count
        ways = next_ways
    return ways
