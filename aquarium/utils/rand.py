"""
Bounded random helpers for the Aquarium Simulator.

Every initializer and behavior rule draws from one seeded
`numpy.random.Generator` owned by the world, through these helpers, so a
given seed always replays the same tank.
"""

from __future__ import annotations

import numpy as np


def rand_range(rng: np.random.Generator, low: int, high: int) -> int:
    """
    Draw a uniform integer in [low, high] (both ends inclusive).

    Args:
        rng: Seeded random generator.
        low: Smallest value that can be returned.
        high: Largest value that can be returned. If high < low the two
              bounds are swapped.

    Returns:
        Python int in the closed range.

    Examples:
        >>> rand_range(np.random.default_rng(0), 3, 3)
        3
    """
    if high < low:
        low, high = high, low
    return int(rng.integers(low, high + 1))


def chance(rng: np.random.Generator, percent: int) -> bool:
    """
    Return True with probability percent / 100.

    Percent values <= 0 never fire, values >= 100 always fire.
    """
    if percent <= 0:
        return False
    if percent >= 100:
        return True
    return rand_range(rng, 0, 99) < percent


def rand_direction(rng: np.random.Generator) -> int:
    """Return -1 or +1 with equal probability."""
    return 1 if rand_range(rng, 0, 1) == 1 else -1
