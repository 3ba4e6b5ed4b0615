"""
Spatial utilities for the Aquarium Simulator.

Integer canvas math: clamping, squared distances, circle overlap and
bounding-box proximity. The canvas is a bounded rectangle (no wrap-around);
positions that leave it are clamped or recycled by the caller.
"""

from __future__ import annotations


def clamp(value: int, low: int, high: int) -> int:
    """
    Clamp value into [low, high].

    Args:
        value: Value to clamp.
        low: Lower bound (inclusive).
        high: Upper bound (inclusive).

    Returns:
        Clamped value.
    """
    if value < low:
        return low
    if value > high:
        return high
    return value


def distance_sq(x1: int, y1: int, x2: int, y2: int) -> int:
    """
    Squared Euclidean distance between two points.

    Using squared distance avoids a sqrt and is exact for integers.
    """
    dx = x1 - x2
    dy = y1 - y2
    return dx * dx + dy * dy


def circles_collide(
    x1: int, y1: int, r1: int,
    x2: int, y2: int, r2: int,
) -> bool:
    """
    Check whether two circles overlap (touching counts).

    Args:
        x1, y1: Center of the first circle.
        r1: Radius of the first circle.
        x2, y2: Center of the second circle.
        r2: Radius of the second circle.

    Returns:
        True if (p1 - p2)·(p1 - p2) <= (r1 + r2)².
    """
    reach = r1 + r2
    return distance_sq(x1, y1, x2, y2) <= reach * reach


def boxes_near(
    x1: int, y1: int,
    x2: int, y2: int,
    half_width: int, half_height: int,
) -> bool:
    """
    Bounding-box proximity: |dx| < half_width and |dy| < half_height.
    """
    return abs(x1 - x2) < half_width and abs(y1 - y2) < half_height
