"""Integer helpers shared by the rational arithmetic."""
from __future__ import annotations

import math


def absolute(value: int) -> int:
    """Return the absolute value of *value*."""
    if value < 0:
        return -value
    return value


def gcd(x: int, y: int) -> int:
    """Greatest common divisor, always non-negative; ``gcd(0, n) == |n|``."""
    return math.gcd(absolute(x), absolute(y))


def lcm(x: int, y: int) -> int:
    """Least common multiple, ``0`` when either argument is ``0``."""
    if x == 0 or y == 0:
        return 0
    if absolute(x) == absolute(y):
        return absolute(x)
    return absolute(x * y) // gcd(x, y)


def integer_nth_root(radicand: int, degree: int) -> int:
    """Return ``floor(radicand ** (1 / degree))`` using Newton's iteration.

    The iteration is seeded at 1. The first update lands at or above the
    root, after which every update decreases until the floor root is
    reached, so the loop stops at the first update that does not decrease.
    """
    if degree < 1:
        raise ValueError(f"degree must be >= 1, got {degree}")
    if radicand < 0:
        raise ValueError("radicand must be non-negative")
    if radicand == 0:
        return 0

    def step(current: int) -> int:
        return ((degree - 1) * current + radicand // current ** (degree - 1)) // degree

    current = step(1)
    while True:
        candidate = step(current)
        if candidate >= current:
            return current
        current = candidate


__all__ = ["absolute", "gcd", "lcm", "integer_nth_root"]
