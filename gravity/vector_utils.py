#!/usr/bin/env python3
"""
Vector helper functions for 2D operations.

Vectors are plain ``(x, y)`` tuples. These are small, fast functions for the
vector math used throughout the simulation.
"""
import math
from typing import Tuple

Vec2 = Tuple[float, float]


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def vec_scale(a: Vec2, s: float) -> Vec2:
    return (a[0] * s, a[1] * s)


def vec_len(a: Vec2) -> float:
    return math.hypot(a[0], a[1])


def vec_dist(a: Vec2, b: Vec2) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def vec_is_finite(a: Vec2) -> bool:
    return math.isfinite(a[0]) and math.isfinite(a[1])
