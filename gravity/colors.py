#!/usr/bin/env python3
"""
Colour helpers for deriving body, glow and trail tints.

Colours are RGB tuples in 0..255; ``with_alpha`` appends an alpha channel for
translucent drawing. Every helper clamps its result back into 0..255.
"""
import random
from typing import Optional, Tuple

from .vector_utils import clamp

Color = Tuple[int, int, int]
ColorA = Tuple[int, int, int, int]


def _channel(v: float) -> int:
    return int(round(clamp(v, 0.0, 255.0)))


def _gray_level(c: Color) -> float:
    return (c[0] + c[1] + c[2]) / 3.0


def random_color(rng: Optional[random.Random] = None) -> Color:
    rng = rng or random
    return (rng.randint(0, 255), rng.randint(0, 255), rng.randint(0, 255))


def grayified(c: Color, amount: float) -> Color:
    """Blend towards the colour's own gray level; 1.0 gives pure gray."""
    g = _gray_level(c)
    return tuple(_channel(ch + (g - ch) * amount) for ch in c)


def intensified(c: Color, amount: float) -> Color:
    """Push channels away from gray by ``amount`` (negative values wash the colour out)."""
    g = _gray_level(c)
    return tuple(_channel(ch + (ch - g) * amount) for ch in c)


def brightened(c: Color, amount: float) -> Color:
    """Blend towards white for positive amounts, towards black for negative ones."""
    if amount >= 0:
        return tuple(_channel(ch + (255 - ch) * amount) for ch in c)
    return tuple(_channel(ch * (1.0 + amount)) for ch in c)


def with_alpha(c: Color, alpha: int) -> ColorA:
    return (c[0], c[1], c[2], _channel(alpha))
