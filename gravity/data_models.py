#!/usr/bin/env python3
"""
Data models for the gravity sandbox.

This module defines the Body dataclass shared between physics, collisions and
rendering.

Units and usage
- position and velocity are in logical screen pixels and pixels per second.
- mass is unitless; radius is derived from it as log(mass) and is refreshed by
  ``apply_radius`` at every place mass changes (construction and ``absorb``).
- trail stores sampled past positions; it is only appended to when the
  simulation's sampling gate fires.
"""
import math
from dataclasses import dataclass, field

from .colors import Color
from .constants import TRAIL_CAPACITY
from .trail import TrailBuffer
from .vector_utils import Vec2, vec_is_finite, vec_len


@dataclass(eq=False)
class Body:
    """
    A point mass in the simulation.

    Fields:
    - mass: positive mass; only grows after creation (through merges)
    - velocity: 2D velocity (vx, vy)
    - position: 2D position (x, y)
    - color: RGB tuple assigned once and reused for all derived tints
    - trail_capacity: number of points the trail keeps
    - radius: log(mass), derived, never set directly
    - trail: TrailBuffer of sampled positions
    """
    mass: float
    velocity: Vec2
    position: Vec2
    color: Color = (200, 200, 255)
    trail_capacity: int = TRAIL_CAPACITY
    radius: float = field(init=False, default=0.0)
    trail: TrailBuffer = field(init=False, repr=False)

    def __post_init__(self) -> None:
        mass = float(self.mass)
        if not (math.isfinite(mass) and mass > 0):
            raise ValueError(f"Body mass must be positive and finite, got {self.mass}")
        self.mass = mass
        self.velocity = (float(self.velocity[0]), float(self.velocity[1]))
        self.position = (float(self.position[0]), float(self.position[1]))
        self.trail = TrailBuffer(self.trail_capacity)
        self.apply_radius()

    def apply_radius(self) -> None:
        """Recompute the derived radius from the current mass."""
        self.radius = math.log(self.mass)

    def absorb(self, other: "Body") -> None:
        """Take over ``other``'s mass. Position, velocity and trail are kept."""
        self.mass += other.mass
        self.apply_radius()

    @property
    def speed(self) -> float:
        return vec_len(self.velocity)

    def is_finite(self) -> bool:
        return vec_is_finite(self.position) and vec_is_finite(self.velocity)

    def add_trail_point(self) -> None:
        """Append the current position to the trail."""
        self.trail.append(self.position)
