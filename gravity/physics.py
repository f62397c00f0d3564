#!/usr/bin/env python3
"""
Core physics for the gravity sandbox.

Responsibilities
- Accumulate pairwise Newtonian gravity into per-body velocity changes.
- Advance positions with a semi-implicit Euler step (velocity first, then
  position using the updated velocity).
- Reflect bodies off the extended screen bounds, losing speed on each bounce.

Units and conventions
- Positions are logical screen pixels, velocities pixels per second.
- G defaults to 10. It is tuned so masses of 1e3..1e9 orbit visibly on screen
  and has no physical meaning.

Numerical notes
- Snapshot: all velocity changes for one tick are computed from the positions
  and masses as they were at the start of the tick, then applied. A body's
  result never depends on where it sits in the list.
- Degenerate pairs: a zero separation has no direction and contributes
  nothing. Separations below ``min_distance`` are clamped to it, which caps
  the acceleration and keeps NaN/Inf out of the state.
- Complexity: O(N^2) direct summation per tick.
"""

import math
from typing import List, Sequence, Tuple

from .constants import G, MIN_DISTANCE
from .data_models import Body
from .vector_utils import Vec2, vec_add, vec_scale


class GravityPhysics:
    """
    Direct-summation gravity with a minimum-distance clamp.

    The force between bodies i and j is
        F = G * m_i * m_j / max(|r|, d_min)^2 along r_hat
    and body i's acceleration is F / m_i.
    """

    def __init__(self, gravitational_constant: float = G, min_distance: float = MIN_DISTANCE):
        self.G = float(gravitational_constant)
        self.min_distance = max(0.0, float(min_distance))

    def gravitational_acceleration(self, body: Body, others: Sequence[Body],
                                   self_index: int, dt: float) -> Vec2:
        """
        Velocity change of ``body`` over ``dt`` due to every other body.

        ``others`` is the full body list and ``self_index`` is the position of
        ``body`` in it, which is skipped.

        Args:
            body: The body being accelerated.
            others: All bodies, including ``body`` itself.
            self_index: Index of ``body`` in ``others``.
            dt: Scaled time step (frame time * time scale).

        Returns:
            (dvx, dvy) to add to the body's velocity.
        """
        min_d_sq = self.min_distance * self.min_distance
        xi, yi = body.position
        m_self = body.mass
        dvx, dvy = 0.0, 0.0

        for j, other in enumerate(others):
            if j == self_index:
                continue

            dx = other.position[0] - xi
            dy = other.position[1] - yi
            distance_squared = dx * dx + dy * dy
            if distance_squared == 0.0:
                continue  # coincident: no direction to pull in

            distance = math.sqrt(distance_squared)
            force = self.G * m_self * other.mass / max(distance_squared, min_d_sq)
            acceleration = force / m_self

            dvx += dx / distance * acceleration * dt
            dvy += dy / distance * acceleration * dt

        return (dvx, dvy)

    def compute_velocity_changes(self, bodies: Sequence[Body], dt: float) -> List[Vec2]:
        """
        Velocity changes for all bodies from one consistent snapshot.

        Nothing is mutated here; apply the results with ``apply_velocity_changes``.
        """
        return [self.gravitational_acceleration(body, bodies, i, dt) for i, body in enumerate(bodies)]


def apply_velocity_changes(bodies: Sequence[Body], changes: Sequence[Vec2]) -> None:
    for body, dv in zip(bodies, changes):
        body.velocity = vec_add(body.velocity, dv)


def reflect_axis(p: float, v: float, low: float, high: float, decrease: float) -> Tuple[float, float]:
    """
    Clamp one coordinate into [low, high].

    When the coordinate was out of range its velocity component is reversed
    and scaled by (1 - decrease).
    """
    if p < low:
        return low, v * -(1.0 - decrease)
    if p > high:
        return high, v * -(1.0 - decrease)
    return p, v


def integrate(body: Body, dt: float, time_scale: float, dimension: Tuple[float, float],
              margin: float, decrease: float, add_sample: bool = False) -> None:
    """
    Move ``body`` by its velocity and bounce it off the extended bounds.

    The bounds are [-margin, dimension + margin] on each axis, handled
    independently, so a corner hit reflects both components. If ``add_sample``
    is set the (clamped) position is appended to the trail.
    """
    x, y = vec_add(body.position, vec_scale(body.velocity, dt * time_scale))
    vx, vy = body.velocity

    x, vx = reflect_axis(x, vx, -margin, dimension[0] + margin, decrease)
    y, vy = reflect_axis(y, vy, -margin, dimension[1] + margin, decrease)

    body.position = (x, y)
    body.velocity = (vx, vy)

    if add_sample:
        body.add_trail_point()
