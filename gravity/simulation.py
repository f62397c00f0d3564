#!/usr/bin/env python3
"""
The body set and its per-frame tick.

A ``Simulation`` owns the bodies and runs one tick at a time:

1. Advance the trail sampling gate by dt. Its threshold shrinks as the time
   scale grows, so trails are sampled at a steady rate of simulated time.
2. Compute every body's velocity change from one snapshot, apply them, then
   integrate positions and bounce off the extended bounds.
3. Merge overlapping bodies until none overlap.
4. Cull runaway bodies.

It also derives what the renderer needs to draw each body (``drawables``).
Nothing here touches a window or a GPU, so it can be driven from tests.
"""
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .collisions import CollisionSettings, MergeEvent, handle_collisions
from .colors import Color, ColorA, brightened, grayified, intensified, random_color, with_alpha
from .config import CLASSIC, SimulationConfig
from .constants import GLOW_ALPHA, GLOW_BASE_RADIUS, OUTLINE_COLOR, VIEW_HEIGHT, VIEW_WIDTH
from .data_models import Body
from .physics import GravityPhysics, apply_velocity_changes, integrate
from .vector_utils import Vec2

logger = logging.getLogger("gravity_sim")


@dataclass
class TickReport:
    """What happened during one ``Simulation.update`` call."""
    sampled_trail: bool = False
    merges: List[MergeEvent] = field(default_factory=list)
    culled: int = 0


@dataclass
class TrailSegment:
    point: Vec2
    color: Color
    thickness: float


@dataclass
class BodyDrawable:
    """
    Everything needed to draw one body.

    Fields:
    - center, radius: the body's circle
    - fill_color: the body colour grayed by half
    - outline_color, outline_thickness: dark rim, half the radius thick
    - glow_color, glow_radius: translucent halo around the body
    - trail: newest-first points, each with a colour and a thickness that
      fades with age
    """
    center: Vec2
    radius: float
    fill_color: Color
    outline_color: Color
    outline_thickness: float
    glow_color: ColorA
    glow_radius: float
    trail: List[TrailSegment]


def make_drawable(body: Body) -> BodyDrawable:
    radius = body.radius
    trail_color = brightened(intensified(body.color, -0.3), 0.2)
    trail = [
        TrailSegment(point, trail_color, thickness)
        for point, _, thickness in body.trail.faded_segments(radius / 2)
    ]
    return BodyDrawable(
        center=body.position,
        radius=radius,
        fill_color=grayified(body.color, 0.5),
        outline_color=OUTLINE_COLOR,
        outline_thickness=radius * 0.5,
        glow_color=with_alpha(intensified(body.color, 0.5), GLOW_ALPHA),
        glow_radius=GLOW_BASE_RADIUS * radius / 10,
        trail=trail,
    )


class Simulation:
    """
    The set of bodies plus the state that advances them.

    Attributes:
        config: SimulationConfig the simulation was built with.
        bodies: Bodies in insertion order.
        dimension: Logical screen (width, height) used for spawning and bounds.
        time_scale: Time scale of the most recent update.
        fade_sample_timer: Elapsed real time since the last trail sample.
    """

    def __init__(self, config: SimulationConfig = CLASSIC,
                 dimension: Tuple[float, float] = (VIEW_WIDTH, VIEW_HEIGHT)):
        self.config = config.validate()
        self.bodies: List[Body] = []
        self.dimension: Tuple[float, float] = (0.0, 0.0)
        self.set_dimension(*dimension)
        self.time_scale = 1.0
        self.fade_sample_timer = 0.0
        self.rng = random.Random(config.seed)
        self.physics = GravityPhysics(config.gravitational_constant, config.min_distance)
        self.collisions = CollisionSettings(
            enable=config.merge_enabled,
            merge_threshold=config.merge_threshold,
            max_speed=config.max_speed,
        )

    def __len__(self) -> int:
        return len(self.bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(self.bodies)

    def set_dimension(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"screen dimension must be positive, got {(width, height)}")
        self.dimension = (float(width), float(height))

    def set_merge_threshold(self, threshold: float) -> None:
        self.config = self.config.with_changes(merge_threshold=threshold)
        self.collisions.merge_threshold = self.config.merge_threshold
        logger.info("Merge threshold set to %.2f", threshold)

    def set_merging(self, enabled: bool) -> None:
        self.config = self.config.with_changes(merge_enabled=bool(enabled))
        self.collisions.enable = self.config.merge_enabled
        logger.info("Merging %s", "enabled" if enabled else "disabled")

    def add_body(self, body: Body) -> Body:
        self.bodies.append(body)
        return body

    def random_body(self, dimension: Optional[Tuple[float, float]] = None) -> Body:
        """A body with random mass, position within ``dimension`` and small velocity."""
        w, h = dimension or self.dimension
        lo, hi = self.config.spawn_mass_exponent
        speed = self.config.spawn_speed
        rng = self.rng
        return Body(
            mass=10.0 ** rng.uniform(lo, hi),
            velocity=(rng.uniform(-1.0, 1.0) * speed, rng.uniform(-1.0, 1.0) * speed),
            position=(rng.uniform(0.0, w), rng.uniform(0.0, h)),
            color=random_color(rng),
            trail_capacity=self.config.trail_capacity,
        )

    def spawn(self, count: Optional[int] = None, dimension: Optional[Tuple[float, float]] = None) -> List[Body]:
        """Append ``count`` random bodies (default ``config.spawn_count``) and return them."""
        if count is None:
            count = self.config.spawn_count
        if count < 0:
            raise ValueError(f"spawn count must be >= 0, got {count}")
        new_bodies = [self.random_body(dimension) for _ in range(count)]
        self.bodies.extend(new_bodies)
        if new_bodies:
            logger.info("Spawned %d bodies (%d total)", count, len(self.bodies))
        return new_bodies

    def clear(self) -> None:
        self.bodies.clear()
        self.fade_sample_timer = 0.0

    def total_mass(self) -> float:
        return math.fsum(b.mass for b in self.bodies)

    def _advance_sample_gate(self, dt: float, time_scale: float) -> bool:
        self.fade_sample_timer += dt
        if time_scale <= 0:
            return False
        threshold = (1.0 / time_scale) * (1.0 / self.config.trail_sample_rate)
        if self.fade_sample_timer > threshold:
            self.fade_sample_timer = 0.0
            return True
        return False

    def update(self, dt: float, time_scale: float = 1.0) -> TickReport:
        """
        Advance the simulation by ``dt`` seconds of real time scaled by ``time_scale``.

        Returns a TickReport describing trail sampling, merges and culls.
        """
        if dt < 0 or time_scale < 0:
            raise ValueError(f"dt and time_scale must be >= 0, got dt={dt}, time_scale={time_scale}")
        self.time_scale = time_scale
        cfg = self.config
        report = TickReport()

        report.sampled_trail = self._advance_sample_gate(dt, time_scale)

        changes = self.physics.compute_velocity_changes(self.bodies, dt * time_scale)
        apply_velocity_changes(self.bodies, changes)
        for body in self.bodies:
            integrate(body, dt, time_scale, self.dimension,
                      cfg.boundary_margin, cfg.bounce_decrease, report.sampled_trail)

        report.merges, report.culled = handle_collisions(self.bodies, self.collisions)
        if report.culled:
            logger.info("Removed %d runaway bodies", report.culled)
        return report

    def drawables(self) -> Iterator[BodyDrawable]:
        """Drawable geometry for every body, in collection order."""
        for body in self.bodies:
            yield make_drawable(body)
