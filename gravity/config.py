#!/usr/bin/env python3
"""
Simulation configuration and presets.

A ``SimulationConfig`` bundles every tunable that the simulation reads, so a
``Simulation`` is always built from one explicit value instead of defaults
scattered over call sites. Two presets mirror the two ways the sandbox is
usually tuned:

- ``classic``: tight merges (1/4 of summed radii), two bodies per spawn and an
  exponential time-scale slider (10 ** value over [-5, 5]).
- ``lively``: loose merges (1/2 of summed radii), ten bodies per spawn and a
  linear time-scale slider over [0, 2].
"""
import math
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from .constants import (
    BOUNCE_DECREASE,
    BOUNDARY_MARGIN,
    EXPONENTIAL_SLIDER_RANGE,
    G,
    LINEAR_SLIDER_RANGE,
    MAX_SPEED,
    MERGE_THRESHOLD,
    MIN_DISTANCE,
    SPAWN_COUNT,
    SPAWN_MASS_EXPONENT,
    SPAWN_SPEED,
    TRAIL_CAPACITY,
    TRAIL_SAMPLE_RATE,
)

EXPONENTIAL = "exponential"
LINEAR = "linear"
SLIDER_MAPPINGS = (EXPONENTIAL, LINEAR)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Tunables for one simulation.

    Fields:
    - gravitational_constant: G in the force law
    - min_distance: separations below this are clamped when computing forces
    - merge_enabled: whether overlapping bodies merge at all
    - merge_threshold: bodies merge when closer than this fraction of their summed radii
    - max_speed: bodies faster than this are culled
    - boundary_margin: how far the bounce bounds extend beyond the screen
    - bounce_decrease: fraction of axis speed lost on each bounce
    - trail_capacity: number of trail points kept per body
    - trail_sample_rate: trail samples per second of simulated time
    - spawn_count: bodies added per spawn request
    - spawn_mass_exponent: (lo, hi) range of log10(mass) for spawned bodies
    - spawn_speed: maximum per-axis speed of spawned bodies
    - slider_mapping: "exponential" or "linear" time-scale slider
    - seed: random seed for spawning, None for OS entropy
    """
    gravitational_constant: float = G
    min_distance: float = MIN_DISTANCE
    merge_enabled: bool = True
    merge_threshold: float = MERGE_THRESHOLD
    max_speed: float = MAX_SPEED
    boundary_margin: float = BOUNDARY_MARGIN
    bounce_decrease: float = BOUNCE_DECREASE
    trail_capacity: int = TRAIL_CAPACITY
    trail_sample_rate: float = TRAIL_SAMPLE_RATE
    spawn_count: int = SPAWN_COUNT
    spawn_mass_exponent: Tuple[float, float] = field(default=SPAWN_MASS_EXPONENT)
    spawn_speed: float = SPAWN_SPEED
    slider_mapping: str = EXPONENTIAL
    seed: Optional[int] = None

    def validate(self) -> "SimulationConfig":
        """Raise ValueError for values the simulation cannot run with; return self."""
        if not (math.isfinite(self.gravitational_constant) and self.gravitational_constant > 0):
            raise ValueError(f"gravitational_constant must be positive, got {self.gravitational_constant}")
        if self.min_distance <= 0:
            raise ValueError(f"min_distance must be positive, got {self.min_distance}")
        if not 0 < self.merge_threshold <= 1:
            raise ValueError(f"merge_threshold must be in (0, 1], got {self.merge_threshold}")
        if self.max_speed <= 0:
            raise ValueError(f"max_speed must be positive, got {self.max_speed}")
        if self.boundary_margin < 0:
            raise ValueError(f"boundary_margin must be >= 0, got {self.boundary_margin}")
        if not 0 <= self.bounce_decrease <= 1:
            raise ValueError(f"bounce_decrease must be in [0, 1], got {self.bounce_decrease}")
        if self.trail_capacity < 1:
            raise ValueError(f"trail_capacity must be >= 1, got {self.trail_capacity}")
        if self.trail_sample_rate <= 0:
            raise ValueError(f"trail_sample_rate must be positive, got {self.trail_sample_rate}")
        if self.spawn_count < 0:
            raise ValueError(f"spawn_count must be >= 0, got {self.spawn_count}")
        lo, hi = self.spawn_mass_exponent
        if lo > hi:
            raise ValueError(f"spawn_mass_exponent must be (lo, hi) with lo <= hi, got {self.spawn_mass_exponent}")
        if self.spawn_speed < 0:
            raise ValueError(f"spawn_speed must be >= 0, got {self.spawn_speed}")
        if self.slider_mapping not in SLIDER_MAPPINGS:
            raise ValueError(f"slider_mapping must be one of {SLIDER_MAPPINGS}, got {self.slider_mapping!r}")
        return self

    def with_changes(self, **changes) -> "SimulationConfig":
        return replace(self, **changes).validate()


CLASSIC = SimulationConfig()
LIVELY = SimulationConfig(
    merge_threshold=0.5,
    spawn_count=10,
    slider_mapping=LINEAR,
    trail_capacity=40,
)

PRESETS: Dict[str, SimulationConfig] = {
    "classic": CLASSIC,
    "lively": LIVELY,
}


def preset(name: str) -> SimulationConfig:
    """Look up a preset by name (case-insensitive). Raises KeyError if unknown."""
    key = name.strip().lower()
    if key not in PRESETS:
        raise KeyError(f"unknown preset {name!r}; choose from {sorted(PRESETS)}")
    return PRESETS[key]


def slider_range(mapping: str) -> Tuple[float, float, float]:
    """Return (min, max, default) slider positions for a mapping."""
    if mapping == EXPONENTIAL:
        return EXPONENTIAL_SLIDER_RANGE
    if mapping == LINEAR:
        return LINEAR_SLIDER_RANGE
    raise ValueError(f"unknown slider mapping {mapping!r}")


def time_scale_from_slider(value: float, mapping: str) -> float:
    """Convert a slider position to a time scale (10 ** value, or value itself)."""
    if mapping == EXPONENTIAL:
        return 10.0 ** value
    if mapping == LINEAR:
        return max(0.0, float(value))
    raise ValueError(f"unknown slider mapping {mapping!r}")
