#!/usr/bin/env python3
"""
Shared constants for the gravity sandbox.

Units are logical screen pixels and seconds. The values are tuned for a
pleasant on-screen result rather than physical correctness, so G is 10 and
masses span 1e3..1e9.

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""

# Physics
G = 10.0
MIN_DISTANCE = 1.0  # separations below this are clamped in the force law
MAX_SPEED = 50000.0  # runaway ceiling, units per second
BOUNDARY_MARGIN = 300.0  # bounds extend this far beyond the screen rectangle
BOUNCE_DECREASE = 0.5  # fraction of axis speed lost on a boundary bounce

# Merging
MERGE_THRESHOLD = 0.25  # fraction of summed radii below which bodies merge

# Spawning
SPAWN_COUNT = 2
SPAWN_MASS_EXPONENT = (3.0, 9.0)  # mass = 10 ** uniform(lo, hi)
SPAWN_SPEED = 5.0  # each velocity component is uniform(-1, 1) * SPAWN_SPEED

# Trails
TRAIL_CAPACITY = 50
TRAIL_SAMPLE_RATE = 1500.0  # samples per second of simulated time

# Time scale slider
EXPONENTIAL_SLIDER_RANGE = (-5.0, 5.0, 0.0)  # (min, max, default); scale = 10 ** value
LINEAR_SLIDER_RANGE = (0.0, 2.0, 1.0)

# Rendering (viewport)
VIEW_WIDTH = 1400
VIEW_HEIGHT = 950
BACKGROUND_COLOR = (0, 0, 0)
BORDER_FILL_COLOR = (20, 20, 30)
BORDER_OUTLINE_COLOR = (100, 100, 150)
BORDER_OUTLINE_THICKNESS = 20
OUTLINE_COLOR = (10, 10, 10)
GLOW_ALPHA = 50
GLOW_BASE_RADIUS = 100.0  # halo radius of a body with radius 10
HUD_COLOR = (200, 200, 200)

# Camera zoom bounds (screen pixels per world unit)
DEFAULT_ZOOM = 1.0
MIN_ZOOM = 0.05
MAX_ZOOM = 20.0

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
