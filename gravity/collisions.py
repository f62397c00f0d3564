#!/usr/bin/env python3
"""
Collision handling for the gravity sandbox.

Two passes run after every integration step:
- Merge: when two bodies are closer than a fraction of their summed radii,
  the heavier one absorbs the lighter one's mass and the lighter one is
  removed.
- Runaway cull: bodies moving faster than a ceiling (or whose state is no
  longer finite) are removed.

Both passes remove at most one body per scan and then rescan from the start,
repeating until a full scan changes nothing. Each removal shrinks the list, so
the loops finish after at most len(bodies) scans.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .constants import MAX_SPEED, MERGE_THRESHOLD
from .data_models import Body
from .vector_utils import vec_dist

logger = logging.getLogger("gravity_sim")


class CollisionSettings:
    """Container for collision-related settings."""
    def __init__(self, enable: bool = True, merge_threshold: float = MERGE_THRESHOLD, max_speed: float = MAX_SPEED):
        self.enable = enable
        self.merge_threshold = max(0.0, float(merge_threshold))
        self.max_speed = float(max_speed)


@dataclass
class MergeEvent:
    """One resolved merge: the surviving body and how much mass it took in."""
    survivor: Body
    absorbed_mass: float


def find_merge_pair(bodies: List[Body], merge_threshold: float) -> Optional[Tuple[int, int]]:
    """
    Return (survivor_index, absorbed_index) for the first pair that should merge.

    Pairs are scanned as i < j. The heavier body survives; on an exact mass
    tie the lower index survives.
    """
    n = len(bodies)
    for i in range(n):
        bi = bodies[i]
        for j in range(i + 1, n):
            bj = bodies[j]
            distance = vec_dist(bi.position, bj.position)
            if distance < (bi.radius + bj.radius) * merge_threshold:
                if bj.mass > bi.mass:
                    return j, i
                return i, j
    return None


def resolve_merges(bodies: List[Body], merge_threshold: float) -> List[MergeEvent]:
    """
    Merge overlapping bodies in place until no pair overlaps.

    Returns the merges in the order they were resolved.
    """
    events: List[MergeEvent] = []
    while True:
        pair = find_merge_pair(bodies, merge_threshold)
        if pair is None:
            return events
        keep, drop = pair
        survivor, absorbed = bodies[keep], bodies[drop]
        survivor.absorb(absorbed)
        del bodies[drop]
        events.append(MergeEvent(survivor, absorbed.mass))
        logger.debug("Merged body of mass %.3e into %.3e (%d left)", absorbed.mass, survivor.mass, len(bodies))


def find_runaway(bodies: List[Body], max_speed: float) -> Optional[int]:
    for i, body in enumerate(bodies):
        if not body.is_finite() or body.speed > max_speed:
            return i
    return None


def cull_runaways(bodies: List[Body], max_speed: float) -> int:
    """Remove bodies faster than ``max_speed`` or with non-finite state. Returns how many went."""
    removed = 0
    while True:
        idx = find_runaway(bodies, max_speed)
        if idx is None:
            return removed
        body = bodies.pop(idx)
        removed += 1
        logger.debug("Culled runaway body of mass %.3e (speed %.1f)", body.mass, body.speed)


def handle_collisions(bodies: List[Body], settings: CollisionSettings) -> Tuple[List[MergeEvent], int]:
    """
    Run the merge pass, then the runaway cull.

    Returns (merge events, number of culled bodies).
    """
    merges: List[MergeEvent] = []
    if settings.enable and len(bodies) >= 2:
        merges = resolve_merges(bodies, settings.merge_threshold)
    culled = cull_runaways(bodies, settings.max_speed)
    return merges, culled
