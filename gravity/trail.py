#!/usr/bin/env python3
"""
Fixed-capacity rolling history of past positions.

A ``TrailBuffer`` keeps at most ``capacity`` points in a bounded deque; once
full, each append drops the oldest point. Rendering walks it newest-to-oldest
and fades the line with age.
"""
from collections import deque
from typing import Deque, Iterator, Tuple

from .vector_utils import Vec2


class TrailBuffer:
    """Bounded history of 2D points."""

    def __init__(self, capacity: int):
        capacity = int(capacity)
        if capacity < 1:
            raise ValueError(f"trail capacity must be >= 1, got {capacity}")
        self._points: Deque[Vec2] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._points.maxlen

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Vec2]:
        return self.iterate_newest_to_oldest()

    def append(self, point: Vec2) -> None:
        self._points.append((float(point[0]), float(point[1])))

    def iterate_newest_to_oldest(self) -> Iterator[Vec2]:
        """Yield points from the most recently added to the oldest."""
        return iter(reversed(self._points))

    def faded_segments(self, base_thickness: float) -> Iterator[Tuple[Vec2, float, float]]:
        """
        Yield (point, progress, thickness) newest-first.

        progress = 1 - i / used_size, so the newest point has progress 1 and
        the oldest approaches 0. Thickness scales linearly with progress.
        """
        used = len(self._points)
        for i, point in enumerate(self.iterate_newest_to_oldest()):
            progress = 1.0 - i / used
            yield point, progress, base_thickness * progress
