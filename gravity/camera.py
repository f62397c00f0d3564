#!/usr/bin/env python3
"""
Camera utilities for 2D world-to-screen transforms.
"""
from typing import Optional, Tuple

from .constants import (
    DEFAULT_ZOOM,
    MIN_ZOOM,
    MAX_ZOOM,
    VIEW_WIDTH,
    VIEW_HEIGHT,
)
from .vector_utils import clamp


class Camera2D:
    """
    Simple 2D camera that maps world coordinates (logical pixels) to screen pixels.

    ``zoom_level`` is screen pixels per world unit; 1.0 shows the world 1:1.
    """

    def __init__(self, center=(VIEW_WIDTH / 2, VIEW_HEIGHT / 2), zoom_level=DEFAULT_ZOOM):
        self.center = [center[0], center[1]]
        self.zoom_level = zoom_level
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def world_to_screen(self, pos: Tuple[float, float]) -> Tuple[int, int]:
        cx, cy = self.center
        z = self.zoom_level
        px = (pos[0] - cx) * z + self.viewport_size[0] / 2
        py = (pos[1] - cy) * z + self.viewport_size[1] / 2
        return (int(px), int(py))

    def screen_to_world(self, screen: Tuple[int, int]) -> Tuple[float, float]:
        cx, cy = self.center
        z = self.zoom_level
        wx = (screen[0] - self.viewport_size[0] / 2) / z + cx
        wy = (screen[1] - self.viewport_size[1] / 2) / z + cy
        return (wx, wy)

    def world_length(self, length: float) -> float:
        """Convert a world-space length to screen pixels."""
        return length * self.zoom_level

    def zoom(self, factor, pivot_screen: Optional[Tuple[int, int]] = None):
        """Zoom by ``factor``; the world point under ``pivot_screen`` stays put."""
        factor = clamp(factor, 0.05, 20.0)
        before = None
        if pivot_screen is not None:
            before = self.screen_to_world(pivot_screen)
        self.zoom_level = clamp(self.zoom_level * factor, MIN_ZOOM, MAX_ZOOM)
        if pivot_screen is not None and before is not None:
            after = self.screen_to_world(pivot_screen)
            self.center[0] += (before[0] - after[0])
            self.center[1] += (before[1] - after[1])

    def pan_pixels(self, dx_pixels, dy_pixels):
        self.center[0] -= dx_pixels / self.zoom_level
        self.center[1] -= dy_pixels / self.zoom_level

    def fit(self, dimension: Tuple[float, float], margin: float = 0.0):
        """Center on the screen rectangle grown by ``margin`` and zoom so it fits."""
        w, h = dimension
        self.center = [w / 2, h / 2]
        span_w = w + 2 * margin
        span_h = h + 2 * margin
        z = min(self.viewport_size[0] / max(span_w, 1.0), self.viewport_size[1] / max(span_h, 1.0))
        self.zoom_level = clamp(z, MIN_ZOOM, MAX_ZOOM)
