#!/usr/bin/env python3
"""
Gravity Sandbox application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame viewport thread (frame driver and drawing) and the
  Dear PyGui control panel (running on the main thread).
- Maintains a shared SimulationController that owns the Simulation and the user-facing
  settings; all access is guarded by a re-entrant lock.
- The viewport measures real frame time and steps the simulation once per frame, scaled
  by the time scale chosen on the panel's speed slider. Holding Space spawns bodies.

Threading model
- PygameRenderer runs in a background thread and is the only place physics is stepped.
  It locks the SimulationController around each tick and while copying drawables.
- The UI class runs in the main thread via Dear PyGui. Its callbacks only change scalars
  (time scale, merge threshold, merging, paused flag) or request spawns, clears and view
  fits, under the lock. The renderer thread serves fit requests so the camera is only
  touched there.

Units and conventions
- World units are logical screen pixels. The bounce bounds are the window rectangle
  grown by the boundary margin on every side.
- Colors are RGB tuples in 0..255.

Running
1) Install: `pip install -e .`
2) Run: `gravity-sim` or `python gravity_sim.py --preset lively --seed 42`

Keys (viewport)
- Space (hold): spawn bodies | P: pause/play | C: clear | F: fit view
- Drag: pan | Wheel: zoom
"""

import argparse
import logging
import sys
import time
import threading
from typing import List, Optional, Tuple

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from gravity.camera import Camera2D
from gravity.config import PRESETS, SimulationConfig, preset, slider_range, time_scale_from_slider
from gravity.constants import (
    BACKGROUND_COLOR,
    BORDER_FILL_COLOR,
    BORDER_OUTLINE_COLOR,
    BORDER_OUTLINE_THICKNESS,
    HUD_COLOR,
    SAFE_COORD_LIMIT,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from gravity.simulation import BodyDrawable, Simulation, TickReport

logger = logging.getLogger("gravity_sim")

# Longest real frame time fed into one tick.
MAX_FRAME_TIME = 0.25

# ============================================================
# Simulation Controller (Shared State)
# ============================================================

class SimulationController:
    """
    Shared state between UI thread (DearPyGui) and rendering thread (Pygame).
    Includes thread-safe operations guarded by a lock.
    """
    def __init__(self, config: SimulationConfig, dimension: Tuple[int, int] = (VIEW_WIDTH, VIEW_HEIGHT)):
        self.lock = threading.RLock()
        self.simulation = Simulation(config, dimension)
        self.running = True  # app running
        self.playing = True  # simulation running
        self.show_trails = True
        self.fit_requested = False  # set by the UI thread, served by the renderer
        self.slider_value = slider_range(config.slider_mapping)[2]
        self.time_scale = time_scale_from_slider(self.slider_value, config.slider_mapping)
        self.last_message: Optional[str] = None

    @property
    def config(self) -> SimulationConfig:
        return self.simulation.config

    def set_slider_value(self, value: float):
        with self.lock:
            self.slider_value = float(value)
            self.time_scale = time_scale_from_slider(self.slider_value, self.config.slider_mapping)

    def set_merge_threshold(self, value: float):
        with self.lock:
            self.simulation.set_merge_threshold(value)

    def set_merging(self, enabled: bool):
        with self.lock:
            self.simulation.set_merging(enabled)

    def request_fit(self):
        with self.lock:
            self.fit_requested = True

    def take_fit_request(self) -> bool:
        with self.lock:
            requested = self.fit_requested
            self.fit_requested = False
            return requested

    def set_dimension(self, w: int, h: int):
        with self.lock:
            self.simulation.set_dimension(w, h)

    def spawn(self, count: Optional[int] = None) -> int:
        with self.lock:
            return len(self.simulation.spawn(count))

    def clear(self):
        with self.lock:
            self.simulation.clear()

    def step(self, dt_real_seconds: float) -> Optional[TickReport]:
        """Run one tick if playing. Real frame time is capped at MAX_FRAME_TIME."""
        with self.lock:
            if not self.playing:
                return None
            dt = min(max(dt_real_seconds, 0.0), MAX_FRAME_TIME)
            report = self.simulation.update(dt, self.time_scale)
            if report.merges:
                last = report.merges[-1]
                self.last_message = f"Merged {len(report.merges)} bodies; largest now {last.survivor.mass:.3e}"
            if report.culled:
                self.last_message = f"Removed {report.culled} runaway bodies"
            return report

    def snapshot(self) -> Tuple[List[BodyDrawable], Tuple[float, float], float]:
        """Drawables, screen dimension and boundary margin, copied under the lock."""
        with self.lock:
            return (list(self.simulation.drawables()),
                    self.simulation.dimension,
                    self.config.boundary_margin)

    def stats(self) -> Tuple[int, float]:
        with self.lock:
            return len(self.simulation), self.simulation.total_mass()

# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: measures frame time, steps the simulation and draws
    the boundary, trails, glows and bodies. Handles panning and zoom.
    """
    def __init__(self, sim: SimulationController):
        super().__init__(daemon=True)
        self.sim = sim
        self.camera = Camera2D()
        self.surface = None
        self.clock = None
        self.dragging_background = False
        self.drag_start_screen = (0, 0)
        self.running = True

    def fit_camera(self):
        _, dimension, margin = self.sim.snapshot()
        self.camera.fit(dimension, margin)

    def run(self):
        pygame.init()
        pygame.display.set_caption("Gravity Sandbox - Viewport")
        w, h = self.sim.simulation.dimension
        self.surface = pygame.display.set_mode((int(w), int(h)), pygame.RESIZABLE)
        self.camera.set_viewport_size(int(w), int(h))
        self.clock = pygame.time.Clock()
        self.fit_camera()

        last_time = time.perf_counter()
        while self.running and self.sim.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            # Input handling
            self.handle_events()
            if self.sim.take_fit_request():
                self.fit_camera()

            # Physics step
            self.sim.step(real_dt)

            # Draw
            self.draw()

            # Limit FPS
            self.clock.tick(120)

        pygame.quit()

    def handle_events(self):
        keys = pygame.key.get_pressed()
        if keys[pygame.K_SPACE]:
            self.sim.spawn()

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                if event.w <= 0 or event.h <= 0:
                    continue  # minimized
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)
                self.sim.set_dimension(event.w, event.h)
                self.fit_camera()

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_p:
                    with self.sim.lock:
                        self.sim.playing = not self.sim.playing
                elif event.key == pygame.K_c:
                    self.sim.clear()
                elif event.key == pygame.K_f:
                    self.fit_camera()

            elif event.type == pygame.MOUSEWHEEL:
                factor = 1.1 if event.y > 0 else 1.0/1.1
                self.camera.zoom(factor, pygame.mouse.get_pos())

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button in (1, 2, 3):
                    self.dragging_background = True
                    self.drag_start_screen = pygame.mouse.get_pos()

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button in (1, 2, 3):
                    self.dragging_background = False

            elif event.type == pygame.MOUSEMOTION:
                if self.dragging_background:
                    mouse = pygame.mouse.get_pos()
                    dx = mouse[0] - self.drag_start_screen[0]
                    dy = mouse[1] - self.drag_start_screen[1]
                    self.camera.pan_pixels(dx, dy)
                    self.drag_start_screen = mouse

    def draw_border(self, surf, dimension, margin):
        top_left = self.camera.world_to_screen((-margin, -margin))
        bottom_right = self.camera.world_to_screen((dimension[0] + margin, dimension[1] + margin))
        tl = _safe_point(top_left)
        br = _safe_point(bottom_right)
        if tl is None or br is None:
            return
        rect = pygame.Rect(tl[0], tl[1], br[0] - tl[0], br[1] - tl[1])
        thickness = max(1, int(self.camera.world_length(BORDER_OUTLINE_THICKNESS)))
        pygame.draw.rect(surf, BORDER_FILL_COLOR, rect)
        pygame.draw.rect(surf, BORDER_OUTLINE_COLOR, rect.inflate(thickness, thickness), thickness)

    def draw_trail(self, surf, d: BodyDrawable):
        pts = [_safe_point(self.camera.world_to_screen(seg.point)) for seg in d.trail]
        for k in range(len(pts) - 1):
            a, b = pts[k], pts[k + 1]
            if a is None or b is None:
                continue
            width = max(1, int(self.camera.world_length(d.trail[k].thickness)))
            pygame.draw.line(surf, d.trail[k].color, a, b, width)

    def draw_body(self, surf, d: BodyDrawable):
        center = _safe_point(self.camera.world_to_screen(d.center))
        if center is None:
            return
        r = max(1, int(self.camera.world_length(d.radius)))
        rim = max(0, int(self.camera.world_length(d.outline_thickness)))
        glow = int(self.camera.world_length(d.glow_radius))
        try:
            if glow > r:
                gfxdraw.filled_circle(surf, center[0], center[1], glow, d.glow_color)
            if rim:
                pygame.draw.circle(surf, d.outline_color, center, r + rim)
            gfxdraw.filled_circle(surf, center[0], center[1], r, d.fill_color)
            gfxdraw.aacircle(surf, center[0], center[1], r, d.fill_color)
        except (OverflowError, ValueError):
            pass  # radius too large for SDL after extreme zoom

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        drawables, dimension, margin = self.sim.snapshot()
        with self.sim.lock:
            show_trails = self.sim.show_trails
            ts = self.sim.time_scale
            playing = self.sim.playing

        self.draw_border(surf, dimension, margin)

        if show_trails:
            for d in drawables:
                if len(d.trail) > 1:
                    self.draw_trail(surf, d)

        for d in drawables:
            self.draw_body(surf, d)

        # HUD text
        draw_text(surf, "Hold Space: spawn | P: pause | C: clear | F: fit | Drag: pan | Wheel: zoom", 10, 10, HUD_COLOR)
        draw_text(surf, f"Speed: {ts:.3g}x  Bodies: {len(drawables)}  [{'Playing' if playing else 'Paused'}]", 10, 30, HUD_COLOR)

        pygame.display.flip()

_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))

def _safe_point(pt):
    try:
        x, y = int(pt[0]), int(pt[1])
    except (OverflowError, ValueError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: speed slider, merge sensitivity, spawning and readouts.
    """
    def __init__(self, sim: SimulationController):
        self.sim = sim

        self.status_msg_id = None
        self.speed_label_id = None
        self.stats_label_id = None
        self.spawn_count_id = None

        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (~10Hz)."""
        current = dpg.get_frame_count()
        dpg.set_frame_callback(current + 6, self._sync_ui_with_sim)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        cfg = self.sim.config
        lo, hi, default = slider_range(cfg.slider_mapping)

        dpg.create_context()
        dpg.create_viewport(title='Gravity Sandbox - Controls', width=420, height=360)

        with dpg.window(label="Controls", width=400, height=340, pos=(10, 10), tag="main_window"):
            dpg.add_text("Speed" + (" (log10)" if cfg.slider_mapping == "exponential" else ""))
            dpg.add_slider_float(min_value=lo, max_value=hi, default_value=default, width=360,
                                 callback=lambda s, a, u: self._on_speed(a), tag="speed_slider")
            self.speed_label_id = dpg.add_text("")

            dpg.add_separator()
            dpg.add_text("Merge sensitivity (fraction of summed radii)")
            dpg.add_slider_float(min_value=0.05, max_value=1.0, default_value=cfg.merge_threshold, width=360,
                                 callback=lambda s, a, u: self._on_merge_threshold(a))
            dpg.add_checkbox(label="Merge on collision", default_value=cfg.merge_enabled,
                             callback=lambda s, a, u: self._toggle_merging(a))

            dpg.add_separator()
            with dpg.group(horizontal=True):
                self.spawn_count_id = dpg.add_input_int(label="count", default_value=cfg.spawn_count,
                                                        min_value=0, min_clamped=True, width=100)
                dpg.add_button(label="Spawn", callback=self._on_spawn)
                dpg.add_button(label="Clear", callback=self._on_clear)
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_checkbox(label="Trails", default_value=True,
                                 callback=lambda s, a, u: self._toggle_trails(a))
                dpg.add_button(label="Fit view", callback=self.sim.request_fit)

            dpg.add_separator()
            self.stats_label_id = dpg.add_text("")
            self.status_msg_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        self._refresh_speed_label()

    # -----------------------
    # Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=(255, 120, 120))

    def _refresh_speed_label(self):
        with self.sim.lock:
            ts = self.sim.time_scale
        dpg.set_value(self.speed_label_id, f"Time scale: {ts:.4g}x")

    def _on_speed(self, value):
        self.sim.set_slider_value(value)
        self._refresh_speed_label()

    def _on_merge_threshold(self, value):
        try:
            self.sim.set_merge_threshold(value)
        except ValueError as e:
            self._set_error(str(e))
            return
        self._set_status(f"Merge threshold: {value:.2f}")

    def _toggle_merging(self, value):
        self.sim.set_merging(bool(value))
        self._set_status(f"Merging {'ON' if value else 'OFF'}.")

    def _on_spawn(self):
        count = dpg.get_value(self.spawn_count_id)
        try:
            n = self.sim.spawn(int(count))
        except ValueError as e:
            self._set_error(str(e))
            return
        self._set_status(f"Spawned {n} bodies.")

    def _on_clear(self):
        self.sim.clear()
        self._set_status("Cleared all bodies.")

    def _toggle_play(self):
        with self.sim.lock:
            self.sim.playing = not self.sim.playing
            state = "Playing" if self.sim.playing else "Paused"
        self._set_status(f"Simulation {state}.")

    def _toggle_trails(self, value):
        with self.sim.lock:
            self.sim.show_trails = bool(value)
        self._set_status(f"Trails {'ON' if value else 'OFF'}.")

    def _sync_ui_with_sim(self):
        """Periodic update of readouts and collision messages."""
        count, mass = self.sim.stats()
        dpg.set_value(self.stats_label_id, f"Bodies: {count}   Total mass: {mass:.3e}")
        with self.sim.lock:
            msg = self.sim.last_message
            self.sim.last_message = None
        if msg:
            self._set_status(msg)
        if not self.sim.running:
            dpg.stop_dearpygui()
            return
        # Reschedule next sync
        self._schedule_sync()

# ============================================================
# Application Entry
# ============================================================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive 2D gravity sandbox.")
    parser.add_argument("--preset", default="classic", choices=sorted(PRESETS),
                        help="tuning preset (default: classic)")
    parser.add_argument("--seed", type=int, default=None, help="random seed for spawning")
    parser.add_argument("--width", type=int, default=VIEW_WIDTH, help="initial window width")
    parser.add_argument("--height", type=int, default=VIEW_HEIGHT, help="initial window height")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging verbosity")
    return parser.parse_args(argv)

def run(args) -> None:
    config = preset(args.preset)
    if args.seed is not None:
        config = config.with_changes(seed=args.seed)
    logger.info("Starting with preset %r (%s time-scale slider)", args.preset, config.slider_mapping)

    sim = SimulationController(config, (args.width, args.height))
    sim.spawn()

    renderer = PygameRenderer(sim)

    # Start Pygame renderer thread
    renderer.start()

    UI(sim)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        # Stop simulation and renderer
        sim.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()

def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        run(args)
    except Exception:
        logger.exception("Gravity Sandbox stopped on an unhandled error")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
