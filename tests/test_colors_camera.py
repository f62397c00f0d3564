import random

import pytest

from gravity.camera import Camera2D
from gravity.colors import brightened, grayified, intensified, random_color, with_alpha


def test_grayified():
    assert grayified((255, 0, 0), 1.0) == (85, 85, 85)
    assert grayified((10, 20, 30), 0.0) == (10, 20, 30)


def test_intensified_clamps_and_desaturates():
    assert intensified((255, 0, 0), 0.5) == (255, 0, 0)
    assert intensified((100, 150, 200), -1.0) == (150, 150, 150)


def test_brightened():
    assert brightened((0, 0, 0), 1.0) == (255, 255, 255)
    assert brightened((100, 100, 100), -0.5) == (50, 50, 50)


def test_with_alpha():
    assert with_alpha((1, 2, 3), 50) == (1, 2, 3, 50)


def test_random_color_in_range():
    rng = random.Random(11)
    for _ in range(50):
        c = random_color(rng)
        assert len(c) == 3
        assert all(0 <= ch <= 255 for ch in c)


def test_world_screen_round_trip():
    cam = Camera2D(center=(400.0, 300.0), zoom_level=2.0)
    cam.set_viewport_size(800, 600)
    assert cam.world_to_screen((400.0, 300.0)) == (400, 300)
    assert cam.world_to_screen((410.0, 300.0)) == (420, 300)
    assert cam.screen_to_world((420, 300)) == pytest.approx((410.0, 300.0))
    assert cam.world_length(5.0) == 10.0


def test_zoom_keeps_pivot_fixed():
    cam = Camera2D(center=(0.0, 0.0), zoom_level=1.0)
    cam.set_viewport_size(800, 600)
    pivot = (600, 150)
    before = cam.screen_to_world(pivot)
    cam.zoom(1.5, pivot)
    assert cam.zoom_level == pytest.approx(1.5)
    assert cam.screen_to_world(pivot) == pytest.approx(before)


def test_pan_moves_center_in_world_units():
    cam = Camera2D(center=(0.0, 0.0), zoom_level=2.0)
    cam.pan_pixels(10, -20)
    assert cam.center == [-5.0, 10.0]


def test_fit_frames_extended_bounds():
    cam = Camera2D()
    cam.set_viewport_size(1000, 800)
    cam.fit((800, 600), margin=100)
    assert cam.center == [400.0, 300.0]
    assert cam.zoom_level == pytest.approx(1.0)
