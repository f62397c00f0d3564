import math

import pytest

from gravity.config import CLASSIC, LIVELY, SimulationConfig
from gravity.data_models import Body
from gravity.simulation import Simulation


def finite(body):
    return all(math.isfinite(v) for v in body.position + body.velocity + (body.mass, body.radius))


def test_spawn_uses_config_and_bounds():
    sim = Simulation(CLASSIC.with_changes(seed=1), (800, 600))
    new = sim.spawn()
    assert len(new) == CLASSIC.spawn_count == len(sim)
    more = sim.spawn(25)
    assert len(more) == 25
    for body in sim:
        assert 1e3 <= body.mass <= 1e9
        assert 0 <= body.position[0] <= 800
        assert 0 <= body.position[1] <= 600
        assert abs(body.velocity[0]) <= 5 and abs(body.velocity[1]) <= 5
        assert body.trail.capacity == CLASSIC.trail_capacity
        assert body.radius == pytest.approx(math.log(body.mass))


def test_spawn_with_explicit_dimension():
    sim = Simulation(CLASSIC.with_changes(seed=3), (800, 600))
    for body in sim.spawn(10, dimension=(50, 40)):
        assert 0 <= body.position[0] <= 50
        assert 0 <= body.position[1] <= 40


def test_seeded_spawns_are_reproducible():
    a = Simulation(CLASSIC.with_changes(seed=42), (800, 600))
    b = Simulation(CLASSIC.with_changes(seed=42), (800, 600))
    a.spawn(5)
    b.spawn(5)
    assert [x.mass for x in a] == [y.mass for y in b]
    assert [x.position for x in a] == [y.position for y in b]


def test_negative_spawn_count_rejected():
    with pytest.raises(ValueError):
        Simulation().spawn(-1)


def test_update_rejects_negative_inputs():
    sim = Simulation()
    with pytest.raises(ValueError):
        sim.update(-0.1, 1.0)
    with pytest.raises(ValueError):
        sim.update(0.1, -1.0)


def test_set_dimension_validates():
    sim = Simulation()
    sim.set_dimension(1024, 768)
    assert sim.dimension == (1024.0, 768.0)
    with pytest.raises(ValueError):
        sim.set_dimension(0, 768)


def test_runaway_body_is_culled_on_next_update():
    sim = Simulation(CLASSIC, (800, 600))
    slow = sim.add_body(Body(1e3, (0.0, 0.0), (100.0, 100.0)))
    sim.add_body(Body(1e3, (40000.0, 40000.0), (400.0, 300.0)))
    report = sim.update(0.001, 1.0)
    assert report.culled == 1
    assert sim.bodies == [slow]


def test_merge_during_update_conserves_mass():
    sim = Simulation(CLASSIC, (800, 600))
    sim.add_body(Body(1e6, (0.0, 0.0), (398.0, 300.0)))
    sim.add_body(Body(1e6, (0.0, 0.0), (402.0, 300.0)))
    report = sim.update(1e-4, 1.0)
    assert len(report.merges) == 1
    assert len(sim) == 1
    assert sim.bodies[0].mass == pytest.approx(2e6)
    assert sim.bodies[0].radius == pytest.approx(math.log(2e6))


def test_coincident_bodies_stay_finite():
    sim = Simulation(CLASSIC, (800, 600))
    sim.add_body(Body(1e6, (0.0, 0.0), (400.0, 300.0)))
    sim.add_body(Body(1e6, (0.0, 0.0), (400.0, 300.0)))
    sim.add_body(Body(1e4, (0.0, 0.0), (600.0, 300.0)))
    sim.update(0.016, 1.0)
    assert all(finite(b) for b in sim)
    assert sim.total_mass() == pytest.approx(2e6 + 1e4)


def test_trail_sampled_every_tick_at_normal_speed():
    sim = Simulation(CLASSIC, (800, 600))
    body = sim.add_body(Body(1e3, (1.0, 0.0), (100.0, 100.0)))
    for _ in range(3):
        assert sim.update(0.016, 1.0).sampled_trail
    assert len(body.trail) == 3
    assert next(iter(body.trail)) == body.position


def test_trail_sampling_slows_with_time_scale():
    sim = Simulation(CLASSIC, (800, 600))
    # threshold = 1 / (1e-3 * 1500) ~= 0.667 s -> one sample every 42 ticks of 16 ms
    samples = sum(sim.update(0.016, 1e-3).sampled_trail for _ in range(100))
    assert samples == 2


def test_zero_time_scale_freezes_motion_and_trails():
    sim = Simulation(CLASSIC, (800, 600))
    body = sim.add_body(Body(1e3, (10.0, 10.0), (100.0, 100.0)))
    for _ in range(10):
        report = sim.update(0.016, 0.0)
        assert not report.sampled_trail
    assert body.position == (100.0, 100.0)
    assert len(body.trail) == 0


def test_two_bodies_hundred_ticks_no_nan_and_mass_conserved():
    sim = Simulation(CLASSIC, (800, 600))
    sim.add_body(Body(1e5, (0.0, 0.0), (200.0, 300.0)))
    sim.add_body(Body(2e5, (0.0, 0.0), (600.0, 300.0)))
    total = sim.total_mass()
    for _ in range(100):
        sim.update(0.016, 1.0)
    assert len(sim) == 2
    assert all(finite(b) for b in sim)
    assert sim.total_mass() == pytest.approx(total)
    # they fall towards each other
    assert sim.bodies[0].position[0] > 200.0
    assert sim.bodies[1].position[0] < 600.0


@pytest.mark.parametrize("seed", [0, 7, 2024])
def test_seeded_pair_end_to_end(seed):
    sim = Simulation(CLASSIC.with_changes(seed=seed), (800, 600))
    sim.spawn(2)
    total = sim.total_mass()
    merged = culled = 0
    for _ in range(100):
        report = sim.update(0.016, 1.0)
        merged += len(report.merges)
        culled += report.culled
    assert all(finite(b) for b in sim)
    if not culled:
        assert len(sim) == 2 - merged
        assert sim.total_mass() == pytest.approx(total)


def test_merge_threshold_can_be_changed():
    sim = Simulation(CLASSIC, (800, 600))
    sim.set_merge_threshold(0.5)
    assert sim.config.merge_threshold == 0.5
    assert sim.collisions.merge_threshold == 0.5
    with pytest.raises(ValueError):
        sim.set_merge_threshold(0.0)


def test_clear_and_total_mass():
    sim = Simulation(LIVELY.with_changes(seed=5), (800, 600))
    sim.spawn()
    assert len(sim) == LIVELY.spawn_count
    assert sim.total_mass() == pytest.approx(sum(b.mass for b in sim))
    sim.clear()
    assert len(sim) == 0
    assert sim.total_mass() == 0


def test_drawables_follow_collection_order_and_mass():
    sim = Simulation(SimulationConfig(), (800, 600))
    a = sim.add_body(Body(math.exp(10.0), (1.0, 0.0), (100.0, 100.0), color=(200, 100, 50)))
    b = sim.add_body(Body(math.exp(8.0), (0.0, 0.0), (700.0, 500.0)))
    sim.update(0.016, 1.0)
    sim.update(0.016, 1.0)

    drawables = list(sim.drawables())
    assert [d.center for d in drawables] == [a.position, b.position]

    d = drawables[0]
    assert d.radius == pytest.approx(10.0)
    assert d.outline_thickness == pytest.approx(5.0)
    assert d.glow_radius == pytest.approx(100.0)
    assert d.glow_color[3] == 50
    assert d.fill_color == (158, 108, 83)
    assert len(d.trail) == 2
    assert d.trail[0].point == a.position
    assert d.trail[0].thickness == pytest.approx(5.0)
    assert d.trail[1].thickness == pytest.approx(2.5)


def test_merging_can_be_disabled_in_config():
    sim = Simulation(CLASSIC.with_changes(merge_enabled=False), (800, 600))
    sim.add_body(Body(1e6, (0.0, 0.0), (398.0, 300.0)))
    sim.add_body(Body(1e6, (0.0, 0.0), (402.0, 300.0)))
    report = sim.update(1e-4, 1.0)
    assert report.merges == []
    assert len(sim) == 2


def test_merging_toggle_takes_effect_on_next_update():
    sim = Simulation(CLASSIC, (800, 600))
    sim.set_merging(False)
    assert sim.config.merge_enabled is False
    sim.add_body(Body(1e6, (0.0, 0.0), (398.0, 300.0)))
    sim.add_body(Body(1e6, (0.0, 0.0), (402.0, 300.0)))
    sim.update(1e-4, 1.0)
    assert len(sim) == 2

    sim.set_merging(True)
    report = sim.update(1e-4, 1.0)
    assert len(report.merges) == 1
    assert len(sim) == 1
