import math

import numpy as np
import pytest

from lattesim.Main import Main
from lattesim.Settings import Settings
from lattesim.flow.fluid import Splat
from lattesim.pour import (PourConfig, PourSource, PourStroke, MilkBudget, ScriptedPour, PourSample,
                           flow_scale_from_tilt, radius_from_height)
from lattesim.utils import PerformanceTimer


# ---------- Stroke ----------

def test_first_contact_is_a_single_still_splat():
    stroke = PourStroke(spacing=0.25)
    splats = stroke.move((0.2, 0.3), 0.0, 0.05, 0.5, 0.4)
    assert len(splats) == 1
    assert splats[0].uv == (0.2, 0.3)
    assert splats[0].force == (0.0, 0.0)
    assert splats[0].amount == 0.4
    assert stroke.active


def test_move_fills_segment_at_spacing():
    stroke = PourStroke(spacing=0.25)
    radius, amount = 0.04, 0.6
    stroke.begin((0.1, 0.5), 0.0, radius, 0.5, amount)
    splats = stroke.move((0.3, 0.5), 0.5, radius, 0.5, amount)

    assert len(splats) >= 20
    assert splats[-1].uv == pytest.approx((0.3, 0.5))
    assert sum(s.amount for s in splats) == pytest.approx(amount)

    points = [(0.1, 0.5)] + [s.uv for s in splats]
    for a, b in zip(points, points[1:]):
        assert math.dist(a, b) <= radius * 0.25 + 1e-9

    for splat in splats:
        assert splat.force == pytest.approx((0.4, 0.0))


def test_end_lifts_the_stroke():
    stroke = PourStroke()
    stroke.begin((0.5, 0.5), 0.0, 0.05, 0.5, 0.2)
    stroke.end()
    assert not stroke.active
    splats = stroke.move((0.9, 0.9), 1.0, 0.05, 0.5, 0.2)
    assert len(splats) == 1
    assert splats[0].force == (0.0, 0.0)


def test_stationary_move_has_no_force():
    stroke = PourStroke()
    stroke.begin((0.5, 0.5), 0.0, 0.05, 0.5, 0.2)
    splats = stroke.move((0.5, 0.5), 0.1, 0.05, 0.5, 0.2)
    assert len(splats) == 1
    assert splats[0].force == (0.0, 0.0)


# ---------- Budget ----------

def test_budget_runs_out():
    budget = MilkBudget(PourConfig(milk_capacity=1.0, milk_per_second=0.25))
    assert budget.consume(1.0)
    assert budget.consume(1.0)
    assert budget.consume(1.0)
    assert budget.used01 == pytest.approx(0.75)
    assert not budget.consume(1.0)
    assert budget.out_of_milk
    assert budget.used == 1.0
    assert not budget.consume(0.01)

    budget.reset()
    assert budget.used == 0.0
    assert budget.consume(1.0)


def test_budget_flow_scale():
    budget = MilkBudget(PourConfig(milk_capacity=1.0, milk_per_second=0.25))
    budget.consume(1.0, flow_scale=0.5)
    assert budget.used == pytest.approx(0.125)


def test_infinite_pour_never_runs_out():
    budget = MilkBudget(PourConfig(milk_capacity=1.0, infinite_pour=True))
    for _ in range(100):
        assert budget.consume(1.0)
    assert budget.used == 0.0


# ---------- Shaping ----------

def test_flow_scale_from_tilt(pour_config):
    assert flow_scale_from_tilt(pour_config, 0.0) == pytest.approx(0.2)
    assert flow_scale_from_tilt(pour_config, 45.0) == pytest.approx(0.2)
    assert flow_scale_from_tilt(pour_config, 62.5) == pytest.approx(0.6)
    assert flow_scale_from_tilt(pour_config, 120.0) == pytest.approx(1.0)


def test_radius_from_height(pour_config):
    assert radius_from_height(pour_config, 0.0) == pytest.approx(0.10)
    assert radius_from_height(pour_config, -1.0) == pytest.approx(0.10)
    assert radius_from_height(pour_config, 0.35) == pytest.approx(0.04)
    assert radius_from_height(pour_config, 5.0) == pytest.approx(0.04)
    assert 0.04 < radius_from_height(pour_config, 0.2) < 0.10


# ---------- Scripted pour ----------

def make_line(config, duration=0.5, timestep=0.05):
    return ScriptedPour.line((0.2, 0.5), (0.8, 0.5), duration, timestep, config, 0.05, 0.5, 0.3)


def test_scripted_line_plays_through(pour_config):
    pour = make_line(pour_config)
    first = pour.poll()
    assert first[0].force == (0.0, 0.0)
    assert pour.pouring

    splats = list(first)
    for _ in range(20):
        splats.extend(pour.poll())
    assert pour.finished
    assert not pour.pouring
    assert splats[-1].uv == pytest.approx((0.8, 0.5))
    assert pour.poll() == []


def test_scripted_timestep_and_reset(pour_config):
    pour = make_line(pour_config, timestep=0.02)
    assert pour.timestep() == 0.02
    assert not pour.reset_requested()
    pour.request_reset()
    assert pour.reset_requested()
    assert not pour.reset_requested()


def test_scripted_rewind(pour_config):
    pour = make_line(pour_config)
    for _ in range(20):
        pour.poll()
    assert pour.finished
    pour.rewind()
    assert not pour.finished
    assert len(pour.poll()) >= 1


def test_scripted_tilt_and_height(pour_config):
    samples = [
        PourSample(0.0, (0.5, 0.5), tilt=45.0, height=0.0),
        PourSample(0.1, (0.5, 0.5), tilt=80.0, height=0.35),
    ]
    pour = ScriptedPour(samples, 0.1, pour_config, 0.05, 0.5, 0.5)
    splats = pour.poll()
    assert len(splats) == 2
    assert splats[0].radius == pytest.approx(0.10)
    assert splats[0].amount == pytest.approx(0.5 * 0.2)
    assert splats[1].radius == pytest.approx(0.04)
    assert splats[1].amount == pytest.approx(0.5)
    assert pour.flow_scale() == pytest.approx(1.0)


def test_circle_stays_on_circle(pour_config):
    pour = ScriptedPour.circle((0.5, 0.5), 0.2, 1.0, 0.5, 0.05, pour_config, 0.05, 0.5, 0.3)
    splats = pour.poll()
    for splat in splats:
        assert math.dist(splat.uv, (0.5, 0.5)) <= 0.2 + 1e-9


# ---------- Main ----------

class StillSource(PourSource):
    """Pours at one point every tick."""

    def __init__(self, timestep=1.0 / 60.0):
        self._timestep = timestep
        self.reset = False

    def poll(self):
        return [Splat((0.5, 0.5), radius=0.1, amount=0.5)]

    def timestep(self):
        return self._timestep

    def reset_requested(self):
        requested, self.reset = self.reset, False
        return requested


def make_settings(**pour):
    settings = Settings()
    settings.fluid.resolution = 32
    for key, value in pour.items():
        setattr(settings.pour, key, value)
    return settings


def test_main_runs_a_scripted_pour():
    settings = make_settings()
    source = make_line(settings.pour, timestep=settings.fluid.timestep, duration=0.2)
    app = Main(settings, source, report_interval=5)
    app.start()
    for _ in range(30):
        app.update()

    assert app.tick_count == 30
    assert app.splat_count > 0
    assert app.fluid.dye.max() > 0.0
    assert app.step_timer.count == 30
    assert app.budget.used > 0.0

    app.stop()
    assert not app.fluid.allocated


def test_main_reset_clears_dye_and_budget():
    settings = make_settings(milk_capacity=1.0)
    source = StillSource()
    app = Main(settings, source)
    app.start()
    for _ in range(3):
        app.update()
    assert app.fluid.dye.max() > 0.0

    app.reset()
    assert not app.fluid.dye.any()
    assert app.budget.used == 0.0
    app.stop()


def test_main_reset_request_is_handled_in_update():
    settings = make_settings()
    source = StillSource()
    app = Main(settings, source)
    app.start()
    app.update()
    used = app.budget.used
    source.reset = True
    app.update()
    # one tick of milk again after the reset
    assert app.budget.used == pytest.approx(used)
    app.stop()


def test_main_stops_pouring_without_milk():
    settings = make_settings(milk_capacity=0.001)
    app = Main(settings, StillSource())
    app.start()
    for _ in range(3):
        app.update()
    assert app.splat_count == 0
    assert not app.fluid.dye.any()
    assert app.budget.out_of_milk
    app.stop()


def test_main_update_requires_start():
    app = Main(make_settings(), StillSource())
    with pytest.raises(RuntimeError):
        app.update()


# ---------- Timer ----------

def test_performance_timer():
    timer = PerformanceTimer("test", sample_count=4)
    assert timer.get_average() == 0.0
    for value in (1.0, 2.0, 3.0):
        timer.add_time(value, report=False)
    assert timer.get_average() == pytest.approx(2.0)
    assert timer.get_minimum() == 1.0
    assert timer.get_maximum() == 3.0

    # window keeps the last four samples
    timer.add_time(4.0, report=False)
    timer.add_time(10.0, report=False)
    assert timer.get_minimum() == 2.0
    assert timer.get_maximum() == 10.0

    with timer.measure(report=False):
        np.zeros(10)
    assert timer.count == 6

    timer.reset()
    assert timer.count == 0
    assert timer.get_maximum() == 0.0
