"""
Tests for converting frame time into fixed animation ticks.
"""

import pytest

from simulation.clock import DEFAULT_TICK_PERIOD, FixedStepScheduler


class Recorder:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


class TestFixedStepScheduler:
    def test_default_period(self):
        assert FixedStepScheduler().period == DEFAULT_TICK_PERIOD == 0.2

    def test_whole_periods_fire_ticks(self):
        scheduler = FixedStepScheduler(period=0.25)
        step = Recorder()
        assert scheduler.advance(0.5, step) == 2
        assert step.calls == 2
        assert scheduler.accumulator == 0.0

    def test_partial_frames_accumulate(self):
        scheduler = FixedStepScheduler(period=0.25)
        step = Recorder()
        assert scheduler.advance(0.125, step) == 0
        assert scheduler.advance(0.125, step) == 1
        assert step.calls == 1
        assert scheduler.total_ticks == 1

    def test_catch_up_is_capped(self):
        scheduler = FixedStepScheduler(period=0.25, max_catch_up=3)
        step = Recorder()
        assert scheduler.advance(2.0, step) == 3
        assert step.calls == 3
        assert 0.0 <= scheduler.accumulator < scheduler.period

    def test_negative_elapsed_time_is_ignored(self):
        scheduler = FixedStepScheduler(period=0.25)
        step = Recorder()
        assert scheduler.advance(-1.0, step) == 0
        assert scheduler.accumulator == 0.0

    def test_ticks_run_in_order(self):
        scheduler = FixedStepScheduler(period=0.25)
        order = []
        scheduler.advance(0.75, lambda: order.append(len(order)))
        assert order == [0, 1, 2]

    def test_reset_discards_partial_time(self):
        scheduler = FixedStepScheduler(period=0.25)
        step = Recorder()
        scheduler.advance(0.125, step)
        scheduler.reset()
        scheduler.advance(0.125, step)
        assert step.calls == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"period": 0.0},
            {"period": -0.2},
            {"period": float("nan")},
            {"period": float("inf")},
            {"max_catch_up": 0},
        ],
    )
    def test_rejects_bad_configuration(self, kwargs):
        with pytest.raises(ValueError):
            FixedStepScheduler(**kwargs)
