"""
Tests for the escalator animation coordinator.

Covers the idle/running state machine, the walk / ride / reset phases of the
figure, belt wrapping and the coupling between figure scale and ride speed.
"""

import math

import pytest

from simulation.animation import (
    AnimationConstants,
    AnimationCoordinator,
    AnimationState,
    validate_scale_factor,
)
from simulation.settings import InvalidSettingError, SettingsError

MAX_TICKS = 10_000


def run_until_idle(coordinator):
    for _ in range(MAX_TICKS):
        coordinator.tick()
        if not coordinator.is_running:
            return coordinator.ticks_elapsed
    raise AssertionError("animation never finished")


class TestStateMachine:
    def test_initial_state(self):
        coordinator = AnimationCoordinator()
        constants = coordinator.constants
        assert coordinator.state is AnimationState.IDLE
        assert coordinator.person_position == constants.person_start
        assert coordinator.boarded is False
        assert coordinator.input_enabled is True
        assert coordinator.scale_factor == constants.default_scale
        assert coordinator.segments == constants.initial_segments()

    def test_tick_while_idle_changes_nothing(self):
        coordinator = AnimationCoordinator()
        before = coordinator.snapshot()
        after = coordinator.tick()
        assert after == before

    def test_start_transitions_to_running(self):
        coordinator = AnimationCoordinator()
        assert coordinator.start() is True
        assert coordinator.state is AnimationState.RUNNING
        assert coordinator.input_enabled is False

    def test_start_twice_matches_start_once(self):
        once = AnimationCoordinator()
        twice = AnimationCoordinator()
        once.start()
        twice.start()
        assert twice.start() is False
        assert twice.snapshot() == once.snapshot()

    def test_start_while_running_keeps_progress(self):
        coordinator = AnimationCoordinator()
        coordinator.start()
        for _ in range(3):
            coordinator.tick()
        position = coordinator.person_position
        coordinator.start()
        assert coordinator.person_position == position
        assert coordinator.ticks_elapsed == 3

    def test_input_listener_sees_lock_and_unlock(self):
        events = []
        coordinator = AnimationCoordinator(input_listener=events.append)
        coordinator.start()
        coordinator.start()
        assert events == [False]
        run_until_idle(coordinator)
        assert events == [False, True]


class TestPersonStep:
    def test_walks_forward_before_boarding(self):
        coordinator = AnimationCoordinator()
        coordinator.start()
        coordinator.tick()
        x, y, z = coordinator.person_position
        assert (x, y) == (0.0, 0.0)
        assert z == pytest.approx(-9.5)
        assert coordinator.boarded is False

    def test_boards_at_threshold(self):
        coordinator = AnimationCoordinator()
        coordinator.start()
        for _ in range(25):
            coordinator.tick()
        assert coordinator.person_position[2] == 2.5
        assert coordinator.boarded is False

        coordinator.tick()
        rise, forward = coordinator.carry_increment()
        assert coordinator.boarded is True
        assert coordinator.person_position[1] == rise
        assert coordinator.person_position[2] == pytest.approx(2.5 + forward)

    def test_default_ride_increment(self):
        coordinator = AnimationCoordinator()
        rise, forward = coordinator.carry_increment()
        assert rise == pytest.approx(0.256 * 7.0 / 8.0)
        assert forward == pytest.approx(0.5 * 7.0 / 8.0)

    @pytest.mark.parametrize("scale", [0.5, 3.0, 7.0, 8.0, 11.25])
    def test_doubling_scale_halves_ride_increment(self, scale):
        small = AnimationCoordinator()
        large = AnimationCoordinator()
        small.scale_factor = scale
        large.scale_factor = 2 * scale

        small_rise, small_forward = small.carry_increment()
        large_rise, large_forward = large.carry_increment()
        assert large_rise == small_rise / 2
        assert large_forward == small_forward / 2

    def test_doubling_scale_halves_first_ride_tick(self):
        small = AnimationCoordinator()
        large = AnimationCoordinator()
        small.scale_factor = 4.0
        large.scale_factor = 8.0
        for coordinator in (small, large):
            coordinator.start()
            for _ in range(26):
                coordinator.tick()
        assert small.boarded and large.boarded
        assert large.person_position[1] == small.person_position[1] / 2
        assert large.person_position[2] - 2.5 == pytest.approx((small.person_position[2] - 2.5) / 2)

    def test_full_traversal_resets_to_idle(self):
        coordinator = AnimationCoordinator()
        coordinator.start()
        ticks = run_until_idle(coordinator)

        assert ticks == 56
        assert coordinator.state is AnimationState.IDLE
        assert coordinator.boarded is False
        assert coordinator.person_position == coordinator.constants.person_start
        assert coordinator.input_enabled is True

    def test_smaller_figure_finishes_sooner(self):
        slim = AnimationCoordinator()
        slim.scale_factor = 4.0
        wide = AnimationCoordinator()
        wide.scale_factor = 16.0
        slim.start()
        wide.start()
        assert run_until_idle(slim) < run_until_idle(wide)

    def test_can_run_again_after_finishing(self):
        coordinator = AnimationCoordinator()
        coordinator.start()
        first = run_until_idle(coordinator)
        assert coordinator.start() is True
        assert coordinator.ticks_elapsed == 0
        assert run_until_idle(coordinator) == first


class TestConveyorStep:
    def test_segments_advance_diagonally(self):
        coordinator = AnimationCoordinator()
        initial = list(coordinator.segments)
        coordinator.start()
        coordinator.tick()
        for (x0, y0), (x1, y1) in zip(initial, coordinator.segments):
            assert x1 - x0 == pytest.approx(0.2)
            assert y1 - y0 == pytest.approx(0.2)

    def test_belt_slows_once_boarded(self):
        constants = AnimationConstants(person_start=(0.0, 0.0, 2.5))
        coordinator = AnimationCoordinator(constants=constants)
        coordinator.start()
        coordinator.tick()
        assert coordinator.boarded is True
        first_x, first_y = coordinator.segments[0]
        assert first_x == pytest.approx(5.1)
        assert first_y == pytest.approx(0.1)

    def test_segment_wraps_to_start_on_same_tick(self):
        constants = AnimationConstants(
            segment_start=(0.0, 0.0), wrap_threshold=1.0, belt_speed=0.5, segment_count=1
        )
        coordinator = AnimationCoordinator(constants=constants)
        coordinator.start()
        coordinator.tick()
        assert coordinator.segments == [(0.5, 0.5)]
        coordinator.tick()
        assert coordinator.segments == [(0.0, 0.0)]

    def test_segments_wrap_independently(self):
        constants = AnimationConstants(
            segment_start=(0.0, 0.0),
            wrap_threshold=1.0,
            belt_speed=0.5,
            segment_count=2,
            segment_spacing=0.5,
        )
        coordinator = AnimationCoordinator(constants=constants)
        coordinator.start()
        coordinator.tick()
        assert coordinator.segments == [(0.5, 0.5), (0.0, 0.0)]

    def test_segments_stay_in_range_for_whole_run(self):
        coordinator = AnimationCoordinator()
        constants = coordinator.constants
        coordinator.start()
        while True:
            snapshot = coordinator.tick()
            for x, _ in snapshot.segments:
                assert constants.segment_start[0] <= x < constants.wrap_threshold
            if not snapshot.is_running:
                break

    def test_belt_stops_when_idle(self):
        coordinator = AnimationCoordinator()
        coordinator.start()
        run_until_idle(coordinator)
        resting = list(coordinator.segments)
        coordinator.tick()
        assert coordinator.segments == resting


class TestScaleValidation:
    @pytest.mark.parametrize("value", [0.0, -1.0, math.nan, math.inf, "wide", None])
    def test_rejects_unusable_scale(self, value):
        coordinator = AnimationCoordinator()
        with pytest.raises(InvalidSettingError):
            coordinator.scale_factor = value
        assert coordinator.scale_factor == coordinator.constants.default_scale

    def test_error_is_a_settings_error(self):
        with pytest.raises(SettingsError):
            validate_scale_factor(-2)

    def test_invalid_default_scale_rejected_at_construction(self):
        with pytest.raises(InvalidSettingError):
            AnimationCoordinator(constants=AnimationConstants(default_scale=0.0))
