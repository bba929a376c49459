"""Tick-driven escalator animation: a figure walks on and rides up the belt."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .settings import InvalidSettingError

logger = logging.getLogger(__name__)

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]


class AnimationState(Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class AnimationConstants:
    """Kinematic tuning for the walk-on / ride / reset cycle.

    The forward axis is ``z``. Distances are in scene units per tick.
    """

    person_start: Vec3 = (0.0, 0.0, -10.0)
    walk_step: float = 0.5
    boarding_threshold: float = 2.5
    completion_threshold: float = 15.4
    rise_step: float = 0.256
    carry_step: float = 0.5
    # Scale at which the figure rides at exactly rise_step / carry_step.
    reference_scale: float = 7.0
    default_scale: float = 8.0
    belt_speed: float = 0.2
    boarded_belt_speed: float = 0.1
    segment_start: Vec2 = (5.0, 0.0)
    wrap_threshold: float = 17.0
    segment_count: int = 12
    segment_spacing: float = 1.0

    def initial_segments(self) -> List[Vec2]:
        start_x, start_y = self.segment_start
        return [
            (start_x + i * self.segment_spacing, start_y + i * self.segment_spacing)
            for i in range(self.segment_count)
        ]


DEFAULT_CONSTANTS = AnimationConstants()


@dataclass(frozen=True)
class AnimationSnapshot:
    """Read-only view of the animation handed to the renderer each frame."""

    state: AnimationState
    person_position: Vec3
    boarded: bool
    segments: Tuple[Vec2, ...]
    scale_factor: float
    ticks_elapsed: int

    @property
    def is_running(self) -> bool:
        return self.state is AnimationState.RUNNING


def validate_scale_factor(value: float) -> float:
    """Return ``value`` as a float if it is a usable positive scale."""

    try:
        scale = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidSettingError(f"Scale factor must be a number, got {value!r}") from exc
    if not math.isfinite(scale) or scale <= 0.0:
        raise InvalidSettingError(f"Scale factor must be positive, got {value!r}")
    return scale


@dataclass
class AnimationCoordinator:
    """Owns the person/belt state and advances it one tick at a time.

    ``tick`` must be called sequentially; it never blocks and never fails.
    ``input_listener`` is told when user input should be locked (``False``)
    for the duration of a run and unlocked again (``True``) when it ends.
    """

    constants: AnimationConstants = field(default_factory=AnimationConstants)
    input_listener: Optional[Callable[[bool], None]] = field(default=None, repr=False)
    state: AnimationState = field(default=AnimationState.IDLE, init=False)
    person_position: Vec3 = field(init=False)
    boarded: bool = field(default=False, init=False)
    segments: List[Vec2] = field(init=False)
    input_enabled: bool = field(default=True, init=False)
    ticks_elapsed: int = field(default=0, init=False)
    _scale_factor: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.person_position = self.constants.person_start
        self.segments = self.constants.initial_segments()
        self._scale_factor = validate_scale_factor(self.constants.default_scale)

    @property
    def scale_factor(self) -> float:
        return self._scale_factor

    @scale_factor.setter
    def scale_factor(self, value: float) -> None:
        self._scale_factor = validate_scale_factor(value)
        logger.debug("Scale factor set to %s", self._scale_factor)

    @property
    def is_running(self) -> bool:
        return self.state is AnimationState.RUNNING

    def carry_increment(self) -> Tuple[float, float]:
        """Per-tick (rise, forward) movement while riding at the current scale."""

        ratio = self.constants.reference_scale / self._scale_factor
        return (self.constants.rise_step * ratio, self.constants.carry_step * ratio)

    def start(self) -> bool:
        """Begin a traversal. Returns ``False`` if one is already running."""

        if self.is_running:
            return False
        self.state = AnimationState.RUNNING
        self.ticks_elapsed = 0
        self._set_input_enabled(False)
        logger.info("Animation started (scale factor %.3f)", self._scale_factor)
        return True

    def tick(self) -> AnimationSnapshot:
        """Advance person and belt by one step if running."""

        if self.is_running:
            self.ticks_elapsed += 1
            self._step_person()
            if self.is_running:
                self._step_conveyor()
        return self.snapshot()

    def snapshot(self) -> AnimationSnapshot:
        return AnimationSnapshot(
            state=self.state,
            person_position=self.person_position,
            boarded=self.boarded,
            segments=tuple(self.segments),
            scale_factor=self._scale_factor,
            ticks_elapsed=self.ticks_elapsed,
        )

    def _step_person(self) -> None:
        c = self.constants
        x, y, z = self.person_position
        if z < c.boarding_threshold:
            self.person_position = (x, y, z + c.walk_step)
        elif z <= c.completion_threshold:
            self.boarded = True
            rise, forward = self.carry_increment()
            self.person_position = (x, y + rise, z + forward)
        else:
            self._finish()

    def _step_conveyor(self) -> None:
        c = self.constants
        velocity = c.boarded_belt_speed if self.boarded else c.belt_speed
        start_x, start_y = c.segment_start
        advanced: List[Vec2] = []
        for x, y in self.segments:
            x += velocity
            y += velocity
            if x >= c.wrap_threshold:
                x, y = start_x, start_y
            advanced.append((x, y))
        self.segments = advanced

    def _finish(self) -> None:
        self.person_position = self.constants.person_start
        self.boarded = False
        self.state = AnimationState.IDLE
        self._set_input_enabled(True)
        logger.info("Animation finished after %d ticks", self.ticks_elapsed)

    def _set_input_enabled(self, enabled: bool) -> None:
        self.input_enabled = enabled
        if self.input_listener is not None:
            self.input_listener(enabled)
