"""Fixed-period tick scheduling on top of a variable frame clock."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_TICK_PERIOD = 0.2


@dataclass
class FixedStepScheduler:
    """Turns elapsed frame time into whole ticks of ``period`` seconds.

    Ticks run one after another inside :meth:`advance`; a frame never fires
    more than ``max_catch_up`` of them and any older backlog is discarded.
    """

    period: float = DEFAULT_TICK_PERIOD
    max_catch_up: int = 5
    accumulator: float = field(default=0.0, init=False)
    total_ticks: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if not math.isfinite(self.period) or self.period <= 0.0:
            raise ValueError(f"Tick period must be positive, got {self.period}")
        if self.max_catch_up < 1:
            raise ValueError(f"max_catch_up must be at least 1, got {self.max_catch_up}")

    def advance(self, dt: float, step: Callable[[], object]) -> int:
        """Accumulate ``dt`` seconds and call ``step`` for each full period."""

        if dt > 0.0:
            self.accumulator += dt
        fired = 0
        while self.accumulator >= self.period and fired < self.max_catch_up:
            self.accumulator -= self.period
            step()
            fired += 1
        if self.accumulator >= self.period:
            dropped = int(self.accumulator // self.period)
            logger.debug("Dropping %d late ticks", dropped)
            self.accumulator -= dropped * self.period
        self.total_ticks += fired
        return fired

    def reset(self) -> None:
        self.accumulator = 0.0
