"""Scene setup for the escalator demo."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .animation import AnimationConstants, AnimationCoordinator, AnimationSnapshot
from .clock import DEFAULT_TICK_PERIOD, FixedStepScheduler
from .mesh_import import ModelLoadError, load_triangle_soup
from .settings import Color4, LightingSettings, parse_scale_factor

logger = logging.getLogger(__name__)


@dataclass
class DemoScene:
    """Animation state, tick scheduling and lighting for one demo session.

    ``figure_soup`` is the imported figure model, or ``None`` when the
    renderer should fall back to its procedural figure.
    """

    coordinator: AnimationCoordinator = field(default_factory=AnimationCoordinator)
    scheduler: FixedStepScheduler = field(default_factory=FixedStepScheduler)
    lighting: LightingSettings = field(default_factory=LightingSettings)
    figure_soup: Optional[np.ndarray] = field(default=None, repr=False)
    model_name: str = "procedural figure"
    figure_revision: int = field(default=0, init=False)

    @property
    def input_enabled(self) -> bool:
        return self.coordinator.input_enabled

    def start(self) -> bool:
        started = self.coordinator.start()
        if started:
            self.scheduler.reset()
        return started

    def update(self, dt: float) -> int:
        """Advance the animation by however many ticks ``dt`` covers."""

        if not self.coordinator.is_running:
            return 0
        return self.scheduler.advance(dt, self.coordinator.tick)

    def snapshot(self) -> AnimationSnapshot:
        return self.coordinator.snapshot()

    def load_figure(self, path: str) -> bool:
        """Replace the figure with the model at ``path``.

        Returns ``False`` and changes nothing while the animation runs. A
        :class:`ModelLoadError` propagates with the current figure kept.
        """

        if not self.input_enabled:
            logger.info("Ignoring model reload while the animation runs")
            return False
        path = path.strip()
        self.figure_soup = load_triangle_soup(path)
        self.model_name = path
        self.figure_revision += 1
        return True

    def apply_scale_text(self, text: str) -> float:
        """Commit a new figure scale from user text; unchanged on failure."""

        value = parse_scale_factor(text)
        self.coordinator.scale_factor = value
        logger.info("Figure scale factor set to %s", value)
        return value

    def apply_ambient_text(self, text: str) -> Color4:
        return self.lighting.apply_ambient_text(text)


def create_demo_scene(
    model_path: Optional[str] = None,
    *,
    constants: Optional[AnimationConstants] = None,
    tick_period: float = DEFAULT_TICK_PERIOD,
    scale_factor: Optional[float] = None,
) -> DemoScene:
    figure_soup: Optional[np.ndarray] = None
    model_name = "procedural figure"
    if model_path:
        try:
            figure_soup = load_triangle_soup(model_path)
            model_name = model_path
        except ModelLoadError as exc:
            logger.warning("%s; using the procedural figure instead", exc)

    coordinator = AnimationCoordinator(constants=constants or AnimationConstants())
    if scale_factor is not None:
        coordinator.scale_factor = scale_factor
    return DemoScene(
        coordinator=coordinator,
        scheduler=FixedStepScheduler(period=tick_period),
        figure_soup=figure_soup,
        model_name=model_name,
    )
