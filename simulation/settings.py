"""User-tunable scene settings and the text parsing that guards them."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple

logger = logging.getLogger(__name__)

Color4 = Tuple[float, float, float, float]

AMBIENT_COMPONENTS = 4
AMBIENT_FORMAT_MESSAGE = "Format of the text must be: x,y,z,w"
SCALE_FORMAT_MESSAGE = "Scale factor must be a positive number!"


class SettingsError(ValueError):
    """Base class for rejected configuration input."""


class SettingsParseError(SettingsError):
    """Text could not be read as the expected numeric shape."""


class InvalidSettingError(SettingsError):
    """A value parsed fine but is outside the accepted range."""


def parse_scale_factor(text: str) -> float:
    """Parse a scale factor such as ``"8"`` or ``" 6.5 "``.

    Raises :class:`SettingsParseError` for non-numeric text and
    :class:`InvalidSettingError` for zero, negative or non-finite values.
    """

    try:
        value = float(text.strip())
    except (AttributeError, ValueError) as exc:
        raise SettingsParseError(SCALE_FORMAT_MESSAGE) from exc
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidSettingError(SCALE_FORMAT_MESSAGE)
    return value


def parse_ambient_light(text: str) -> Color4:
    """Parse four comma-separated floats, e.g. ``"0.2, 0.2, 0.2, 1"``."""

    try:
        parts = text.split(",")
    except AttributeError as exc:
        raise SettingsParseError(AMBIENT_FORMAT_MESSAGE) from exc
    if len(parts) != AMBIENT_COMPONENTS:
        raise SettingsParseError(AMBIENT_FORMAT_MESSAGE)
    try:
        values = tuple(float(part.strip()) for part in parts)
    except ValueError as exc:
        raise SettingsParseError(AMBIENT_FORMAT_MESSAGE) from exc
    if not all(math.isfinite(value) for value in values):
        raise InvalidSettingError(AMBIENT_FORMAT_MESSAGE)
    return values  # type: ignore[return-value]


def format_ambient_light(ambient: Color4) -> str:
    return ",".join(f"{component:g}" for component in ambient)


@dataclass
class LightingSettings:
    """Light parameters forwarded to the fixed-function pipeline."""

    ambient: Color4 = (1.0, 1.0, 1.0, 1.0)
    diffuse: Color4 = (1.0, 1.0, 1.0, 1.0)
    position: Color4 = (5.0, 0.0, 10000.0, 1.0)
    spot_position: Color4 = (15.0, 25.0, 0.0, 1.0)
    spot_ambient: Color4 = (0.0, 0.0, 1.0, 1.0)
    spot_diffuse: Color4 = (0.0, 0.0, 1.0, 0.5)
    spot_direction: Tuple[float, float, float] = (0.0, -1.0, 0.0)
    spot_cutoff: float = 35.0

    def apply_ambient_text(self, text: str) -> Color4:
        """Replace the ambient term from user text; unchanged on failure."""

        ambient = parse_ambient_light(text)
        self.ambient = ambient
        logger.info("Ambient light set to %s", format_ambient_light(ambient))
        return ambient
