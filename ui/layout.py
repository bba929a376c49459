"""Layout helpers for the demo window: 3D viewport above a control strip."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import pygame


Vec2 = Tuple[float, float]
Size = Tuple[int, int]


@dataclass
class UILayout:
    """Splits the window into the scene viewport and the bottom control panel."""

    window_size: Size
    scene_ratio: float = 0.78
    field_width_ratio: float = 0.22
    padding: int = 12
    rows: int = 3

    def update(self, window_size: Size) -> None:
        self.window_size = window_size

    @property
    def scene_rect(self) -> pygame.Rect:
        width, height = self.window_size
        scene_height = int(height * self.scene_ratio)
        return pygame.Rect(0, 0, width, scene_height)

    @property
    def panel_rect(self) -> pygame.Rect:
        width, height = self.window_size
        scene_height = self.scene_rect.height
        return pygame.Rect(0, scene_height, width, height - scene_height)

    @property
    def field_size(self) -> Size:
        panel = self.panel_rect
        width = max(160, int(panel.width * self.field_width_ratio))
        height = max(24, min(36, panel.height // 3))
        return (width, height)

    def field_rect(self, row: int) -> pygame.Rect:
        """Text field ``row`` (0-based) in the left column of the panel."""

        panel = self.panel_rect
        width, height = self.field_size
        top = panel.top + self.padding + row * (height + self.padding // 2)
        return pygame.Rect(panel.left + self.padding + 150, top, width, height)

    def button_rect(self, row: int) -> pygame.Rect:
        field = self.field_rect(row)
        return pygame.Rect(field.right + self.padding, field.top, 140, field.height)

    def label_position(self, row: int) -> Vec2:
        field = self.field_rect(row)
        return (float(self.panel_rect.left + self.padding), float(field.top + 6))

    @property
    def status_position(self) -> Vec2:
        field = self.field_rect(self.rows)
        return (float(self.panel_rect.left + self.padding), float(field.top + 4))

    def is_in_panel(self, point: Vec2) -> bool:
        return self.panel_rect.collidepoint(point)
