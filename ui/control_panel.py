"""Bottom control strip: ambient light and figure scale text entry."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import pygame
from OpenGL import GL as gl

from simulation.mesh_import import ModelLoadError
from simulation.scene import DemoScene
from simulation.settings import SettingsError, format_ambient_light
from .layout import UILayout

logger = logging.getLogger(__name__)

Vec2 = Tuple[float, float]

AMBIENT_FIELD, SCALE_FIELD, MODEL_FIELD = 0, 1, 2


@dataclass
class TextField:
    label: str
    button_label: str
    text: str
    apply: Callable[[str], object]
    max_length: int = 48

    def insert(self, characters: str) -> None:
        room = self.max_length - len(self.text)
        if room > 0:
            self.text += characters[:room]

    def backspace(self) -> None:
        self.text = self.text[:-1]


class ControlPanel:
    """Text fields that commit settings to the scene when submitted.

    Rejected input leaves the scene untouched and shows the parse error in
    the status line. The whole panel ignores input while the animation runs.
    """

    def __init__(self, scene: DemoScene) -> None:
        self._scene = scene
        self.fields: List[TextField] = [
            TextField(
                label="Ambient",
                button_label="Set ambient",
                text=format_ambient_light(scene.lighting.ambient),
                apply=scene.apply_ambient_text,
            ),
            TextField(
                label="Scale",
                button_label="Scale person",
                text=f"{scene.coordinator.scale_factor:g}",
                apply=scene.apply_scale_text,
            ),
            TextField(
                label="Model",
                button_label="Load model",
                text="" if scene.figure_soup is None else scene.model_name,
                apply=scene.load_figure,
                max_length=260,
            ),
        ]
        self.focus: Optional[int] = None
        self.status = "Press V to start the escalator."
        self.status_is_error = False
        self._font: Optional[pygame.font.Font] = None
        self._bg_color = (0.06, 0.07, 0.1, 1.0)
        self._border_color = (0.25, 0.3, 0.42, 1.0)
        self._field_color = (0.12, 0.14, 0.2, 1.0)
        self._focus_color = (0.45, 0.62, 1.0, 1.0)
        self._text_color: Tuple[int, int, int] = (220, 226, 240)
        self._disabled_text_color: Tuple[int, int, int] = (110, 116, 130)
        self._error_color: Tuple[int, int, int] = (255, 110, 110)

    @property
    def enabled(self) -> bool:
        return self._scene.input_enabled

    @property
    def has_focus(self) -> bool:
        return self.enabled and self.focus is not None

    def handle_mouse_click(self, layout: UILayout, pos: Vec2) -> bool:
        """Focus a field or press a button; returns ``True`` if consumed."""

        if not layout.is_in_panel(pos):
            self.focus = None
            return False
        if not self.enabled:
            return True
        for index in range(len(self.fields)):
            if layout.field_rect(index).collidepoint(pos):
                self.focus = index
                return True
            if layout.button_rect(index).collidepoint(pos):
                self.submit(index)
                return True
        self.focus = None
        return True

    def handle_key(self, event: pygame.event.Event) -> bool:
        """Route keyboard input to the focused field; returns ``True`` if consumed."""

        if not self.has_focus:
            return False
        field = self.fields[self.focus]
        if event.type == pygame.TEXTINPUT:
            field.insert(event.text)
            return True
        if event.type != pygame.KEYDOWN:
            return False
        if event.key == pygame.K_BACKSPACE:
            field.backspace()
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self.submit(self.focus)
        elif event.key == pygame.K_TAB:
            self.focus = (self.focus + 1) % len(self.fields)
        elif event.key == pygame.K_ESCAPE:
            self.focus = None
        return True

    def request_model_path(self) -> bool:
        """Focus the model field so the next typed path replaces the figure."""

        if not self.enabled:
            return False
        self.focus = MODEL_FIELD
        self.status = "Type a model path and press Enter."
        self.status_is_error = False
        return True

    def submit(self, index: int) -> bool:
        """Apply field ``index`` to the scene; returns ``True`` on success."""

        if not self.enabled:
            return False
        field = self.fields[index]
        try:
            field.apply(field.text)
        except SettingsError as exc:
            logger.warning("Rejected %s input %r: %s", field.label.lower(), field.text, exc)
            self.status = f"Parsing error: {exc}"
            self.status_is_error = True
            return False
        except ModelLoadError as exc:
            logger.warning("%s; keeping %s", exc, self._scene.model_name)
            self.status = f"Load error: {exc}"
            self.status_is_error = True
            return False
        self.status = f"{field.label} updated."
        self.status_is_error = False
        return True

    def draw(self, layout: UILayout) -> None:
        if self._font is None:
            pygame.font.init()
            self._font = pygame.font.SysFont("Consolas", 18)
        width, height = layout.window_size
        gl.glViewport(0, 0, width, height)
        gl.glMatrixMode(gl.GL_PROJECTION)
        gl.glLoadIdentity()
        gl.glOrtho(0, width, height, 0, -1, 1)
        gl.glMatrixMode(gl.GL_MODELVIEW)
        gl.glLoadIdentity()
        gl.glDisable(gl.GL_DEPTH_TEST)
        gl.glDisable(gl.GL_LIGHTING)
        gl.glEnable(gl.GL_BLEND)
        gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)

        panel = layout.panel_rect
        self._draw_rect(panel, self._bg_color)
        self._draw_rect_outline(panel, self._border_color)

        text_color = self._text_color if self.enabled else self._disabled_text_color
        for index, field in enumerate(self.fields):
            label_x, label_y = layout.label_position(index)
            self._draw_text(label_x, label_y, field.label, text_color)

            field_rect = layout.field_rect(index)
            self._draw_rect(field_rect, self._field_color)
            focused = self.has_focus and self.focus == index
            self._draw_rect_outline(field_rect, self._focus_color if focused else self._border_color)
            caret = "_" if focused else ""
            self._draw_text(field_rect.left + 6, field_rect.top + 6, field.text + caret, text_color)

            button_rect = layout.button_rect(index)
            self._draw_rect(button_rect, self._field_color)
            self._draw_rect_outline(button_rect, self._border_color)
            self._draw_text(button_rect.left + 8, button_rect.top + 6, field.button_label, text_color)

        status_x, status_y = layout.status_position
        status_color = self._error_color if self.status_is_error else text_color
        self._draw_text(status_x, status_y, self.status, status_color)

        gl.glDisable(gl.GL_BLEND)
        gl.glEnable(gl.GL_DEPTH_TEST)

    def _draw_rect(self, rect: pygame.Rect, color: Tuple[float, float, float, float]) -> None:
        gl.glColor4f(*color)
        gl.glBegin(gl.GL_QUADS)
        gl.glVertex2f(rect.left, rect.top)
        gl.glVertex2f(rect.right, rect.top)
        gl.glVertex2f(rect.right, rect.bottom)
        gl.glVertex2f(rect.left, rect.bottom)
        gl.glEnd()

    def _draw_rect_outline(
        self, rect: pygame.Rect, color: Tuple[float, float, float, float]
    ) -> None:
        gl.glColor4f(*color)
        gl.glBegin(gl.GL_LINE_LOOP)
        gl.glVertex2f(rect.left, rect.top)
        gl.glVertex2f(rect.right, rect.top)
        gl.glVertex2f(rect.right, rect.bottom)
        gl.glVertex2f(rect.left, rect.bottom)
        gl.glEnd()

    def _draw_text(self, x: float, y: float, text: str, color: Tuple[int, int, int]) -> None:
        surface = self._font.render(text, True, color)
        data = pygame.image.tostring(surface, "RGBA", True)
        gl.glRasterPos2f(x, y + surface.get_height())
        gl.glDrawPixels(
            surface.get_width(),
            surface.get_height(),
            gl.GL_RGBA,
            gl.GL_UNSIGNED_BYTE,
            data,
        )
