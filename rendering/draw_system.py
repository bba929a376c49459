"""Lit solid renderer for the escalator scene."""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

import numpy as np
import pygame
from OpenGL import GL as gl

from simulation.animation import AnimationSnapshot
from simulation.camera import OrbitCamera
from simulation.scene import DemoScene
from ui.layout import UILayout
from .opengl_context import apply_lighting, position_lights
from .primitives import (
    SolidMesh,
    create_box_mesh,
    create_cylinder_mesh,
    create_figure_mesh,
    create_floor_mesh,
)
from .textures import TextureKind, TextureSet, bind_texture, unbind_texture

logger = logging.getLogger(__name__)

Color = Tuple[float, float, float]

# Escalator step footprint (x: width, y: riser, z: tread).
STEP_HALF_EXTENTS = (2.15, 0.25, 0.5)
# Belt coordinates map onto the scene with a 2:1 run-to-rise slope.
STEP_RUN_SCALE = 1.0
STEP_RISE_SCALE = 0.5
RAIL_RADIUS = 0.25
RAIL_OFFSET_X = 2.6
POST_HALF_EXTENTS = (0.125, 0.5, 0.125)
# Scene units per unit of figure scale; the figure mesh is one unit tall.
FIGURE_UNIT = 0.6


class SceneRenderer:
    """Draws the floor, escalator, rails and figure from a scene snapshot."""

    def __init__(self, scene: DemoScene, textures: Optional[TextureSet] = None) -> None:
        pygame.font.init()
        constants = scene.coordinator.constants
        self.textures = textures or TextureSet()
        self.figure_mesh = self._build_figure_mesh(scene)
        self._figure_revision = scene.figure_revision
        self.step_mesh = create_box_mesh(STEP_HALF_EXTENTS)
        self.floor_mesh = create_floor_mesh()
        self.post_mesh = create_box_mesh(POST_HALF_EXTENTS)

        start_x, start_y = constants.segment_start
        self._belt_origin: Tuple[float, float] = (start_x, start_y)
        self._belt_base_z = constants.boarding_threshold
        self._reference_scale = constants.reference_scale
        rise = (constants.wrap_threshold - start_x) * STEP_RISE_SCALE
        run = (constants.wrap_threshold - start_x) * STEP_RUN_SCALE
        self._rail_angle = math.degrees(math.atan2(rise, run))
        self.rail_mesh = create_cylinder_mesh(radius=RAIL_RADIUS, length=math.hypot(rise, run))
        self._rail_top = (rise, run)

        self.floor_color: Color = (0.75, 0.72, 0.68)
        self.step_color: Color = (0.55, 0.57, 0.6)
        self.rail_color: Color = (0.36, 0.36, 0.36)
        self.figure_color: Color = (0.65, 0.65, 0.65)
        self._hud_font = pygame.font.SysFont("Consolas", 16)
        self._hud_color: Tuple[int, int, int] = (90, 140, 255)

    @staticmethod
    def _build_figure_mesh(scene: DemoScene) -> SolidMesh:
        if scene.figure_soup is not None:
            return SolidMesh.from_soup(scene.figure_soup, smooth=True)
        return create_figure_mesh()

    def refresh_figure(self, scene: DemoScene) -> bool:
        """Rebuild the figure mesh if the scene swapped its model."""

        if scene.figure_revision == self._figure_revision:
            return False
        self.figure_mesh = self._build_figure_mesh(scene)
        self._figure_revision = scene.figure_revision
        logger.info("Figure mesh rebuilt from %s (%d triangles)", scene.model_name, self.figure_mesh.triangle_count)
        return True

    def draw_scene(self, scene: DemoScene, camera: OrbitCamera, layout: UILayout) -> None:
        self.refresh_figure(scene)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT | gl.GL_DEPTH_BUFFER_BIT)
        scene_rect = layout.scene_rect
        panel_height = layout.panel_rect.height
        gl.glViewport(scene_rect.left, panel_height, scene_rect.width, scene_rect.height)
        gl.glEnable(gl.GL_LIGHTING)
        gl.glEnable(gl.GL_DEPTH_TEST)
        self._apply_camera(camera)
        apply_lighting(scene.lighting)
        position_lights(scene.lighting)

        snapshot = scene.snapshot()
        self._draw_mesh(self.floor_mesh, self.floor_color, TextureKind.CERAMIC)
        self._draw_escalator(snapshot)
        self._draw_figure(snapshot)

        gl.glDisable(gl.GL_LIGHTING)
        self._draw_hud(scene, snapshot, camera)

    def step_position(self, segment: Tuple[float, float]) -> Tuple[float, float, float]:
        """Scene position of a belt segment given in belt coordinates."""

        sx, sy = segment
        origin_x, origin_y = self._belt_origin
        z = self._belt_base_z + (sx - origin_x) * STEP_RUN_SCALE
        y = STEP_HALF_EXTENTS[1] + (sy - origin_y) * STEP_RISE_SCALE
        return (0.0, y, z)

    def _apply_camera(self, camera: OrbitCamera) -> None:
        projection = camera.projection_matrix()
        view = camera.view_matrix()
        gl.glMatrixMode(gl.GL_PROJECTION)
        gl.glLoadMatrixf(np.transpose(projection).flatten())
        gl.glMatrixMode(gl.GL_MODELVIEW)
        gl.glLoadMatrixf(np.transpose(view).flatten())

    def _draw_mesh(self, mesh: SolidMesh, color: Color, texture: Optional[TextureKind] = None) -> None:
        texture_id = self.textures.get(texture) if texture is not None else None
        if texture_id is not None:
            bind_texture(texture, texture_id)
        gl.glColor3f(*color)
        gl.glEnableClientState(gl.GL_VERTEX_ARRAY)
        gl.glEnableClientState(gl.GL_NORMAL_ARRAY)
        gl.glVertexPointer(3, gl.GL_FLOAT, 0, mesh.vertex_buffer)
        gl.glNormalPointer(gl.GL_FLOAT, 0, mesh.normals)
        gl.glDrawArrays(gl.GL_TRIANGLES, 0, mesh.vertex_count)
        gl.glDisableClientState(gl.GL_NORMAL_ARRAY)
        gl.glDisableClientState(gl.GL_VERTEX_ARRAY)
        if texture_id is not None:
            unbind_texture()

    def _draw_escalator(self, snapshot: AnimationSnapshot) -> None:
        for segment in snapshot.segments:
            x, y, z = self.step_position(segment)
            gl.glPushMatrix()
            gl.glTranslatef(x, y, z)
            self._draw_mesh(self.step_mesh, self.step_color, TextureKind.METAL)
            gl.glPopMatrix()

        rise, run = self._rail_top
        base_z = self._belt_base_z
        for side in (-1.0, 1.0):
            rail_x = side * RAIL_OFFSET_X
            gl.glPushMatrix()
            gl.glTranslatef(rail_x, 1.5, base_z)
            # Cylinder is built along +y; tip it forward onto the belt slope.
            gl.glRotatef(90.0 - self._rail_angle, 1.0, 0.0, 0.0)
            self._draw_mesh(self.rail_mesh, self.rail_color, TextureKind.METAL)
            gl.glPopMatrix()

            for post_z, post_height in ((base_z, 1.5), (base_z + run, rise + 1.5)):
                gl.glPushMatrix()
                gl.glTranslatef(rail_x, post_height * 0.5, post_z)
                gl.glScalef(1.0, post_height, 1.0)
                self._draw_mesh(self.post_mesh, self.rail_color, TextureKind.METAL)
                gl.glPopMatrix()

    def _draw_figure(self, snapshot: AnimationSnapshot) -> None:
        x, y, z = snapshot.person_position
        reference = self._reference_scale
        gl.glPushMatrix()
        gl.glTranslatef(x, y, z)
        # Width follows the user scale factor, height and depth stay fixed.
        gl.glScalef(
            snapshot.scale_factor * FIGURE_UNIT,
            reference * FIGURE_UNIT,
            reference * FIGURE_UNIT,
        )
        self._draw_mesh(self.figure_mesh, self.figure_color)
        gl.glPopMatrix()

    def _hud_lines(self, scene: DemoScene, snapshot: AnimationSnapshot) -> List[str]:
        x, y, z = snapshot.person_position
        state = "running" if snapshot.is_running else "idle"
        lines = [
            f"Animation: {state}  tick {snapshot.ticks_elapsed}",
            f"Figure: {scene.model_name}  scale {snapshot.scale_factor:g}",
            f"Position: ({x:.2f}, {y:.2f}, {z:.2f})  on belt: {'yes' if snapshot.boarded else 'no'}",
        ]
        if scene.input_enabled:
            lines.append("V start  E/D tilt  S/F spin  +/- zoom  F2 model  F4 quit")
        else:
            lines.append("Controls locked while the animation runs")
        return lines

    def _draw_hud(self, scene: DemoScene, snapshot: AnimationSnapshot, camera: OrbitCamera) -> None:
        width, height = camera.viewport_size
        if width <= 0 or height <= 0:
            return
        gl.glMatrixMode(gl.GL_PROJECTION)
        gl.glPushMatrix()
        gl.glLoadIdentity()
        gl.glOrtho(0, width, height, 0, -1, 1)
        gl.glMatrixMode(gl.GL_MODELVIEW)
        gl.glPushMatrix()
        gl.glLoadIdentity()
        gl.glDisable(gl.GL_DEPTH_TEST)
        gl.glEnable(gl.GL_BLEND)
        gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)

        lines = self._hud_lines(scene, snapshot)
        y = height - 12 - 20 * (len(lines) - 1)
        for line in lines:
            self._draw_overlay_text(12.0, float(y), line, self._hud_color)
            y += 20

        gl.glDisable(gl.GL_BLEND)
        gl.glEnable(gl.GL_DEPTH_TEST)
        gl.glPopMatrix()
        gl.glMatrixMode(gl.GL_PROJECTION)
        gl.glPopMatrix()
        gl.glMatrixMode(gl.GL_MODELVIEW)

    def _draw_overlay_text(self, x: float, y: float, text: str, color: Tuple[int, int, int]) -> None:
        surface = self._hud_font.render(text, True, color)
        data = pygame.image.tostring(surface, "RGBA", True)
        gl.glRasterPos2f(x, y)
        gl.glDrawPixels(
            surface.get_width(),
            surface.get_height(),
            gl.GL_RGBA,
            gl.GL_UNSIGNED_BYTE,
            data,
        )
