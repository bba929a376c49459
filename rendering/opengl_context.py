"""OpenGL context helpers for the lit escalator scene."""
from __future__ import annotations

from typing import Tuple

from OpenGL import GL as gl

from simulation.settings import LightingSettings


BACKGROUND_COLOR = (0.05, 0.05, 0.08, 1.0)


def initialize_gl(surface_size: Tuple[int, int], lighting: LightingSettings) -> None:
    """Configure depth testing, culling and the two scene lights."""
    width, height = surface_size
    gl.glViewport(0, 0, width, height)
    gl.glClearColor(*BACKGROUND_COLOR)

    gl.glEnable(gl.GL_DEPTH_TEST)
    gl.glEnable(gl.GL_CULL_FACE)
    gl.glEnable(gl.GL_COLOR_MATERIAL)
    gl.glColorMaterial(gl.GL_FRONT, gl.GL_AMBIENT_AND_DIFFUSE)
    gl.glShadeModel(gl.GL_SMOOTH)

    gl.glEnable(gl.GL_LIGHTING)
    # Model transforms scale the figure non-uniformly.
    gl.glEnable(gl.GL_NORMALIZE)
    gl.glEnable(gl.GL_LIGHT0)
    gl.glEnable(gl.GL_LIGHT1)
    apply_lighting(lighting)


def apply_lighting(lighting: LightingSettings) -> None:
    """Push the current light parameters; positions are set per frame."""
    gl.glLightfv(gl.GL_LIGHT0, gl.GL_AMBIENT, lighting.ambient)
    gl.glLightfv(gl.GL_LIGHT0, gl.GL_DIFFUSE, lighting.diffuse)
    gl.glLightf(gl.GL_LIGHT0, gl.GL_SPOT_CUTOFF, 180.0)

    gl.glLightfv(gl.GL_LIGHT1, gl.GL_AMBIENT, lighting.spot_ambient)
    gl.glLightfv(gl.GL_LIGHT1, gl.GL_DIFFUSE, lighting.spot_diffuse)
    gl.glLightfv(gl.GL_LIGHT1, gl.GL_SPOT_DIRECTION, lighting.spot_direction)
    gl.glLightf(gl.GL_LIGHT1, gl.GL_SPOT_CUTOFF, lighting.spot_cutoff)


def position_lights(lighting: LightingSettings) -> None:
    """Place both lights in world space; call after the view matrix is loaded."""
    gl.glLightfv(gl.GL_LIGHT0, gl.GL_POSITION, lighting.position)
    gl.glLightfv(gl.GL_LIGHT1, gl.GL_POSITION, lighting.spot_position)
    gl.glLightfv(gl.GL_LIGHT1, gl.GL_SPOT_DIRECTION, lighting.spot_direction)


def resize_viewport(surface_size: Tuple[int, int], lighting: LightingSettings) -> None:
    """Update viewport when the window changes size."""
    initialize_gl(surface_size, lighting)
