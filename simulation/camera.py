"""Orbit camera for the escalator scene."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

Vec3 = Tuple[float, float, float]


def _normalize(vec: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(vec)
    if norm == 0:
        return vec
    return vec / norm


def _look_at_matrix(position: Vec3, target: Vec3, up: Vec3) -> np.ndarray:
    pos = np.array(position, dtype=np.float32)
    tgt = np.array(target, dtype=np.float32)
    up_vec = np.array(up, dtype=np.float32)

    forward = _normalize(tgt - pos)
    side = _normalize(np.cross(forward, up_vec))
    true_up = np.cross(side, forward)

    view = np.identity(4, dtype=np.float32)
    view[0, :3] = side
    view[1, :3] = true_up
    view[2, :3] = -forward
    view[0, 3] = -np.dot(side, pos)
    view[1, 3] = -np.dot(true_up, pos)
    view[2, 3] = np.dot(forward, pos)
    return view


def _perspective_matrix(fov_degrees: float, aspect: float, near: float, far: float) -> np.ndarray:
    perspective = np.zeros((4, 4), dtype=np.float32)
    f = 1.0 / math.tan(math.radians(fov_degrees) / 2.0)
    perspective[0, 0] = f / aspect
    perspective[1, 1] = f
    perspective[2, 2] = (far + near) / (near - far)
    perspective[2, 3] = (2 * far * near) / (near - far)
    perspective[3, 2] = -1.0
    return perspective


@dataclass
class OrbitCamera:
    """Looks at ``target`` from ``distance`` away, tilted by ``rotation_x``
    and spun around the vertical axis by ``rotation_y`` (both in degrees)."""

    viewport_size: Tuple[int, int]
    target: Vec3 = (0.0, 6.0, 2.0)
    distance: float = 45.0
    rotation_x: float = 15.0
    rotation_y: float = -60.0
    rotation_step: float = 5.0
    distance_step: float = 5.0
    min_rotation_x: float = -10.0
    max_rotation_x: float = 85.0
    min_distance: float = 5.0
    fov: float = 45.0
    near_clip: float = 0.5
    far_clip: float = 20000.0
    up: Vec3 = (0.0, 1.0, 0.0)

    def tilt(self, steps: int) -> None:
        """Rotate about the horizontal axis by ``steps`` increments, clamped."""

        desired = self.rotation_x + steps * self.rotation_step
        self.rotation_x = max(self.min_rotation_x, min(self.max_rotation_x, desired))

    def spin(self, steps: int) -> None:
        self.rotation_y = (self.rotation_y + steps * self.rotation_step) % 360.0

    def dolly(self, steps: int) -> None:
        """Move toward (negative) or away from (positive) the target."""

        desired = self.distance + steps * self.distance_step
        self.distance = max(self.min_distance, desired)

    def update_viewport(self, size: Tuple[int, int]) -> None:
        self.viewport_size = size

    @property
    def position(self) -> Vec3:
        pitch = math.radians(self.rotation_x)
        yaw = math.radians(self.rotation_y)
        horizontal = self.distance * math.cos(pitch)
        return (
            self.target[0] + horizontal * math.sin(yaw),
            self.target[1] + self.distance * math.sin(pitch),
            self.target[2] + horizontal * math.cos(yaw),
        )

    def view_matrix(self) -> np.ndarray:
        return _look_at_matrix(self.position, self.target, self.up)

    def projection_matrix(self) -> np.ndarray:
        width, height = self.viewport_size
        aspect = width / height if height > 0 else 1.0
        return _perspective_matrix(self.fov, aspect, self.near_clip, self.far_clip)
