"""Procedural solid meshes for the escalator scene.

Every builder emits a flat triangle soup (nine floats per triangle) wound
counter-clockwise when seen from outside, so synthesized normals face out.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from simulation.normals import compute_face_normals, compute_vertex_normals

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class SolidMesh:
    """Triangle soup plus one lighting normal per vertex, both float32."""

    vertex_buffer: np.ndarray
    normals: np.ndarray

    @classmethod
    def from_soup(cls, vertex_buffer: Sequence[float], smooth: bool = False) -> "SolidMesh":
        """Attach synthesized normals to ``vertex_buffer``.

        ``smooth`` averages face normals at shared positions; otherwise every
        corner takes its own triangle's normal (flat shading).
        """

        soup = np.asarray(vertex_buffer, dtype=np.float32).reshape(-1)
        soup = soup[: (soup.size // 9) * 9]
        if smooth:
            normals = compute_vertex_normals(soup)
        else:
            normals = np.repeat(compute_face_normals(soup), 3, axis=0)
        soup.setflags(write=False)
        normals = np.ascontiguousarray(normals, dtype=np.float32).reshape(-1)
        normals.setflags(write=False)
        return cls(soup, normals)

    @property
    def triangle_count(self) -> int:
        return self.vertex_buffer.size // 9

    @property
    def vertex_count(self) -> int:
        return self.vertex_buffer.size // 3


def _quad(soup: List[float], a: Vec3, b: Vec3, c: Vec3, d: Vec3) -> None:
    soup.extend((*a, *b, *c, *a, *c, *d))


def box_soup(
    half_extents: Vec3,
    center: Vec3 = (0.0, 0.0, 0.0),
) -> List[float]:
    hx, hy, hz = half_extents
    cx, cy, cz = center
    corners = [
        (cx - hx, cy - hy, cz - hz),
        (cx + hx, cy - hy, cz - hz),
        (cx + hx, cy + hy, cz - hz),
        (cx - hx, cy + hy, cz - hz),
        (cx - hx, cy - hy, cz + hz),
        (cx + hx, cy - hy, cz + hz),
        (cx + hx, cy + hy, cz + hz),
        (cx - hx, cy + hy, cz + hz),
    ]
    faces = (
        (4, 5, 6, 7),  # +z
        (1, 0, 3, 2),  # -z
        (5, 1, 2, 6),  # +x
        (0, 4, 7, 3),  # -x
        (7, 6, 2, 3),  # +y
        (0, 1, 5, 4),  # -y
    )
    soup: List[float] = []
    for a, b, c, d in faces:
        _quad(soup, corners[a], corners[b], corners[c], corners[d])
    return soup


def create_box_mesh(half_extents: Vec3 = (0.5, 0.5, 0.5)) -> SolidMesh:
    return SolidMesh.from_soup(box_soup(half_extents))


def create_floor_mesh(half_size: float = 30.0) -> SolidMesh:
    """Square ground plane at ``y = 0`` facing up."""

    s = half_size
    soup: List[float] = []
    _quad(soup, (s, 0.0, s), (s, 0.0, -s), (-s, 0.0, -s), (-s, 0.0, s))
    return SolidMesh.from_soup(soup)


def create_cylinder_mesh(radius: float = 0.25, length: float = 10.0, segments: int = 16) -> SolidMesh:
    """Capped cylinder from ``y = 0`` to ``y = length``, smooth sided."""

    if segments < 3:
        raise ValueError("A cylinder needs at least 3 segments")
    ring: List[Tuple[float, float]] = []
    for i in range(segments):
        angle = (2 * math.pi * i) / segments
        ring.append((math.cos(angle) * radius, math.sin(angle) * radius))

    side: List[float] = []
    caps: List[float] = []
    for i in range(segments):
        x0, z0 = ring[i]
        x1, z1 = ring[(i + 1) % segments]
        _quad(side, (x1, 0.0, z1), (x0, 0.0, z0), (x0, length, z0), (x1, length, z1))
        caps.extend((0.0, length, 0.0, x1, length, z1, x0, length, z0))
        caps.extend((0.0, 0.0, 0.0, x0, 0.0, z0, x1, 0.0, z1))

    side_mesh = SolidMesh.from_soup(side, smooth=True)
    cap_mesh = SolidMesh.from_soup(caps)
    return merge_meshes((side_mesh, cap_mesh))


def merge_meshes(meshes: Sequence[SolidMesh]) -> SolidMesh:
    """Concatenate meshes that already carry their own normals."""

    soup = np.concatenate([mesh.vertex_buffer for mesh in meshes]).astype(np.float32)
    normals = np.concatenate([mesh.normals for mesh in meshes]).astype(np.float32)
    soup.setflags(write=False)
    normals.setflags(write=False)
    return SolidMesh(soup, normals)


def figure_soup() -> List[float]:
    """Blocky standing figure, one unit tall, feet on ``y = 0``, facing +z."""

    parts = (
        # (half extents, center)
        ((0.045, 0.22, 0.05), (-0.06, 0.22, 0.0)),  # left leg
        ((0.045, 0.22, 0.05), (0.06, 0.22, 0.0)),  # right leg
        ((0.12, 0.17, 0.07), (0.0, 0.61, 0.0)),  # torso
        ((0.035, 0.16, 0.04), (-0.16, 0.6, 0.0)),  # left arm
        ((0.035, 0.16, 0.04), (0.16, 0.6, 0.0)),  # right arm
        ((0.025, 0.02, 0.025), (0.0, 0.8, 0.0)),  # neck
        ((0.07, 0.08, 0.08), (0.0, 0.9, 0.0)),  # head
    )
    soup: List[float] = []
    for half_extents, center in parts:
        soup.extend(box_soup(half_extents, center))
    return soup


def create_figure_mesh() -> SolidMesh:
    return SolidMesh.from_soup(figure_soup(), smooth=True)
