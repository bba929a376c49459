"""Lighting normal synthesis for raw triangle-soup vertex buffers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

import numpy as np

Vec3 = Tuple[float, float, float]
VertexBuffer = Union[Sequence[float], np.ndarray]

FLOATS_PER_VERTEX = 3
FLOATS_PER_TRIANGLE = 9

# Substituted whenever a normal would otherwise have zero length.
FALLBACK_NORMAL = np.array([0.0, 1.0, 0.0], dtype=np.float64)


def _as_buffer(vertex_buffer: VertexBuffer) -> np.ndarray:
    return np.asarray(vertex_buffer, dtype=np.float64).reshape(-1)


def _triangles(vertex_buffer: VertexBuffer) -> np.ndarray:
    """Return complete triangles as a ``(T, 3, 3)`` array, dropping any tail."""

    flat = _as_buffer(vertex_buffer)
    usable = (flat.size // FLOATS_PER_TRIANGLE) * FLOATS_PER_TRIANGLE
    return flat[:usable].reshape(-1, 3, 3)


def _vertices(vertex_buffer: VertexBuffer) -> np.ndarray:
    flat = _as_buffer(vertex_buffer)
    usable = (flat.size // FLOATS_PER_VERTEX) * FLOATS_PER_VERTEX
    return flat[:usable].reshape(-1, 3)


def _normalize_rows(vectors: np.ndarray) -> np.ndarray:
    lengths = np.linalg.norm(vectors, axis=1)
    degenerate = ~(lengths > 0.0)
    safe = np.where(degenerate, 1.0, lengths)
    normalized = vectors / safe[:, np.newaxis]
    normalized[degenerate] = FALLBACK_NORMAL
    return normalized


def compute_face_normal(p1: Sequence[float], p2: Sequence[float], p3: Sequence[float]) -> np.ndarray:
    """Unit normal of the plane through three counter-clockwise points.

    The normal is ``(p1 - p2) x (p2 - p3)``. Collinear or coincident points give
    a zero cross product; those return :data:`FALLBACK_NORMAL` instead.
    """

    a = np.asarray(p1, dtype=np.float64)
    b = np.asarray(p2, dtype=np.float64)
    c = np.asarray(p3, dtype=np.float64)
    normal = np.cross(a - b, b - c)
    return _normalize_rows(normal[np.newaxis, :])[0]


def compute_face_normals(vertex_buffer: VertexBuffer) -> np.ndarray:
    """One unit normal per complete triangle, in buffer order."""

    triangles = _triangles(vertex_buffer)
    if triangles.shape[0] == 0:
        return np.zeros((0, 3), dtype=np.float64)
    p1 = triangles[:, 0, :]
    p2 = triangles[:, 1, :]
    p3 = triangles[:, 2, :]
    return _normalize_rows(np.cross(p1 - p2, p2 - p3))


def compute_vertex_normal(
    vertex: Sequence[float],
    vertex_buffer: VertexBuffer,
    face_normals: np.ndarray,
) -> np.ndarray:
    """Average the normals of every triangle touching ``vertex`` exactly.

    A triangle contributes once even if several of its corners coincide with
    ``vertex``. Positions are compared with exact float equality.
    """

    triangles = _triangles(vertex_buffer)
    face_normals = np.asarray(face_normals, dtype=np.float64).reshape(-1, 3)
    query = np.asarray(vertex, dtype=np.float64)

    touching = np.all(triangles == query, axis=2).any(axis=1)
    count = int(np.count_nonzero(touching))
    if count == 0:
        return FALLBACK_NORMAL.copy()
    average = face_normals[: triangles.shape[0]][touching].sum(axis=0) / count
    return _normalize_rows(average[np.newaxis, :])[0]


@dataclass(frozen=True)
class VertexAdjacency:
    """Maps each vertex of a soup onto the triangles sharing its position.

    ``position_ids[i]`` identifies the distinct position of vertex ``i``;
    ``triangles_by_position[k]`` lists the triangles with a corner at position
    ``k``, each triangle at most once.
    """

    position_ids: np.ndarray
    triangles_by_position: Tuple[Tuple[int, ...], ...]

    @property
    def vertex_count(self) -> int:
        return int(self.position_ids.shape[0])

    @property
    def position_count(self) -> int:
        return len(self.triangles_by_position)

    def incident_triangles(self, vertex_index: int) -> Tuple[int, ...]:
        return self.triangles_by_position[int(self.position_ids[vertex_index])]


def build_vertex_adjacency(vertex_buffer: VertexBuffer) -> VertexAdjacency:
    """Group vertices by exact position and record incident triangles once."""

    vertices = _vertices(vertex_buffer)
    if vertices.shape[0] == 0:
        return VertexAdjacency(np.zeros(0, dtype=np.int64), ())

    # Fold -0.0 onto 0.0 so grouping agrees with float equality.
    keyed = vertices + 0.0
    _, position_ids = np.unique(keyed, axis=0, return_inverse=True)
    position_ids = np.asarray(position_ids, dtype=np.int64).reshape(-1)
    position_count = int(position_ids.max()) + 1

    incident: List[List[int]] = [[] for _ in range(position_count)]
    triangle_count = vertices.shape[0] // 3
    for triangle in range(triangle_count):
        corners = position_ids[triangle * 3 : triangle * 3 + 3]
        for position in dict.fromkeys(corners.tolist()):
            incident[position].append(triangle)

    return VertexAdjacency(
        position_ids=position_ids,
        triangles_by_position=tuple(tuple(faces) for faces in incident),
    )


def compute_vertex_normals(vertex_buffer: VertexBuffer) -> np.ndarray:
    """One smoothed normal per vertex, in buffer order (not deduplicated).

    Vertices sharing a position share the same value, because the average is
    computed once per distinct position from a one-time adjacency map.

    Degenerate triangles take part in the average with their stored
    :data:`FALLBACK_NORMAL`, so a vertex next to a zero-area sliver leans
    toward +y. This keeps every face normal unit length; callers that want
    slivers ignored should drop them from the soup first.
    """

    face_normals = compute_face_normals(vertex_buffer)
    adjacency = build_vertex_adjacency(vertex_buffer)
    if adjacency.vertex_count == 0:
        return np.zeros((0, 3), dtype=np.float64)

    averages = np.zeros((adjacency.position_count, 3), dtype=np.float64)
    for position, faces in enumerate(adjacency.triangles_by_position):
        if faces:
            averages[position] = face_normals[list(faces)].sum(axis=0) / len(faces)

    per_position = _normalize_rows(averages)
    return per_position[adjacency.position_ids]
