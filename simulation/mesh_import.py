"""Loads external figure models into flat triangle-soup vertex buffers."""
from __future__ import annotations

import logging
import os

import numpy as np
import trimesh

logger = logging.getLogger(__name__)


class ModelLoadError(RuntimeError):
    """The importer could not produce triangle geometry from a file."""


def soup_from_trimesh(mesh: trimesh.Trimesh) -> np.ndarray:
    """Expand an indexed mesh into one float32 vertex triple per corner."""

    return np.asarray(mesh.triangles, dtype=np.float32).reshape(-1)


def fit_to_unit_height(vertex_buffer: np.ndarray) -> np.ndarray:
    """Scale a soup to height 1, standing on ``y = 0`` and centered in x/z."""

    vertices = np.asarray(vertex_buffer, dtype=np.float32).reshape(-1, 3)
    if vertices.shape[0] == 0:
        return vertices.reshape(-1)
    lower = vertices.min(axis=0)
    upper = vertices.max(axis=0)
    height = float(upper[1] - lower[1])
    scale = 1.0 / height if height > 0.0 else 1.0
    center = (lower + upper) * 0.5
    offset = np.array([center[0], lower[1], center[2]], dtype=np.float32)
    return ((vertices - offset) * scale).astype(np.float32).reshape(-1)


def load_triangle_soup(path: str) -> np.ndarray:
    """Load ``path`` with trimesh and return a unit-height triangle soup."""

    if not os.path.isfile(path):
        raise ModelLoadError(f"Model file not found: {path}")
    try:
        loaded = trimesh.load(path, force="mesh")
    except Exception as exc:
        raise ModelLoadError(f"Could not import {path}: {exc}") from exc
    if not isinstance(loaded, trimesh.Trimesh) or len(loaded.faces) == 0:
        raise ModelLoadError(f"Model has no triangle geometry: {path}")

    soup = fit_to_unit_height(soup_from_trimesh(loaded))
    logger.info("Loaded %s (%d triangles)", path, len(loaded.faces))
    return soup
