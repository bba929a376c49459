"""Metal and ceramic surface textures for the escalator and floor."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

import pygame
from OpenGL import GL as gl

logger = logging.getLogger(__name__)

Plane = Tuple[float, float, float, float]


class TextureKind(Enum):
    METAL = "metal"
    CERAMIC = "ceramic"


# Object-linear (s, t) planes; the floor repeats its image four times across.
TEXTURE_PLANES: Dict[TextureKind, Tuple[Plane, Plane]] = {
    TextureKind.METAL: ((0.5, 0.0, 0.0, 0.0), (0.0, 0.5, 0.5, 0.0)),
    TextureKind.CERAMIC: ((1.0 / 15.0, 0.0, 0.0, 0.0), (0.0, 0.0, 1.0 / 15.0, 0.0)),
}


class TextureLoadError(RuntimeError):
    """An image file could not be read as a texture."""


@dataclass(frozen=True)
class TextureImage:
    """RGBA pixels with the bottom row first, ready for ``glTexImage2D``."""

    width: int
    height: int
    pixels: bytes


def surface_to_image(surface: pygame.Surface) -> TextureImage:
    width, height = surface.get_size()
    pixels = pygame.image.tostring(surface, "RGBA", True)
    return TextureImage(width=width, height=height, pixels=pixels)


def read_texture_image(path: str) -> TextureImage:
    if not os.path.isfile(path):
        raise TextureLoadError(f"Texture file not found: {path}")
    try:
        surface = pygame.image.load(path)
    except pygame.error as exc:
        raise TextureLoadError(f"Could not read texture {path}: {exc}") from exc
    return surface_to_image(surface)


def upload_texture(image: TextureImage) -> int:
    """Create a repeating, nearest-filtered GL texture from ``image``."""

    texture_id = int(gl.glGenTextures(1))
    gl.glBindTexture(gl.GL_TEXTURE_2D, texture_id)
    gl.glPixelStorei(gl.GL_UNPACK_ALIGNMENT, 1)
    gl.glTexImage2D(
        gl.GL_TEXTURE_2D,
        0,
        gl.GL_RGBA8,
        image.width,
        image.height,
        0,
        gl.GL_RGBA,
        gl.GL_UNSIGNED_BYTE,
        image.pixels,
    )
    gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MIN_FILTER, gl.GL_NEAREST)
    gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MAG_FILTER, gl.GL_NEAREST)
    gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_S, gl.GL_REPEAT)
    gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_T, gl.GL_REPEAT)
    gl.glBindTexture(gl.GL_TEXTURE_2D, 0)
    return texture_id


@dataclass
class TextureSet:
    """GL texture ids by kind; kinds without an image draw untextured."""

    ids: Dict[TextureKind, int] = field(default_factory=dict)

    def get(self, kind: TextureKind) -> Optional[int]:
        return self.ids.get(kind)

    def release(self) -> None:
        if self.ids:
            gl.glDeleteTextures(list(self.ids.values()))
            self.ids.clear()


def load_textures(paths: Dict[TextureKind, str]) -> TextureSet:
    """Upload every readable image in ``paths``; needs a current GL context.

    Unreadable images are logged and skipped so the scene still draws.
    """

    textures = TextureSet()
    for kind, path in paths.items():
        if not path:
            continue
        try:
            image = read_texture_image(path)
        except TextureLoadError as exc:
            logger.warning("%s; drawing %s surfaces untextured", exc, kind.value)
            continue
        textures.ids[kind] = upload_texture(image)
        logger.info("Loaded %s texture %s (%dx%d)", kind.value, path, image.width, image.height)
    return textures


def bind_texture(kind: TextureKind, texture_id: int) -> None:
    """Bind ``texture_id`` with generated object-space coordinates."""

    s_plane, t_plane = TEXTURE_PLANES[kind]
    gl.glEnable(gl.GL_TEXTURE_2D)
    gl.glBindTexture(gl.GL_TEXTURE_2D, texture_id)
    gl.glTexEnvi(gl.GL_TEXTURE_ENV, gl.GL_TEXTURE_ENV_MODE, gl.GL_MODULATE)
    gl.glTexGeni(gl.GL_S, gl.GL_TEXTURE_GEN_MODE, gl.GL_OBJECT_LINEAR)
    gl.glTexGeni(gl.GL_T, gl.GL_TEXTURE_GEN_MODE, gl.GL_OBJECT_LINEAR)
    gl.glTexGenfv(gl.GL_S, gl.GL_OBJECT_PLANE, s_plane)
    gl.glTexGenfv(gl.GL_T, gl.GL_OBJECT_PLANE, t_plane)
    gl.glEnable(gl.GL_TEXTURE_GEN_S)
    gl.glEnable(gl.GL_TEXTURE_GEN_T)


def unbind_texture() -> None:
    gl.glDisable(gl.GL_TEXTURE_GEN_S)
    gl.glDisable(gl.GL_TEXTURE_GEN_T)
    gl.glBindTexture(gl.GL_TEXTURE_2D, 0)
    gl.glDisable(gl.GL_TEXTURE_2D)
