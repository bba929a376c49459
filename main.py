"""Entry point for the escalator demo."""
from __future__ import annotations

import argparse
import logging
import math
from typing import List, Optional, Tuple

import pygame

from logging_config import setup_logging
from rendering.draw_system import SceneRenderer
from rendering.opengl_context import initialize_gl, resize_viewport
from rendering.textures import TextureKind, load_textures
from simulation.camera import OrbitCamera
from simulation.clock import DEFAULT_TICK_PERIOD
from simulation.scene import DemoScene, create_demo_scene
from simulation.settings import SettingsError, parse_ambient_light, parse_scale_factor
from ui.control_panel import ControlPanel
from ui.layout import UILayout

logger = logging.getLogger(__name__)

FRAME_RATE = 60


def parse_size(text: str) -> Tuple[int, int]:
    try:
        width_text, height_text = text.lower().split("x")
        size = (int(width_text), int(height_text))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {text!r}") from exc
    if size[0] <= 0 or size[1] <= 0:
        raise argparse.ArgumentTypeError(f"Window size must be positive, got {text!r}")
    return size


def _setting(parser):
    def convert(text: str):
        try:
            return parser(text)
        except SettingsError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    return convert


def parse_tick_period(text: str) -> float:
    try:
        period = float(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Tick period must be a number, got {text!r}") from exc
    if not math.isfinite(period) or period <= 0.0:
        raise argparse.ArgumentTypeError(f"Tick period must be a positive number of seconds, got {text!r}")
    return period


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Walking figure riding a looping escalator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--model", type=str, default="", help="Figure model file (any format trimesh can load)")
    p.add_argument("--windowed", action="store_true", help="Open a resizable window instead of fullscreen")
    p.add_argument("--size", type=parse_size, default=(1280, 800), help="Window size as WIDTHxHEIGHT")
    p.add_argument("--scale", type=_setting(parse_scale_factor), default=None, help="Initial figure scale factor")
    p.add_argument("--ambient", type=_setting(parse_ambient_light), default=None, help="Initial ambient light r,g,b,a")
    p.add_argument("--tick", type=parse_tick_period, default=DEFAULT_TICK_PERIOD, help="Animation tick period in seconds")
    p.add_argument("--metal-texture", type=str, default="", help="Image for the escalator steps and rails")
    p.add_argument("--ceramic-texture", type=str, default="", help="Image for the floor")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv)")
    p.add_argument("--log-file", type=str, default="", help="Also write the log to this file")
    return p.parse_args(argv)


def handle_scene_key(
    scene: DemoScene, camera: OrbitCamera, key: int, panel: Optional[ControlPanel] = None
) -> bool:
    """Apply a scene hotkey; returns ``False`` when the demo should quit."""

    if not scene.input_enabled:
        return True
    if key == pygame.K_F4:
        return False
    if key == pygame.K_F2:
        if panel is not None:
            panel.request_model_path()
    elif key == pygame.K_v:
        scene.start()
    elif key == pygame.K_e:
        camera.tilt(-1)
    elif key == pygame.K_d:
        camera.tilt(1)
    elif key == pygame.K_s:
        camera.spin(-1)
    elif key == pygame.K_f:
        camera.spin(1)
    elif key in (pygame.K_KP_PLUS, pygame.K_PLUS, pygame.K_EQUALS):
        camera.dolly(-1)
    elif key in (pygame.K_KP_MINUS, pygame.K_MINUS):
        camera.dolly(1)
    return True


def run(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(level, args.log_file or None)

    scene = create_demo_scene(args.model or None, tick_period=args.tick, scale_factor=args.scale)
    if args.ambient is not None:
        scene.lighting.ambient = args.ambient

    pygame.init()
    pygame.display.set_caption("Escalator")
    if args.windowed:
        flags = pygame.OPENGL | pygame.DOUBLEBUF | pygame.RESIZABLE
        pygame.display.set_mode(args.size, flags)
    else:
        pygame.display.set_mode((0, 0), pygame.OPENGL | pygame.DOUBLEBUF | pygame.FULLSCREEN)
    window_size = pygame.display.get_surface().get_size()
    layout = UILayout(window_size)

    initialize_gl(window_size, scene.lighting)
    camera = OrbitCamera(viewport_size=layout.scene_rect.size)
    textures = load_textures(
        {TextureKind.METAL: args.metal_texture, TextureKind.CERAMIC: args.ceramic_texture}
    )
    renderer = SceneRenderer(scene, textures)
    panel = ControlPanel(scene)
    pygame.key.start_text_input()
    logger.info("Window %dx%d, figure: %s", window_size[0], window_size[1], scene.model_name)

    clock = pygame.time.Clock()
    running = True
    while running:
        dt = clock.tick(FRAME_RATE) / 1000.0
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                pygame.display.set_mode(event.size, pygame.OPENGL | pygame.DOUBLEBUF | pygame.RESIZABLE)
                resize_viewport(event.size, scene.lighting)
                window_size = event.size
                layout.update(window_size)
                camera.update_viewport(layout.scene_rect.size)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                panel.handle_mouse_click(layout, event.pos)
            elif event.type in (pygame.TEXTINPUT, pygame.KEYDOWN):
                if panel.handle_key(event):
                    continue
                if event.type == pygame.KEYDOWN:
                    running = handle_scene_key(scene, camera, event.key, panel)

        scene.update(dt)
        renderer.draw_scene(scene, camera, layout)
        panel.draw(layout)
        pygame.display.flip()

    textures.release()
    pygame.quit()


if __name__ == "__main__":
    run()
