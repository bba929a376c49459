"""
Tests for command-line parsing and scene hotkeys.
"""

import argparse

import pygame
import pytest

from main import handle_scene_key, parse_args, parse_tick_period
from simulation.camera import OrbitCamera
from simulation.clock import DEFAULT_TICK_PERIOD
from simulation.scene import DemoScene
from ui.control_panel import MODEL_FIELD, ControlPanel


@pytest.fixture
def scene():
    return DemoScene()


@pytest.fixture
def camera():
    return OrbitCamera(viewport_size=(800, 600))


class TestTickPeriod:
    def test_accepts_positive_seconds(self):
        assert parse_tick_period("0.05") == 0.05

    @pytest.mark.parametrize("text", ["0", "-0.2", "nan", "inf", "fast"])
    def test_rejects_unusable_periods(self, text):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_tick_period(text)

    def test_default_period(self):
        assert parse_args([]).tick == DEFAULT_TICK_PERIOD

    @pytest.mark.parametrize("text", ["nan", "0"])
    def test_command_line_rejects_bad_tick(self, text):
        with pytest.raises(SystemExit):
            parse_args(["--tick", text])


class TestParseArgs:
    def test_settings_are_parsed(self):
        args = parse_args(["--scale", "6", "--ambient", "0.2,0.2,0.2,1", "--size", "640x480"])
        assert args.scale == 6.0
        assert args.ambient == (0.2, 0.2, 0.2, 1.0)
        assert args.size == (640, 480)

    def test_bad_scale_exits(self):
        with pytest.raises(SystemExit):
            parse_args(["--scale", "-1"])

    def test_texture_paths(self):
        args = parse_args(["--metal-texture", "metal.jpg"])
        assert args.metal_texture == "metal.jpg"
        assert args.ceramic_texture == ""


class TestSceneKeys:
    def test_f4_quits(self, scene, camera):
        assert handle_scene_key(scene, camera, pygame.K_F4) is False

    def test_v_starts_animation(self, scene, camera):
        assert handle_scene_key(scene, camera, pygame.K_v) is True
        assert scene.coordinator.is_running

    def test_camera_keys(self, scene, camera):
        handle_scene_key(scene, camera, pygame.K_d)
        handle_scene_key(scene, camera, pygame.K_f)
        assert camera.rotation_x == 20.0
        assert camera.rotation_y == pytest.approx(305.0)

    def test_f2_asks_for_model_path(self, scene, camera):
        panel = ControlPanel(scene)
        handle_scene_key(scene, camera, pygame.K_F2, panel)
        assert panel.focus == MODEL_FIELD

    def test_keys_ignored_while_running(self, scene, camera):
        panel = ControlPanel(scene)
        scene.start()
        assert handle_scene_key(scene, camera, pygame.K_F4) is True
        handle_scene_key(scene, camera, pygame.K_F2, panel)
        handle_scene_key(scene, camera, pygame.K_d)
        assert panel.focus is None
        assert camera.rotation_x == 15.0
