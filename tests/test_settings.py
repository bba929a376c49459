"""
Tests for parsing and committing user-entered scene settings.
"""

import pytest

from simulation.settings import (
    AMBIENT_FORMAT_MESSAGE,
    InvalidSettingError,
    LightingSettings,
    SettingsError,
    SettingsParseError,
    format_ambient_light,
    parse_ambient_light,
    parse_scale_factor,
)


class TestScaleFactor:
    @pytest.mark.parametrize("text, expected", [("8", 8.0), (" 6.5 ", 6.5), ("1e1", 10.0), ("0.25", 0.25)])
    def test_parses_positive_numbers(self, text, expected):
        assert parse_scale_factor(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "8,5", "1 2"])
    def test_non_numeric_text_is_a_parse_error(self, text):
        with pytest.raises(SettingsParseError):
            parse_scale_factor(text)

    @pytest.mark.parametrize("text", ["0", "-3", "nan", "inf"])
    def test_unusable_numbers_are_invalid(self, text):
        with pytest.raises(InvalidSettingError):
            parse_scale_factor(text)

    def test_errors_share_a_base_class(self):
        assert issubclass(SettingsParseError, SettingsError)
        assert issubclass(InvalidSettingError, SettingsError)
        assert issubclass(SettingsError, ValueError)


class TestAmbientLight:
    def test_parses_four_components(self):
        assert parse_ambient_light("0.2, 0.3,0.4 ,1") == (0.2, 0.3, 0.4, 1.0)

    @pytest.mark.parametrize("text", ["", "1,1,1", "1,1,1,1,1", "a,b,c,d", "1,,1,1", "1;1;1;1"])
    def test_wrong_shape_is_a_parse_error(self, text):
        with pytest.raises(SettingsParseError) as info:
            parse_ambient_light(text)
        assert str(info.value) == AMBIENT_FORMAT_MESSAGE

    def test_non_finite_component_is_invalid(self):
        with pytest.raises(InvalidSettingError):
            parse_ambient_light("1,nan,1,1")

    def test_format_round_trips_for_display(self):
        assert format_ambient_light((1.0, 0.5, 0.25, 1.0)) == "1,0.5,0.25,1"


class TestLightingSettings:
    def test_apply_commits_parsed_value(self):
        lighting = LightingSettings()
        lighting.apply_ambient_text("0.1,0.2,0.3,0.4")
        assert lighting.ambient == (0.1, 0.2, 0.3, 0.4)

    def test_failed_apply_leaves_previous_value(self):
        lighting = LightingSettings()
        lighting.apply_ambient_text("0.5,0.5,0.5,1")
        with pytest.raises(SettingsParseError):
            lighting.apply_ambient_text("0.9,0.9")
        assert lighting.ambient == (0.5, 0.5, 0.5, 1.0)
