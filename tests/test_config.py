"""
Tests for settings files and environment overrides.
"""

import json
import logging

import pytest

from python_textpattern.config import (
    TextPatternSettings,
    WordBreakMode,
    apply_env_overrides,
    load_settings,
    settings_from_dict,
    settings_from_env,
)
from python_textpattern.constants import BREAK_WINDOW_ENV, DEFAULT_BREAK_WINDOW, WORD_BREAKER_ENV
from python_textpattern.errors import SettingsError


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv(WORD_BREAKER_ENV, raising=False)
    monkeypatch.delenv(BREAK_WINDOW_ENV, raising=False)
    return monkeypatch


def test_defaults():
    settings = TextPatternSettings()
    assert settings.word_break_mode is WordBreakMode.HEURISTIC
    assert settings.break_window == DEFAULT_BREAK_WINDOW
    assert settings.layout.char_width == 8


class TestLoadSettings:
    """Tests for reading YAML and JSON settings files."""

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "textpattern.yaml"
        path.write_text(
            "textpattern:\n"
            "  word_break_mode: selection\n"
            "  break_window: 64\n"
            "  layout:\n"
            "    char_width: 7\n"
            "    client_width: 400\n"
            "    wrap_columns: 50\n"
        )

        settings = load_settings(path)

        assert settings.word_break_mode is WordBreakMode.SELECTION
        assert settings.break_window == 64
        assert settings.layout.char_width == 7
        assert settings.layout.client_width == 400
        assert settings.layout.wrap_columns == 50
        assert settings.layout.line_height == 16

    def test_json_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"textpattern": {"word_break_mode": "SELECTION"}}))
        assert load_settings(path).word_break_mode is WordBreakMode.SELECTION

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path) == TextPatternSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(SettingsError, match="not found"):
            load_settings(tmp_path / "nope.yaml")

    def test_unparsable_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("textpattern: [unclosed\n")
        with pytest.raises(SettingsError, match="Could not parse"):
            load_settings(path)

    def test_unparsable_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")
        with pytest.raises(SettingsError, match="Could not parse"):
            load_settings(path)

    def test_missing_top_level_key(self, tmp_path):
        path = tmp_path / "other.yaml"
        path.write_text("something_else: 1\n")
        with pytest.raises(SettingsError, match="textpattern"):
            load_settings(path)


class TestSettingsFromDict:
    """Tests for validating the settings mapping."""

    def test_unknown_key(self):
        with pytest.raises(SettingsError, match="Unknown settings: colour"):
            settings_from_dict({"colour": "red"})

    def test_unknown_layout_key(self):
        with pytest.raises(SettingsError, match="Unknown layout settings: zoom"):
            settings_from_dict({"layout": {"zoom": 2}})

    def test_bad_mode(self):
        with pytest.raises(SettingsError, match="Invalid settings"):
            settings_from_dict({"word_break_mode": "neural"})

    def test_bad_window(self):
        with pytest.raises(SettingsError, match="break_window must be positive"):
            settings_from_dict({"break_window": 0})

    def test_bad_layout_value(self):
        with pytest.raises(SettingsError, match="must be positive"):
            settings_from_dict({"layout": {"line_height": 0}})

    def test_not_a_mapping(self):
        with pytest.raises(SettingsError, match="mapping"):
            settings_from_dict(["word_break_mode"])


class TestEnvOverrides:
    """Tests for environment variable overrides."""

    def test_mode_from_env(self, clean_env):
        clean_env.setenv(WORD_BREAKER_ENV, "Selection")
        settings = apply_env_overrides(TextPatternSettings())
        assert settings.word_break_mode is WordBreakMode.SELECTION

    def test_window_from_env(self, clean_env):
        clean_env.setenv(BREAK_WINDOW_ENV, "128")
        assert apply_env_overrides(TextPatternSettings()).break_window == 128

    def test_invalid_values_logged_and_ignored(self, clean_env, caplog):
        clean_env.setenv(WORD_BREAKER_ENV, "neural")
        clean_env.setenv(BREAK_WINDOW_ENV, "-3")

        with caplog.at_level(logging.WARNING, logger="python_textpattern.config"):
            settings = apply_env_overrides(TextPatternSettings())

        assert settings == TextPatternSettings()
        assert WORD_BREAKER_ENV in caplog.text
        assert BREAK_WINDOW_ENV in caplog.text

    def test_env_wins_over_file(self, clean_env, tmp_path):
        path = tmp_path / "textpattern.yaml"
        path.write_text("textpattern:\n  word_break_mode: selection\n  break_window: 10\n")
        clean_env.setenv(WORD_BREAKER_ENV, "heuristic")

        settings = settings_from_env(path)

        assert settings.word_break_mode is WordBreakMode.HEURISTIC
        assert settings.break_window == 10

    def test_no_file(self, clean_env):
        assert settings_from_env() == TextPatternSettings()
