"""
Settings for the range engine: word-break mode, break window and layout.

Settings come from three places, later ones winning: the dataclass defaults,
an optional YAML or JSON file with a top-level ``textpattern`` key, and
environment variables.

Example settings file:

    textpattern:
      word_break_mode: selection
      break_window: 64
      layout:
        char_width: 7
        line_height: 14
        client_width: 400
        client_height: 300
        wrap_columns: 50
"""

import dataclasses
import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from .constants import BREAK_WINDOW_ENV, DEFAULT_BREAK_WINDOW, WORD_BREAKER_ENV
from .errors import SettingsError
from .layout import LayoutMetrics

logger = logging.getLogger(__name__)


class WordBreakMode(Enum):
    """Which boundary logic word navigation uses."""

    HEURISTIC = "heuristic"
    """Character-transition predicate (edit-box behaviour)."""

    SELECTION = "selection"
    """Word-selection automaton with the cached break window."""


@dataclass
class TextPatternSettings:
    """Engine settings.

    Attributes:
        word_break_mode: Boundary logic for WORD movement and expansion
        break_window: Initial half-width of the word-break window
        layout: Geometry used by stores created from these settings
    """

    word_break_mode: WordBreakMode = WordBreakMode.HEURISTIC
    break_window: int = DEFAULT_BREAK_WINDOW
    layout: LayoutMetrics = field(default_factory=LayoutMetrics)


_LAYOUT_FIELDS = {f.name for f in dataclasses.fields(LayoutMetrics)}


def settings_from_dict(data: dict[str, Any]) -> TextPatternSettings:
    """Build settings from the mapping under the ``textpattern`` key.

    Raises:
        SettingsError: If a key is unknown or a value has the wrong type
    """
    if not isinstance(data, dict):
        raise SettingsError("Settings must be a mapping")

    unknown = set(data) - {"word_break_mode", "break_window", "layout"}
    if unknown:
        raise SettingsError(f"Unknown settings: {', '.join(sorted(unknown))}")

    settings = TextPatternSettings()
    try:
        if "word_break_mode" in data:
            settings.word_break_mode = WordBreakMode(str(data["word_break_mode"]).lower())
        if "break_window" in data:
            settings.break_window = int(data["break_window"])
            if settings.break_window < 1:
                raise ValueError("break_window must be positive")
        if "layout" in data:
            layout = data["layout"] or {}
            if not isinstance(layout, dict):
                raise SettingsError("'layout' must be a mapping")
            bad = set(layout) - _LAYOUT_FIELDS
            if bad:
                raise SettingsError(f"Unknown layout settings: {', '.join(sorted(bad))}")
            settings.layout = LayoutMetrics(**layout)
    except (TypeError, ValueError) as e:
        raise SettingsError(f"Invalid settings: {e}") from e

    return settings


def load_settings(path: str | Path) -> TextPatternSettings:
    """Load settings from a YAML or JSON file.

    Files ending in ``.json`` are read as JSON, anything else as YAML.

    Args:
        path: Path to the settings file

    Returns:
        Settings with file values applied over the defaults

    Raises:
        SettingsError: If the file is missing, unparsable or has the wrong shape
    """
    path = Path(path)
    if not path.exists():
        raise SettingsError(f"Settings file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise SettingsError(f"Could not parse settings file {path}: {e}") from e

    if not data:
        logger.debug("Settings file %s is empty, using defaults", path)
        return TextPatternSettings()

    if not isinstance(data, dict) or "textpattern" not in data:
        raise SettingsError(f"Settings file {path} must have a top-level 'textpattern' key")

    return settings_from_dict(data["textpattern"] or {})


def apply_env_overrides(settings: TextPatternSettings) -> TextPatternSettings:
    """Apply environment variable overrides in place.

    Invalid values are logged and ignored.
    """
    mode = os.environ.get(WORD_BREAKER_ENV)
    if mode:
        try:
            settings.word_break_mode = WordBreakMode(mode.strip().lower())
            logger.debug("Word break mode %s (from env)", settings.word_break_mode.value)
        except ValueError:
            logger.warning("%s is set to %r, which is not a word break mode", WORD_BREAKER_ENV, mode)

    window = os.environ.get(BREAK_WINDOW_ENV)
    if window:
        if window.strip().isdigit() and int(window) > 0:
            settings.break_window = int(window)
            logger.debug("Break window %d (from env)", settings.break_window)
        else:
            logger.warning("%s is set to %r, which is not a positive integer", BREAK_WINDOW_ENV, window)

    return settings


def settings_from_env(path: str | Path | None = None) -> TextPatternSettings:
    """Load settings from an optional file, then apply environment overrides."""
    settings = load_settings(path) if path is not None else TextPatternSettings()
    return apply_env_overrides(settings)
