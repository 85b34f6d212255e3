"""Configuration management for CodeCanvas

Settings are stored as JSON in the user's home directory. Unknown keys are
ignored and missing keys fall back to the defaults in constants.py, so old
config files keep loading after new settings are added.
"""

import os
import json
import logging
from dataclasses import dataclass, field, asdict, fields

from .constants import (
    DEFAULT_LOGICAL_WIDTH, DEFAULT_LOGICAL_HEIGHT, DEFAULT_PREVIEW_SCALE,
    HANDLE_RADIUS, ROTATE_LEADER_LENGTH, HANDLE_HIT_SCALE, SELECTION_STROKE_WIDTH,
    DEFAULT_EXPORT_SIZE, DEFAULT_EXPORT_FORMAT, DEFAULT_FONT_FAMILY,
    DEFAULT_BACKGROUND_COLOR, CONFIG_DIR_NAME, CONFIG_FILE_NAME
)

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
    """User-tunable editor settings."""
    logical_width: float = DEFAULT_LOGICAL_WIDTH
    logical_height: float = DEFAULT_LOGICAL_HEIGHT
    preview_scale: float = DEFAULT_PREVIEW_SCALE
    handle_radius: float = HANDLE_RADIUS
    leader_length: float = ROTATE_LEADER_LENGTH
    handle_hit_scale: float = HANDLE_HIT_SCALE
    stroke_width: float = SELECTION_STROKE_WIDTH
    export_size: int = DEFAULT_EXPORT_SIZE
    export_format: str = DEFAULT_EXPORT_FORMAT
    font_family: str = DEFAULT_FONT_FAMILY
    font_dirs: list = field(default_factory=list)
    background_color: tuple = DEFAULT_BACKGROUND_COLOR

    @property
    def logical_size(self):
        return (self.logical_width, self.logical_height)

    @classmethod
    def from_dict(cls, data):
        """Build a config from a plain dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if 'background_color' in values:
            values['background_color'] = tuple(values['background_color'])
        return cls(**values)

    def to_dict(self):
        data = asdict(self)
        data['background_color'] = list(self.background_color)
        return data


def default_config_path():
    """Return ~/.codecanvas/config.json"""
    return os.path.join(os.path.expanduser('~'), CONFIG_DIR_NAME, CONFIG_FILE_NAME)


def load_config(path=None):
    """Load settings from a JSON config file.

    Args:
        path: Config file path (default: ~/.codecanvas/config.json)

    Returns:
        EditorConfig. Defaults are returned when the file is missing or
        cannot be parsed.
    """
    path = path or default_config_path()
    if not os.path.exists(path):
        return EditorConfig()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be an object, got {type(data).__name__}")
        return EditorConfig.from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return EditorConfig()


def save_config(config, path=None):
    """Write settings to a JSON config file, creating the directory if needed."""
    path = path or default_config_path()
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.debug("Saved config to %s", path)
