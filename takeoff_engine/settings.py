"""
Settings Module

Loads user settings from a YAML file on top of the constants defaults.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from .constants import DEFAULT_SCALE_LABEL, SCALE_PRESETS

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path(__file__).parent.parent / "config" / "settings.yaml"


@dataclass
class Settings:
    """Engine settings."""
    default_scale: str = DEFAULT_SCALE_LABEL
    scale_presets: List[str] = field(default_factory=lambda: list(SCALE_PRESETS))


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings from YAML.

    Expected layout:

        scale:
          default: 1/8" = 1'
          presets: [...]

    A missing or unreadable file yields the defaults.

    Args:
        path: Settings file (default: config/settings.yaml)

    Returns:
        Settings
    """
    settings_path = Path(path) if path else DEFAULT_SETTINGS_PATH
    settings = Settings()

    if not settings_path.exists():
        logger.debug(f"No settings file at {settings_path}, using defaults")
        return settings

    try:
        with open(settings_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Cannot read settings {settings_path}: {e}; using defaults")
        return settings

    if not isinstance(data, dict):
        logger.warning(f"Settings {settings_path} is not a mapping, using defaults")
        return settings

    scale = data.get("scale") or {}
    if isinstance(scale, dict):
        default = scale.get("default")
        if isinstance(default, str) and default.strip():
            settings.default_scale = default

        presets = scale.get("presets")
        if isinstance(presets, list) and presets:
            settings.scale_presets = [str(p) for p in presets]

    logger.debug(f"Loaded settings from {settings_path}: default scale {settings.default_scale}")
    return settings
