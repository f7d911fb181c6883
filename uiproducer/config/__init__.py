from __future__ import annotations

from .exceptions import (
    ConfigError,
    ConfigValidationError,
    ConfigIOError,
)
from .settings import ProducerSettings, default_config_path, load_settings, settings_from_mapping

__all__ = [
    "ProducerSettings",
    "default_config_path",
    "load_settings",
    "settings_from_mapping",
    "ConfigError",
    "ConfigValidationError",
    "ConfigIOError",
]
