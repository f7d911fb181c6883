from __future__ import annotations


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""


class ConfigIOError(ConfigError):
    """Raised when the configuration file cannot be read or parsed."""


__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ConfigIOError",
]
