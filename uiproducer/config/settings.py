# uiproducer/config/settings.py

"""Loading of :class:`ProducerSettings` from TOML with environment overrides."""

from __future__ import annotations

import copy
import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..core.ui_state import MergePolicy
from .defaults import DEFAULT_CONFIG
from .exceptions import ConfigIOError, ConfigValidationError
from .validation import validate_config

logger = logging.getLogger(__name__)

ENV_MERGE_POLICY = "UIPRODUCER_MERGE_POLICY"
ENV_BLOCKING_WORKERS = "UIPRODUCER_BLOCKING_WORKERS"


@dataclass(frozen=True)
class ProducerSettings:
    merge_policy: MergePolicy = MergePolicy.PRESERVE_DATA
    blocking_workers: int = 2
    verbose: bool = False
    log_file: Optional[str] = None
    force_color: Optional[bool] = None
    interval: float = 2.0
    source: Optional[Path] = None


def default_config_path() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / "uiproducer" / "config.toml"
    return Path.home() / ".config" / "uiproducer" / "config.toml"


def _merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigIOError(f"Malformed configuration file {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigIOError(f"Unable to read configuration file {path}: {exc}") from exc


def _apply_env(data: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    producer = data.setdefault("producer", {})

    policy = environ.get(ENV_MERGE_POLICY)
    if policy:
        producer["merge_policy"] = policy.strip().lower()

    workers = environ.get(ENV_BLOCKING_WORKERS)
    if workers:
        try:
            producer["blocking_workers"] = int(workers)
        except ValueError:
            raise ConfigValidationError(
                f"{ENV_BLOCKING_WORKERS} must be an integer, got {workers!r}"
            ) from None
    return data


def settings_from_mapping(data: Mapping[str, Any], source: Optional[Path] = None) -> ProducerSettings:
    """Validate a raw configuration mapping and build settings from it."""
    merged = _merge(DEFAULT_CONFIG, data)
    validate_config(merged)

    producer = merged["producer"]
    logging_section = merged["logging"]
    return ProducerSettings(
        merge_policy=MergePolicy.from_name(producer["merge_policy"]),
        blocking_workers=producer["blocking_workers"],
        verbose=logging_section["verbose"],
        log_file=logging_section.get("log_file") or None,
        force_color=logging_section.get("force_color"),
        interval=float(merged["cli"]["interval"]),
        source=source,
    )


def load_settings(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ProducerSettings:
    """Load settings from ``path`` (or the default location).

    A missing file yields the defaults. An explicitly given path must exist.
    """
    environ = os.environ if environ is None else environ
    explicit = path is not None
    config_path = Path(path).expanduser() if explicit else default_config_path()

    if config_path.exists():
        data = _read_toml(config_path)
        source: Optional[Path] = config_path
        logger.debug(f"Loaded configuration from {config_path}")
    elif explicit:
        raise ConfigIOError(f"Configuration file not found: {config_path}")
    else:
        data = {}
        source = None

    return settings_from_mapping(_apply_env(copy.deepcopy(data), environ), source)


__all__ = [
    "ProducerSettings",
    "default_config_path",
    "load_settings",
    "settings_from_mapping",
    "ENV_MERGE_POLICY",
    "ENV_BLOCKING_WORKERS",
]
