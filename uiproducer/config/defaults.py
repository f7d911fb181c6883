from __future__ import annotations

import tomllib
from typing import Any, Dict

DEFAULT_CONFIG_TOML = """\
[producer]
# What a failed fetch does to data shown from an earlier success
merge_policy = "preserve"  # "preserve" | "clear"
# Worker threads for blocking fetch functions
blocking_workers = 2

[logging]
verbose = false
log_file = ""
# force_color = true

[cli]
# Seconds between automatic refreshes in watch mode
interval = 2.0
"""

DEFAULT_CONFIG: Dict[str, Any] = tomllib.loads(DEFAULT_CONFIG_TOML)

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "producer": {
            "type": "object",
            "properties": {
                "merge_policy": {"type": "string", "enum": ["preserve", "clear"]},
                "blocking_workers": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": False,
        },
        "logging": {
            "type": "object",
            "properties": {
                "verbose": {"type": "boolean"},
                "log_file": {"type": "string"},
                "force_color": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "cli": {
            "type": "object",
            "properties": {
                "interval": {"type": "number", "exclusiveMinimum": 0},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": True,
}

__all__ = ["DEFAULT_CONFIG_TOML", "DEFAULT_CONFIG", "CONFIG_SCHEMA"]
