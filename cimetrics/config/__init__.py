"""Settings management for cimetrics."""

from __future__ import annotations

from cimetrics.config.loader import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_SETTINGS,
    RunContext,
    Settings,
    deep_merge,
    load_context,
    load_settings,
    load_yaml_file,
)
from cimetrics.config.normalize import normalize_settings

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_SETTINGS",
    "RunContext",
    "Settings",
    "deep_merge",
    "load_context",
    "load_settings",
    "load_yaml_file",
    "normalize_settings",
]
