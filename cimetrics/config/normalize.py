"""Normalization helpers for cimetrics settings."""

from __future__ import annotations

import copy
from typing import Any

from cimetrics.utils.env import parse_env_bool

BOOL_KEYS = ("dry_run", "debug")


def normalize_settings(settings: dict[str, Any]) -> dict[str, Any]:
    """Coerce string-typed action inputs into the types the schema expects."""
    if not isinstance(settings, dict):
        return {}

    normalized = copy.deepcopy(settings)
    for key in BOOL_KEYS:
        value = normalized.get(key)
        if isinstance(value, str):
            normalized[key] = parse_env_bool(value)
    timeout = normalized.get("timeout_seconds")
    if isinstance(timeout, str):
        try:
            normalized["timeout_seconds"] = float(timeout)
        except ValueError:
            pass  # reported by schema validation
    run_id = normalized.get("workflow_run_id")
    if isinstance(run_id, str) and not run_id.strip():
        normalized["workflow_run_id"] = None
    return normalized
