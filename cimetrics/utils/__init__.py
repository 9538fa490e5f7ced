"""Shared utility functions for cimetrics."""

from __future__ import annotations

from cimetrics.utils.env import parse_env_bool, read_env
from cimetrics.utils.outputs import write_outputs

__all__ = [
    "parse_env_bool",
    "read_env",
    "write_outputs",
]
