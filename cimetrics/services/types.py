"""Shared result types for the services layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ServiceResult:
    """Base result for service calls."""

    problems: list[dict[str, Any]] = field(default_factory=list)
