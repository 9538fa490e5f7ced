"""Shared types for CLI parser builders."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Callable

from cimetrics.types import CommandResult

CommandHandler = Callable[[argparse.Namespace], int | CommandResult]


@dataclass(frozen=True)
class CommandHandlers:
    cmd_report: CommandHandler
    cmd_inspect: CommandHandler
