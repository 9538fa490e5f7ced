"""Report and inspect command handlers."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any

from cimetrics.config import load_context, load_settings
from cimetrics.errors import ConfigValidationError, DeliveryError, InputError, MetricsError, RunNotFoundError
from cimetrics.exit_codes import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE
from cimetrics.services import build_report, report_metrics
from cimetrics.types import CommandResult

OVERRIDE_ARGS = (
    "workflow_run_id",
    "job_name",
    "runner_name",
    "github_api_url",
    "debug",
    "api_url",
    "api_key",
    "timeout_seconds",
    "dry_run",
)


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {name: getattr(args, name, None) for name in OVERRIDE_ARGS}


def _error_code(exc: MetricsError) -> tuple[int, str]:
    if isinstance(exc, (InputError, ConfigValidationError)):
        return EXIT_USAGE, "CIMETRICS-INVALID-INPUT"
    if isinstance(exc, RunNotFoundError):
        return EXIT_FAILURE, "CIMETRICS-RUN-NOT-FOUND"
    if isinstance(exc, DeliveryError):
        return EXIT_FAILURE, "CIMETRICS-DELIVERY-FAILED"
    return EXIT_FAILURE, "CIMETRICS-FAILED"


def _failure(exc: MetricsError, json_mode: bool) -> int | CommandResult:
    exit_code, code = _error_code(exc)
    if json_mode:
        problems = [{"severity": "error", "message": str(exc), "code": code}]
        for detail in getattr(exc, "errors", []):
            problems.append({"severity": "error", "message": detail, "code": code})
        return CommandResult(exit_code=exit_code, summary=str(exc), problems=problems)
    print(f"Error: {exc}", file=sys.stderr)
    return exit_code


def cmd_report(args: argparse.Namespace) -> int | CommandResult:
    """Build the metrics record for a run and deliver it."""
    json_mode = getattr(args, "json", False)
    env = os.environ
    try:
        settings = load_settings(
            env,
            config_path=Path(args.config) if args.config else None,
            overrides=_overrides(args),
        )
        context = load_context(env)
        result = report_metrics(settings, context, emit=not json_mode)
    except MetricsError as exc:
        return _failure(exc, json_mode)

    run_id = result.payload["run_id"]
    if json_mode:
        return CommandResult(
            exit_code=EXIT_SUCCESS,
            summary=(
                f"Metrics for run {run_id} printed (dry run)"
                if settings.dry_run
                else f"Metrics for run {run_id} delivered"
            ),
            problems=result.problems,
            artifacts={"outputs": str(context.output_path) if context.output_path else ""},
            data={"record": result.payload, "delivered": result.delivered},
        )
    return EXIT_SUCCESS


def cmd_inspect(args: argparse.Namespace) -> int | CommandResult:
    """Build the metrics record for a run and print it without delivering."""
    json_mode = getattr(args, "json", False)
    env = os.environ
    try:
        settings = load_settings(
            env,
            config_path=Path(args.config) if args.config else None,
            overrides=_overrides(args),
        )
        result = build_report(settings, load_context(env), emit=not json_mode)
    except MetricsError as exc:
        return _failure(exc, json_mode)

    if json_mode:
        return CommandResult(
            exit_code=EXIT_SUCCESS,
            summary=f"Metrics for run {result.payload['run_id']} built",
            problems=result.problems,
            data={"record": result.payload},
        )
    print(json.dumps(result.payload, indent=2))
    return EXIT_SUCCESS
