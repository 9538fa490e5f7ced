"""Parser setup for report commands."""

from __future__ import annotations

import argparse
from typing import Callable

from cimetrics.cli_parsers.types import CommandHandlers


def _add_run_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        help="Path to a YAML settings file (default: .ci-metrics.yml if present)",
    )
    parser.add_argument(
        "--workflow-run-id",
        help="Run to report on (default: $INPUT_WORKFLOW_RUN_ID, then $GITHUB_RUN_ID)",
    )
    parser.add_argument(
        "--job-name",
        help="Name of the job running the reporter (default: $GITHUB_JOB)",
    )
    parser.add_argument(
        "--runner-name",
        help="Runner executing the reporter (default: $RUNNER_NAME)",
    )
    parser.add_argument(
        "--github-api-url",
        help="GitHub API base URL (default: $GITHUB_API_URL or https://api.github.com)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Print debug diagnostics to stderr",
    )


def add_report_commands(
    subparsers,
    add_json_flag: Callable[[argparse.ArgumentParser], None],
    handlers: CommandHandlers,
) -> None:
    report = subparsers.add_parser("report", help="Build and deliver metrics for a workflow run")
    add_json_flag(report)
    _add_run_arguments(report)
    report.add_argument("--api-url", help="Ingestion endpoint (default: $INPUT_API_URL)")
    report.add_argument("--api-key", help="Ingestion API key (default: $INPUT_API_KEY)")
    report.add_argument(
        "--timeout",
        dest="timeout_seconds",
        type=float,
        help="Delivery timeout in seconds (default: 30)",
    )
    report.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Print the JSON payload instead of posting it",
    )
    report.set_defaults(func=handlers.cmd_report)

    inspect = subparsers.add_parser("inspect", help="Build metrics for a workflow run and print them")
    add_json_flag(inspect)
    _add_run_arguments(inspect)
    inspect.set_defaults(func=handlers.cmd_inspect)
