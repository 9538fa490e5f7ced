"""Command line entry point for cimetrics."""

from __future__ import annotations

import argparse
import json
import time

from cimetrics import __version__
from cimetrics.cli_parsers.report import add_report_commands
from cimetrics.cli_parsers.types import CommandHandlers
from cimetrics.commands.report import cmd_inspect, cmd_report
from cimetrics.exit_codes import EXIT_INTERNAL_ERROR, EXIT_SUCCESS
from cimetrics.types import CommandResult


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cimetrics", description="CI pipeline run metrics reporter")
    parser.add_argument("--version", action="version", version=f"cimetrics {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_json_flag(target: argparse.ArgumentParser) -> None:
        target.add_argument(
            "--json",
            action="store_true",
            help="Output machine-readable JSON",
        )

    handlers = CommandHandlers(cmd_report=cmd_report, cmd_inspect=cmd_inspect)
    add_report_commands(subparsers, add_json_flag, handlers)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    start = time.perf_counter()
    command = args.command

    try:
        result = args.func(args)
    except Exception as exc:  # noqa: BLE001 - surface in JSON mode
        if getattr(args, "json", False):
            problems = [
                {
                    "severity": "error",
                    "message": str(exc),
                    "code": "CIMETRICS-UNHANDLED",
                }
            ]
            payload = CommandResult(
                exit_code=EXIT_INTERNAL_ERROR,
                summary=str(exc),
                problems=problems,
            ).to_payload(
                command,
                "error",
                int((time.perf_counter() - start) * 1000),
            )
            print(json.dumps(payload, indent=2))
            return EXIT_INTERNAL_ERROR
        raise

    if isinstance(result, CommandResult):
        exit_code = result.exit_code
        command_result = result
    else:
        exit_code = int(result)
        command_result = CommandResult(exit_code=exit_code)

    if not command_result.summary:
        command_result.summary = "OK" if exit_code == EXIT_SUCCESS else "Command failed"

    if getattr(args, "json", False):
        status = "success" if exit_code == EXIT_SUCCESS else "failure"
        payload = command_result.to_payload(
            command,
            status,
            int((time.perf_counter() - start) * 1000),
        )
        print(json.dumps(payload, indent=2))
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
