"""Metrics reporting service: fetch, aggregate, validate and deliver."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from cimetrics.branch import resolve_branch
from cimetrics.config.loader import RunContext, Settings
from cimetrics.delivery import render_payload, send_metrics
from cimetrics.errors import InputError, MetricsError
from cimetrics.github_api import DEFAULT_API_URL, GitHubAPI
from cimetrics.metrics import aggregate
from cimetrics.models import MODE_EXTERNAL, MODE_INLINE, PipelineMetricsRecord
from cimetrics.record_schema import validate_record
from cimetrics.self_job import find_self_job
from cimetrics.services.types import ServiceResult
from cimetrics.timestamps import utc_now
from cimetrics.utils.outputs import write_outputs

REPOSITORY_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")


@dataclass
class ReportResult(ServiceResult):
    """Result of building (and optionally delivering) a metrics record."""

    record: PipelineMetricsRecord | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    delivered: bool = False
    response_status: int | None = None


def parse_run_id(value: str | None, fallback: str | None = None) -> int:
    """Resolve the target run id from the input, falling back to the invoking run."""
    raw = value if value not in (None, "") else fallback
    if raw in (None, ""):
        raise InputError("workflow_run_id", "no run id given and GITHUB_RUN_ID is not set")
    try:
        run_id = int(str(raw).strip())
    except ValueError as exc:
        raise InputError("workflow_run_id", f"'{raw}' is not an integer") from exc
    if run_id <= 0:
        raise InputError("workflow_run_id", f"{run_id} must be a positive integer")
    return run_id


def validate_repository(value: str | None) -> str:
    if not value:
        raise InputError("repository", "GITHUB_REPOSITORY is not set")
    if not REPOSITORY_RE.match(value):
        raise InputError("repository", f"'{value}' is not in owner/name form")
    return value


def resolve_mode(target_run_id: int, context_run_id: str | None) -> str:
    """Inline when the target run is the run we are executing in."""
    if context_run_id and context_run_id.strip() == str(target_run_id):
        return MODE_INLINE
    return MODE_EXTERNAL


def _log(message: str, emit: bool) -> None:
    if emit:
        print(f"[cimetrics] {message}")


def _debug(message: str, settings: Settings, emit: bool) -> None:
    if emit and settings.debug:
        print(f"[debug] {message}", file=sys.stderr)


def _warn(problem: dict[str, Any], emit: bool) -> None:
    if emit:
        print(f"Warning: {problem['message']}", file=sys.stderr)


def _api_for(settings: Settings, context: RunContext) -> GitHubAPI:
    if not context.token:
        raise InputError(
            "GITHUB_TOKEN",
            "not set; it is provided automatically by GitHub Actions when the job has 'actions: read'",
        )
    base_url = settings.github_api_url
    if base_url == DEFAULT_API_URL and context.api_url:
        base_url = context.api_url
    return GitHubAPI(context.token, api_url=base_url, debug=settings.debug)


def build_report(
    settings: Settings,
    context: RunContext,
    api: GitHubAPI | None = None,
    now: datetime | None = None,
    emit: bool = True,
) -> ReportResult:
    """Fetch the target run and its jobs and build the metrics record.

    Input is validated before any provider call. ``now`` is read once and
    used for every time-dependent value in the record.
    """
    repository = validate_repository(context.repository)
    run_id = parse_run_id(settings.workflow_run_id, context.run_id)
    if api is None:
        api = _api_for(settings, context)
    if now is None:
        now = utc_now()

    mode = resolve_mode(run_id, context.run_id)
    result = ReportResult()
    _log(f"Fetching metrics for workflow run {run_id} in {repository} ({mode} mode)", emit)

    branch = resolve_branch(context.ref, context.head_ref)
    _debug(f"resolved branch '{branch}' from ref '{context.ref}'", settings, emit)

    run = api.get_workflow_run(repository, run_id)
    jobs = api.list_jobs(repository, run_id)
    _debug(f"run state={run.state} outcome={run.outcome} jobs={len(jobs)}", settings, emit)

    self_job_id: int | None = None
    if mode == MODE_INLINE:
        job_name = settings.job_name or context.job
        if job_name:
            resolution = find_self_job(jobs, job_name, settings.runner_name or context.runner_name)
            self_job_id = resolution.job_id
            for problem in resolution.problems:
                _warn(problem, emit)
            result.problems.extend(resolution.problems)
        else:
            problem = {
                "severity": "warning",
                "message": "Current job name is unknown; reporting job not excluded",
                "code": "CIMETRICS-SELF-JOB-UNKNOWN",
            }
            _warn(problem, emit)
            result.problems.append(problem)
        if self_job_id is not None:
            _debug(f"excluding reporting job {self_job_id}", settings, emit)

    record = aggregate(run, jobs, mode, branch, repository, self_job_id=self_job_id, now=now)
    payload = record.to_payload()
    errors = validate_record(payload)
    if errors:
        raise MetricsError("Metrics record failed schema validation: " + "; ".join(errors))

    result.record = record
    result.payload = payload
    return result


def report_metrics(
    settings: Settings,
    context: RunContext,
    api: GitHubAPI | None = None,
    now: datetime | None = None,
    emit: bool = True,
) -> ReportResult:
    """Build the record, deliver it (or print it in dry-run mode) and write step outputs."""
    if not settings.dry_run:
        if not settings.api_url:
            raise InputError("api_url", "required unless dry_run is enabled")
        if not settings.api_key:
            raise InputError("api_key", "required unless dry_run is enabled")

    result = build_report(settings, context, api=api, now=now, emit=emit)
    record = result.record

    if settings.dry_run:
        if emit:
            print("=== DRY RUN MODE: JSON Payload ===")
            print(render_payload(result.payload))
            print("=== END JSON Payload ===")
    else:
        result.response_status = send_metrics(
            settings.api_url,
            settings.api_key,
            result.payload,
            timeout=settings.timeout_seconds,
        )
        result.delivered = True
        _log(f"Successfully sent metrics for workflow run {record.run_id}", emit)

    if emit or context.output_path is not None:
        write_outputs(
            {"workflow_run_id": str(record.run_id), "status": record.status},
            context.output_path,
        )
    return result
