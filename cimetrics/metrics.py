"""Metrics aggregation for a single pipeline run.

The current instant is captured by the caller and threaded through as
``now`` so a given input always yields the same record.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from cimetrics.models import (
    MODE_EXTERNAL,
    MODE_INLINE,
    MODES,
    PROVIDER_GITHUB,
    NormalizedJob,
    PipelineMetricsRecord,
    RawJob,
    RawPipelineRun,
)
from cimetrics.self_job import exclude_job
from cimetrics.status import COMPLETED_STATE, classify_job, infer_pipeline_status
from cimetrics.timestamps import elapsed_seconds, format_timestamp, parse_timestamp, utc_now


def job_duration(started_at: str | None, completed_at: str | None) -> int | None:
    """Duration of a job in whole seconds, or None when it cannot be known.

    Zero is a real value (an instant job) and is kept distinct from None.
    Spans that end before they start are treated as unknown.
    """
    start = parse_timestamp(started_at)
    end = parse_timestamp(completed_at)
    if start is None or end is None:
        return None
    seconds = elapsed_seconds(start, end)
    return seconds if seconds >= 0 else None


def normalize_job(job: RawJob) -> NormalizedJob:
    return NormalizedJob(
        name=job.name,
        id=str(job.id),
        url=job.url,
        status=classify_job(job.state, job.outcome),
        duration_seconds=job_duration(job.started_at, job.completed_at),
        started_at=job.started_at,
        completed_at=job.completed_at,
    )


def compute_seconds(jobs: Sequence[NormalizedJob]) -> int | None:
    """Sum of known job durations; None unless the sum is strictly positive."""
    total = sum(job.duration_seconds for job in jobs if job.duration_seconds is not None)
    return total if total > 0 else None


def effective_completion(run: RawPipelineRun, mode: str, now: datetime) -> str | None:
    """Completion timestamp to publish for ``run``.

    A completed run reports its own update time. In inline mode the run is
    treated as finishing now, preferring the provider's update time over the
    local clock. An external observer of an unfinished run reports none.
    """
    if run.state == COMPLETED_STATE and run.updated_at:
        return run.updated_at
    if mode == MODE_INLINE:
        return run.updated_at or format_timestamp(now)
    return None


def run_duration(started_at: str | None, completed_at: str | None, now: datetime) -> int | None:
    start = parse_timestamp(started_at)
    if start is None:
        return None
    end = parse_timestamp(completed_at) or now
    seconds = elapsed_seconds(start, end)
    return seconds if seconds >= 0 else None


def select_branch(run: RawPipelineRun, mode: str, resolved_branch: str | None) -> str | None:
    if mode == MODE_EXTERNAL and run.head_branch:
        return run.head_branch
    return resolved_branch or None


def aggregate(
    run: RawPipelineRun,
    jobs: Sequence[RawJob],
    mode: str,
    resolved_branch: str | None,
    repository: str,
    self_job_id: int | None = None,
    now: datetime | None = None,
) -> PipelineMetricsRecord:
    """Build the metrics record for ``run``.

    Args:
        run: The pipeline run as fetched from the provider.
        jobs: All jobs of the run, in provider order.
        mode: ``inline`` when reporting from inside the run, else ``external``.
        resolved_branch: Branch resolved from the invoking context.
        repository: ``owner/name`` of the repository.
        self_job_id: Job to leave out, resolved by ``find_self_job``.
        now: The evaluation instant. Read once from the clock when omitted.

    Returns:
        The immutable record ready for delivery.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown mode '{mode}' (expected one of {', '.join(MODES)})")
    if now is None:
        now = utc_now()

    normalized = tuple(normalize_job(job) for job in exclude_job(jobs, self_job_id))
    completed_at = effective_completion(run, mode, now)
    started_at = run.created_at or ""

    return PipelineMetricsRecord(
        provider=PROVIDER_GITHUB,
        repository=repository,
        pipeline_id=run.workflow_id,
        pipeline_name=run.name or str(run.workflow_id),
        run_id=run.id,
        run_attempt=run.attempt,
        run_name=run.title or run.name or str(run.id),
        run_url=run.url or "",
        status=infer_pipeline_status((job.status for job in normalized), run.state, run.outcome),
        mode=mode,
        started_at=started_at,
        triggered_by=run.event or "unknown",
        actor=run.actor or "unknown",
        jobs=normalized,
        compute_seconds=compute_seconds(normalized),
        duration_seconds=run_duration(started_at, completed_at, now),
        completed_at=completed_at,
        branch=select_branch(run, mode, resolved_branch),
    )
