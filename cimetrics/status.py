"""Status classification for pipeline runs and jobs.

Provider lifecycle states form an open vocabulary; everything is mapped onto
the closed set below. Unrecognized states and unrecognized outcomes of
completed entities fall back to ``running``.
"""

from __future__ import annotations

from typing import Iterable

SUCCESS = "success"
FAILURE = "failure"
CANCELLED = "cancelled"
SKIPPED = "skipped"
TIMED_OUT = "timed_out"
RUNNING = "running"
QUEUED = "queued"
PENDING = "pending"

ALL_STATUSES: frozenset[str] = frozenset(
    {SUCCESS, FAILURE, CANCELLED, SKIPPED, TIMED_OUT, RUNNING, QUEUED, PENDING}
)

# Outcomes reported verbatim once the provider marks the entity completed.
VALID_OUTCOMES: frozenset[str] = frozenset({SUCCESS, FAILURE, CANCELLED, SKIPPED, TIMED_OUT})

COMPLETED_STATE = "completed"

LIVE_STATE_MAP: dict[str, str] = {
    "queued": QUEUED,
    "in_progress": RUNNING,
    "waiting": PENDING,
}

DEFAULT_LIVE_STATUS = RUNNING

# Most specific first.
ACTIVE_PRECEDENCE: tuple[str, ...] = (PENDING, QUEUED, RUNNING)


def _classify(state: str | None, outcome: str | None) -> str:
    if state == COMPLETED_STATE and outcome in VALID_OUTCOMES:
        return outcome
    return LIVE_STATE_MAP.get(state or "", DEFAULT_LIVE_STATUS)


def classify_job(state: str | None, outcome: str | None) -> str:
    """Map a job's (state, outcome) pair onto the closed status set."""
    return _classify(state, outcome)


def classify_pipeline(state: str | None, outcome: str | None) -> str:
    """Map a pipeline run's (state, outcome) pair onto the closed status set."""
    return _classify(state, outcome)


def infer_pipeline_status(
    job_statuses: Iterable[str],
    pipeline_state: str | None,
    pipeline_outcome: str | None,
) -> str:
    """Infer the overall status of a run from its jobs.

    A completed pipeline record with a valid outcome always wins. Otherwise a
    failure or cancellation in any job is reported even while other jobs are
    still active, and success is only claimed once every job succeeded or was
    skipped.
    """
    if pipeline_state == COMPLETED_STATE and pipeline_outcome in VALID_OUTCOMES:
        return pipeline_outcome

    statuses = list(job_statuses)
    if not statuses:
        return LIVE_STATE_MAP.get(pipeline_state or "", DEFAULT_LIVE_STATUS)

    present = set(statuses)
    if FAILURE in present:
        return FAILURE
    if CANCELLED in present:
        return CANCELLED
    for active in ACTIVE_PRECEDENCE:
        if active in present:
            return active
    if present <= {SUCCESS, SKIPPED}:
        return SUCCESS
    return LIVE_STATE_MAP.get(pipeline_state or "", DEFAULT_LIVE_STATUS)
