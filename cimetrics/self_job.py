"""Self-job resolution for inline reporting.

When the reporter runs as a step inside the run it reports on, its own job
shows up in the job listing. Resolution is split in two: ``find_self_job``
works out which job id is ours, ``exclude_job`` drops it. Neither guesses
between same-named jobs; dropping a real job is worse than reporting on
ourselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from cimetrics.models import RawJob


@dataclass(frozen=True)
class SelfJobResolution:
    job_id: int | None = None
    problems: list[dict[str, Any]] = field(default_factory=list)


def _warning(message: str, code: str) -> dict[str, Any]:
    return {"severity": "warning", "message": message, "code": code}


def find_self_job(
    jobs: Sequence[RawJob],
    current_job_name: str,
    current_runner_name: str | None = None,
) -> SelfJobResolution:
    """Identify the job that corresponds to the running reporter.

    Args:
        jobs: Jobs of the run, in provider order.
        current_job_name: Name of the job executing the reporter.
        current_runner_name: Runner identity used to break ties between
            same-named jobs.

    Returns:
        The resolved job id, or None with a warning when the job cannot be
        identified unambiguously.
    """
    matches = [job for job in jobs if job.name == current_job_name]
    if not matches:
        return SelfJobResolution(
            problems=[
                _warning(
                    f"No job named '{current_job_name}' found in run; nothing excluded",
                    "CIMETRICS-SELF-JOB-NOT-FOUND",
                )
            ]
        )
    if len(matches) == 1:
        return SelfJobResolution(job_id=matches[0].id)

    if current_runner_name:
        on_runner = [job for job in matches if job.runner_name == current_runner_name]
        if len(on_runner) == 1:
            return SelfJobResolution(job_id=on_runner[0].id)
        message = (
            f"{len(matches)} jobs named '{current_job_name}' and {len(on_runner)} "
            f"on runner '{current_runner_name}'; nothing excluded"
        )
    else:
        message = (
            f"{len(matches)} jobs named '{current_job_name}' and no runner name "
            "to disambiguate; nothing excluded"
        )
    return SelfJobResolution(problems=[_warning(message, "CIMETRICS-SELF-JOB-AMBIGUOUS")])


def exclude_job(jobs: Sequence[RawJob], job_id: int | None) -> list[RawJob]:
    """Return jobs in order, minus the job with ``job_id`` when one is given."""
    if job_id is None:
        return list(jobs)
    return [job for job in jobs if job.id != job_id]
