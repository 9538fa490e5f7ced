"""Data models for raw provider records and the published metrics record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

PROVIDER_GITHUB = "github"

MODE_INLINE = "inline"
MODE_EXTERNAL = "external"
MODES = (MODE_INLINE, MODE_EXTERNAL)


def _str_or_none(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _int_or_zero(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class RawJob:
    """A job as listed by the provider."""

    id: int
    name: str
    state: str
    outcome: str | None = None
    started_at: str | None = None
    completed_at: str | None = None
    runner_name: str | None = None
    url: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> RawJob:
        return cls(
            id=_int_or_zero(data.get("id")),
            name=str(data.get("name") or ""),
            state=str(data.get("status") or ""),
            outcome=_str_or_none(data.get("conclusion")),
            started_at=_str_or_none(data.get("started_at")),
            completed_at=_str_or_none(data.get("completed_at")),
            runner_name=_str_or_none(data.get("runner_name")),
            url=_str_or_none(data.get("html_url")),
        )


@dataclass(frozen=True)
class RawPipelineRun:
    """A workflow run as returned by the provider."""

    id: int
    workflow_id: int
    name: str | None
    title: str | None
    state: str
    outcome: str | None
    created_at: str | None
    updated_at: str | None
    event: str | None
    actor: str | None
    ref: str | None
    head_branch: str | None
    attempt: int
    url: str | None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> RawPipelineRun:
        actor = data.get("actor") if isinstance(data.get("actor"), dict) else {}
        head_branch = _str_or_none(data.get("head_branch"))
        return cls(
            id=_int_or_zero(data.get("id")),
            workflow_id=_int_or_zero(data.get("workflow_id")),
            name=_str_or_none(data.get("name")),
            title=_str_or_none(data.get("display_title")),
            state=str(data.get("status") or ""),
            outcome=_str_or_none(data.get("conclusion")),
            created_at=_str_or_none(data.get("created_at")),
            updated_at=_str_or_none(data.get("updated_at")),
            event=_str_or_none(data.get("event")),
            actor=_str_or_none(actor.get("login")),
            ref=_str_or_none(data.get("ref")),
            head_branch=head_branch,
            attempt=_int_or_zero(data.get("run_attempt")) or 1,
            url=_str_or_none(data.get("html_url")),
        )


@dataclass(frozen=True)
class NormalizedJob:
    name: str
    id: str
    url: str | None
    status: str
    duration_seconds: int | None = None
    started_at: str | None = None
    completed_at: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "id": self.id}
        if self.url is not None:
            payload["url"] = self.url
        payload["status"] = self.status
        if self.duration_seconds is not None:
            payload["duration_seconds"] = self.duration_seconds
        if self.started_at is not None:
            payload["started_at"] = self.started_at
        if self.completed_at is not None:
            payload["completed_at"] = self.completed_at
        return payload

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> NormalizedJob:
        return cls(
            name=data["name"],
            id=str(data["id"]),
            url=data.get("url"),
            status=data["status"],
            duration_seconds=data.get("duration_seconds"),
            started_at=data.get("started_at"),
            completed_at=data.get("completed_at"),
        )


# Optional record fields, omitted from the payload when absent.
OPTIONAL_RECORD_FIELDS = ("compute_seconds", "duration_seconds", "completed_at", "branch")


@dataclass(frozen=True)
class PipelineMetricsRecord:
    """The provider-agnostic metrics record handed to the ingestion service."""

    provider: str
    repository: str
    pipeline_id: int
    pipeline_name: str
    run_id: int
    run_attempt: int
    run_name: str
    run_url: str
    status: str
    mode: str
    started_at: str
    triggered_by: str
    actor: str
    jobs: tuple[NormalizedJob, ...] = field(default_factory=tuple)
    compute_seconds: int | None = None
    duration_seconds: int | None = None
    completed_at: str | None = None
    branch: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "provider": self.provider,
            "repository": self.repository,
            "pipeline_id": self.pipeline_id,
            "pipeline_name": self.pipeline_name,
            "run_id": self.run_id,
            "run_attempt": self.run_attempt,
            "run_name": self.run_name,
            "run_url": self.run_url,
            "status": self.status,
            "mode": self.mode,
            "started_at": self.started_at,
            "triggered_by": self.triggered_by,
            "actor": self.actor,
        }
        for name in OPTIONAL_RECORD_FIELDS:
            value = getattr(self, name)
            if value is not None:
                payload[name] = value
        payload["jobs"] = [job.to_payload() for job in self.jobs]
        return payload

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> PipelineMetricsRecord:
        return cls(
            provider=data["provider"],
            repository=data["repository"],
            pipeline_id=data["pipeline_id"],
            pipeline_name=data["pipeline_name"],
            run_id=data["run_id"],
            run_attempt=data["run_attempt"],
            run_name=data["run_name"],
            run_url=data["run_url"],
            status=data["status"],
            mode=data["mode"],
            started_at=data["started_at"],
            triggered_by=data["triggered_by"],
            actor=data["actor"],
            jobs=tuple(NormalizedJob.from_payload(job) for job in data.get("jobs", [])),
            compute_seconds=data.get("compute_seconds"),
            duration_seconds=data.get("duration_seconds"),
            completed_at=data.get("completed_at"),
            branch=data.get("branch"),
        )
