"""Tests for cimetrics.models."""

from __future__ import annotations

import json

from cimetrics.models import NormalizedJob, PipelineMetricsRecord, RawJob, RawPipelineRun


def _record(**overrides: object) -> PipelineMetricsRecord:
    fields: dict[str, object] = {
        "provider": "github",
        "repository": "acme/app",
        "pipeline_id": 7,
        "pipeline_name": "CI",
        "run_id": 100,
        "run_attempt": 2,
        "run_name": "Fix the thing",
        "run_url": "https://github.com/acme/app/actions/runs/100",
        "status": "running",
        "mode": "external",
        "started_at": "2025-01-01T11:50:00Z",
        "triggered_by": "push",
        "actor": "octocat",
        "jobs": (
            NormalizedJob(name="lint", id="1", url=None, status="running"),
            NormalizedJob(
                name="test",
                id="2",
                url="https://example.test/2",
                status="success",
                duration_seconds=0,
                started_at="2025-01-01T11:50:00Z",
                completed_at="2025-01-01T11:50:00Z",
            ),
        ),
    }
    fields.update(overrides)
    return PipelineMetricsRecord(**fields)  # type: ignore[arg-type]


class TestFromApi:
    """Tests for building raw records from GitHub payloads."""

    def test_job_from_api(self) -> None:
        job = RawJob.from_api(
            {
                "id": 55,
                "name": "build",
                "status": "completed",
                "conclusion": "success",
                "started_at": "2025-01-01T00:00:00Z",
                "completed_at": None,
                "runner_name": "GitHub Actions 3",
                "html_url": "https://github.com/acme/app/actions/runs/1/job/55",
            }
        )
        assert job.id == 55
        assert job.state == "completed"
        assert job.outcome == "success"
        assert job.completed_at is None
        assert job.runner_name == "GitHub Actions 3"

    def test_job_from_sparse_payload(self) -> None:
        job = RawJob.from_api({"id": "9", "name": "x", "status": "queued"})
        assert job.id == 9
        assert job.outcome is None
        assert job.url is None

    def test_run_from_api(self) -> None:
        run = RawPipelineRun.from_api(
            {
                "id": 100,
                "workflow_id": 7,
                "name": "CI",
                "display_title": "Fix the thing",
                "status": "in_progress",
                "conclusion": None,
                "created_at": "2025-01-01T11:50:00Z",
                "updated_at": "2025-01-01T11:55:00Z",
                "event": "pull_request",
                "actor": {"login": "octocat"},
                "head_branch": "feature/x",
                "run_attempt": 3,
                "html_url": "https://github.com/acme/app/actions/runs/100",
            }
        )
        assert run.actor == "octocat"
        assert run.head_branch == "feature/x"
        assert run.attempt == 3
        assert run.outcome is None

    def test_run_defaults(self) -> None:
        run = RawPipelineRun.from_api({"id": 1, "status": "queued", "actor": None})
        assert run.actor is None
        assert run.attempt == 1
        assert run.workflow_id == 0


class TestPayload:
    """Tests for record serialization."""

    def test_absent_optionals_are_omitted(self) -> None:
        payload = _record().to_payload()
        for key in ("compute_seconds", "duration_seconds", "completed_at", "branch"):
            assert key not in payload
        assert payload["jobs"][0] == {"name": "lint", "id": "1", "status": "running"}

    def test_zero_duration_is_kept(self) -> None:
        payload = _record().to_payload()
        assert payload["jobs"][1]["duration_seconds"] == 0

    def test_present_optionals_are_included(self) -> None:
        payload = _record(compute_seconds=12, duration_seconds=30, completed_at="2025-01-01T12:00:00Z", branch="main").to_payload()
        assert payload["compute_seconds"] == 12
        assert payload["branch"] == "main"

    def test_json_round_trip_keeps_omissions(self) -> None:
        record = _record()
        text = json.dumps(record.to_payload())
        parsed = json.loads(text)
        assert "null" not in text
        assert PipelineMetricsRecord.from_payload(parsed) == record
        assert PipelineMetricsRecord.from_payload(parsed).to_payload() == parsed
