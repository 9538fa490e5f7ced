"""Tests for the cimetrics command line interface."""

from __future__ import annotations

import json
from pathlib import Path
from unittest import mock

import pytest

from cimetrics.cli import build_parser, main
from cimetrics.errors import RunNotFoundError
from cimetrics.exit_codes import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE
from cimetrics.models import RawJob, RawPipelineRun

RUN = RawPipelineRun(
    id=100,
    workflow_id=7,
    name="CI",
    title="CI",
    state="completed",
    outcome="failure",
    created_at="2025-01-01T11:50:00Z",
    updated_at="2025-01-01T11:55:00Z",
    event="push",
    actor="octocat",
    ref=None,
    head_branch="main",
    attempt=1,
    url="https://github.com/acme/app/actions/runs/100",
)

JOBS = [RawJob(id=1, name="test", state="completed", outcome="failure")]


@pytest.fixture
def runner_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for name in ("INPUT_API_URL", "INPUT_API_KEY", "INPUT_WORKFLOW_RUN_ID", "INPUT_DRY_RUN", "INPUT_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    output = tmp_path / "github_output"
    monkeypatch.setenv("GITHUB_REPOSITORY", "acme/app")
    monkeypatch.setenv("GITHUB_RUN_ID", "200")
    monkeypatch.setenv("GITHUB_REF", "refs/heads/main")
    monkeypatch.setenv("GITHUB_TOKEN", "tok")
    monkeypatch.setenv("GITHUB_OUTPUT", str(output))
    monkeypatch.chdir(tmp_path)
    return output


def _patch_api(run: RawPipelineRun = RUN, error: Exception | None = None):
    api = mock.MagicMock()
    if error:
        api.get_workflow_run.side_effect = error
    else:
        api.get_workflow_run.return_value = run
    api.list_jobs.return_value = JOBS
    return mock.patch("cimetrics.services.reporter.GitHubAPI", return_value=api)


def test_parser_requires_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_report_dry_run(runner_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with _patch_api():
        exit_code = main(["report", "--workflow-run-id", "100", "--dry-run"])
    assert exit_code == EXIT_SUCCESS
    out = capsys.readouterr().out
    assert '"status": "failure"' in out
    assert runner_env.read_text(encoding="utf-8") == "workflow_run_id=100\nstatus=failure\n"


def test_report_json_mode(runner_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with _patch_api(), mock.patch("cimetrics.services.reporter.send_metrics", return_value=200):
        exit_code = main(["report", "--json", "--workflow-run-id", "100", "--api-url", "https://m.test", "--api-key", "k"])
    assert exit_code == EXIT_SUCCESS
    payload = json.loads(capsys.readouterr().out)
    assert payload["command"] == "report"
    assert payload["status"] == "success"
    assert payload["data"]["delivered"] is True
    assert payload["data"]["record"]["mode"] == "external"


def test_report_invalid_run_id(runner_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["report", "--workflow-run-id", "abc", "--dry-run"])
    assert exit_code == EXIT_USAGE
    assert "Invalid workflow_run_id" in capsys.readouterr().err


def test_report_not_found_json(runner_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with _patch_api(error=RunNotFoundError("acme/app", 100)):
        exit_code = main(["report", "--json", "--workflow-run-id", "100", "--dry-run"])
    assert exit_code == EXIT_FAILURE
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "failure"
    assert payload["problems"][0]["code"] == "CIMETRICS-RUN-NOT-FOUND"


def test_inspect_malformed_config_is_usage_error(
    runner_env: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "bad.yml"
    config.write_text("api_url: [unclosed\n", encoding="utf-8")
    exit_code = main(["inspect", "--json", "--config", str(config)])
    assert exit_code == EXIT_USAGE
    payload = json.loads(capsys.readouterr().out)
    assert payload["problems"][0]["code"] == "CIMETRICS-INVALID-INPUT"
    assert "not valid YAML" in payload["problems"][0]["message"]


def test_inspect_prints_record(runner_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with _patch_api():
        exit_code = main(["inspect", "--workflow-run-id", "100"])
    assert exit_code == EXIT_SUCCESS
    out = capsys.readouterr().out
    record = json.loads(out[out.index("{") :])
    assert record["run_id"] == 100
    assert record["jobs"][0]["status"] == "failure"
    assert not runner_env.exists()
