"""Tests for cimetrics.status."""

from __future__ import annotations

import pytest

from cimetrics.status import (
    ALL_STATUSES,
    VALID_OUTCOMES,
    classify_job,
    classify_pipeline,
    infer_pipeline_status,
)


class TestClassify:
    """Tests for classify_job and classify_pipeline."""

    @pytest.mark.parametrize("outcome", sorted(VALID_OUTCOMES))
    def test_completed_with_valid_outcome_is_passed_through(self, outcome: str) -> None:
        assert classify_job("completed", outcome) == outcome
        assert classify_pipeline("completed", outcome) == outcome

    @pytest.mark.parametrize(
        ("state", "expected"),
        [("queued", "queued"), ("in_progress", "running"), ("waiting", "pending")],
    )
    @pytest.mark.parametrize("outcome", [None, "success", "failure", "neutral"])
    def test_live_states_ignore_outcome(self, state: str, outcome: str | None, expected: str) -> None:
        assert classify_job(state, outcome) == expected

    @pytest.mark.parametrize("outcome", ["neutral", "action_required", "stale", "startup_failure", None])
    def test_completed_with_unknown_outcome_defaults_to_running(self, outcome: str | None) -> None:
        assert classify_job("completed", outcome) == "running"

    @pytest.mark.parametrize("state", ["requested", "pending", "", None, "something-new"])
    def test_unrecognized_state_defaults_to_running(self, state: str | None) -> None:
        assert classify_pipeline(state, None) == "running"

    def test_result_is_always_in_closed_set(self) -> None:
        states = ["completed", "queued", "in_progress", "waiting", "requested", None]
        outcomes = ["success", "failure", "neutral", "skipped", None, "weird"]
        for state in states:
            for outcome in outcomes:
                assert classify_job(state, outcome) in ALL_STATUSES


class TestInferPipelineStatus:
    """Tests for infer_pipeline_status precedence."""

    def test_completed_pipeline_record_wins(self) -> None:
        assert infer_pipeline_status(["running", "failure"], "completed", "success") == "success"

    def test_completed_pipeline_with_invalid_outcome_falls_through_to_jobs(self) -> None:
        assert infer_pipeline_status(["success"], "completed", "neutral") == "success"

    @pytest.mark.parametrize(
        ("state", "expected"),
        [("queued", "queued"), ("waiting", "pending"), ("in_progress", "running"), ("requested", "running")],
    )
    def test_no_jobs_uses_live_pipeline_state(self, state: str, expected: str) -> None:
        assert infer_pipeline_status([], state, None) == expected

    def test_failure_beats_running(self) -> None:
        assert infer_pipeline_status(["success", "failure", "running"], "in_progress", None) == "failure"

    def test_cancelled_beats_success(self) -> None:
        assert infer_pipeline_status(["success", "cancelled", "success"], "in_progress", None) == "cancelled"

    def test_failure_beats_cancelled(self) -> None:
        assert infer_pipeline_status(["cancelled", "failure"], "in_progress", None) == "failure"

    def test_success_and_skipped_is_success(self) -> None:
        assert infer_pipeline_status(["success", "skipped"], "in_progress", None) == "success"

    def test_all_skipped_is_success(self) -> None:
        assert infer_pipeline_status(["skipped", "skipped"], "in_progress", None) == "success"

    @pytest.mark.parametrize(
        ("jobs", "expected"),
        [
            (["success", "running", "pending"], "pending"),
            (["running", "queued"], "queued"),
            (["success", "running"], "running"),
            (["queued", "pending", "running"], "pending"),
        ],
    )
    def test_most_specific_active_state(self, jobs: list[str], expected: str) -> None:
        assert infer_pipeline_status(jobs, "in_progress", None) == expected

    @pytest.mark.parametrize(
        ("state", "expected"),
        [("queued", "queued"), ("waiting", "pending"), ("in_progress", "running")],
    )
    def test_timed_out_job_falls_back_to_pipeline_state(self, state: str, expected: str) -> None:
        assert infer_pipeline_status(["success", "timed_out"], state, None) == expected

    def test_accepts_generator(self) -> None:
        assert infer_pipeline_status((s for s in ["success"]), "in_progress", None) == "success"
