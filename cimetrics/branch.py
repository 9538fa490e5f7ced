"""Source branch resolution from git refs."""

from __future__ import annotations

HEADS_PREFIX = "refs/heads/"
TAGS_PREFIX = "refs/tags/"
PULL_PREFIX = "refs/pull/"


def resolve_branch(ref: str, pull_request_head_ref: str = "") -> str:
    """Derive the human-meaningful branch name for a run.

    The pull request head ref wins over the synthetic merge ref. Pull request
    refs are returned unchanged because they already identify the merge ref.
    """
    if pull_request_head_ref:
        return pull_request_head_ref
    ref = ref or ""
    if ref.startswith(HEADS_PREFIX):
        return ref[len(HEADS_PREFIX) :]
    if ref.startswith(TAGS_PREFIX):
        return ref[len(TAGS_PREFIX) :]
    if ref.startswith(PULL_PREFIX):
        return ref
    return ref
