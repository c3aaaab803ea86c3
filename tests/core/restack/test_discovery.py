"""Tests for resolving the PRs that make up a stack."""

from pathlib import Path

import pytest

from restack.core.discovery import (
    NoStackFoundError,
    PRLookupError,
    PRNotOpenError,
    dedupe_pr_numbers,
    discover_worktree_prs,
    fetch_requested_prs,
)
from restack.core.git.abc import WorktreeInfo
from restack.core.github.types import StackedPR
from restack.core.subprocess import CommandError
from tests.fakes.github import FakeGitHub

REPO = Path("/fake/repo")

PR_A = StackedPR(1, "feat-a", "main", "OPEN")
PR_B = StackedPR(2, "feat-b", "feat-a", "OPEN")
PR_C = StackedPR(3, "feat-c", "main", "OPEN")
MERGED = StackedPR(5, "old", "main", "MERGED")


def _wt(name: str | None, path: str) -> WorktreeInfo:
    return WorktreeInfo(path=Path(path), branch=name)


def test_dedupe_keeps_first_occurrence() -> None:
    assert dedupe_pr_numbers([3, 1, 3, 2, 1]) == [3, 1, 2]


def test_requested_prs_are_fetched_in_order_once() -> None:
    github = FakeGitHub(prs=[PR_A, PR_B])

    prs = fetch_requested_prs(github, REPO, [2, 1, 2])

    assert prs == [PR_B, PR_A]
    assert github.get_pr_calls == ["2", "1"]


def test_requested_merged_pr_is_rejected() -> None:
    github = FakeGitHub(prs=[PR_A, MERGED])

    with pytest.raises(PRNotOpenError) as exc_info:
        fetch_requested_prs(github, REPO, [1, 5])

    assert str(exc_info.value) == "PR #5 is merged, not open"


def test_requested_pr_lookup_failure_carries_gh_diagnostics() -> None:
    github = FakeGitHub(prs=[PR_A])

    with pytest.raises(PRLookupError) as exc_info:
        fetch_requested_prs(github, REPO, [99])

    assert exc_info.value.pr_number == 99
    assert "failed to get info for PR #99" in str(exc_info.value)
    assert "no pull requests found for 99" in str(exc_info.value)


def test_worktree_branches_map_to_open_prs_in_listing_order() -> None:
    github = FakeGitHub(prs=[PR_A, PR_B, PR_C])
    worktrees = [
        _wt("main", "/repo"),
        _wt("feat-b", "/wt/b"),
        _wt(None, "/wt/detached"),
        _wt("feat-a", "/wt/a"),
    ]

    prs = discover_worktree_prs(github, REPO, worktrees, limit=100)

    assert prs == [PR_B, PR_A]
    assert github.get_pr_calls == []


def test_same_pr_is_reported_once() -> None:
    github = FakeGitHub(prs=[PR_A])
    worktrees = [_wt("feat-a", "/wt/a"), _wt("feat-a", "/wt/a2")]

    assert discover_worktree_prs(github, REPO, worktrees, limit=100) == [PR_A]


def test_no_open_prs_for_worktrees() -> None:
    github = FakeGitHub(prs=[PR_C, MERGED])
    worktrees = [_wt("main", "/repo"), _wt("old", "/wt/old")]

    with pytest.raises(NoStackFoundError, match="no open PRs found for checked-out"):
        discover_worktree_prs(github, REPO, worktrees, limit=100)


def test_full_listing_falls_back_to_per_branch_lookup() -> None:
    github = FakeGitHub(prs=[PR_C, PR_A])
    worktrees = [_wt("main", "/repo"), _wt("feat-a", "/wt/a")]

    prs = discover_worktree_prs(github, REPO, worktrees, limit=1)

    assert prs == [PR_A]
    assert github.list_open_prs_calls == [1]
    assert github.get_pr_calls == ["main", "feat-a"]


def test_full_page_with_shared_heads_still_falls_back() -> None:
    fork_1 = StackedPR(10, "patch-1", "main", "OPEN")
    fork_2 = StackedPR(11, "patch-1", "main", "OPEN")
    beyond_page = StackedPR(12, "feat-z", "main", "OPEN")
    github = FakeGitHub(prs=[fork_1, fork_2, PR_C, beyond_page])
    worktrees = [_wt("feat-z", "/wt/z")]

    prs = discover_worktree_prs(github, REPO, worktrees, limit=3)

    assert prs == [beyond_page]
    assert github.get_pr_calls == ["feat-z"]


def test_first_listed_pr_wins_for_a_shared_head() -> None:
    fork_1 = StackedPR(10, "patch-1", "main", "OPEN")
    fork_2 = StackedPR(11, "patch-1", "main", "OPEN")
    github = FakeGitHub(prs=[fork_1, fork_2])

    prs = discover_worktree_prs(github, REPO, [_wt("patch-1", "/wt/p")], limit=100)

    assert prs == [fork_1]


def test_fallback_ignores_pr_for_a_different_head() -> None:
    numbered = StackedPR(12, "elsewhere", "main", "OPEN")
    github = FakeGitHub(prs=[PR_C, numbered])
    worktrees = [_wt("12", "/wt/12")]

    with pytest.raises(NoStackFoundError):
        discover_worktree_prs(github, REPO, worktrees, limit=1)


def test_fallback_ignores_closed_pr() -> None:
    closed = StackedPR(8, "feat-x", "main", "CLOSED")
    github = FakeGitHub(prs=[PR_C, closed])
    worktrees = [_wt("feat-x", "/wt/x"), _wt("feat-c", "/wt/c")]

    assert discover_worktree_prs(github, REPO, worktrees, limit=1) == [PR_C]


def test_undecodable_listing_propagates() -> None:
    github = FakeGitHub(list_error=ValueError("Failed to parse open PRs list"))

    with pytest.raises(ValueError, match="Failed to parse open PRs list"):
        discover_worktree_prs(github, REPO, [_wt("feat-a", "/wt/a")], limit=100)


def test_listing_failure_propagates() -> None:
    error = CommandError(
        program="gh",
        args=["pr", "list"],
        returncode=4,
        stderr="gh auth login required",
        operation_context="list open PRs",
    )
    github = FakeGitHub(list_error=error)

    with pytest.raises(CommandError, match="gh auth login required"):
        discover_worktree_prs(github, REPO, [_wt("feat-a", "/wt/a")], limit=100)
