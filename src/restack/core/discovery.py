"""Resolve which PRs make up the stack to restack.

PRs come either from explicit PR numbers given on the command line, or from
the branches currently checked out in the repository's worktrees.
"""

import logging
from pathlib import Path

from restack.core.git.abc import WorktreeInfo
from restack.core.github.abc import GitHub
from restack.core.github.types import StackedPR
from restack.core.subprocess import CommandError

logger = logging.getLogger(__name__)


class PRLookupError(Exception):
    """A requested PR could not be fetched from GitHub."""

    def __init__(self, pr_number: int, detail: str) -> None:
        self.pr_number = pr_number
        super().__init__(f"failed to get info for PR #{pr_number}\n{detail}")


class PRNotOpenError(Exception):
    """A requested PR exists but is merged or closed."""

    def __init__(self, pr: StackedPR) -> None:
        self.pr = pr
        super().__init__(f"PR #{pr.number} is {pr.state.lower()}, not open")


class NoStackFoundError(Exception):
    """No open PR matches any checked-out worktree branch."""

    def __init__(self) -> None:
        super().__init__("no open PRs found for checked-out worktree branches")


def dedupe_pr_numbers(numbers: list[int]) -> list[int]:
    """Drop repeated PR numbers, keeping the first occurrence."""
    seen: set[int] = set()
    unique: list[int] = []
    for number in numbers:
        if number not in seen:
            seen.add(number)
            unique.append(number)
    return unique


def fetch_requested_prs(github: GitHub, repo_root: Path, numbers: list[int]) -> list[StackedPR]:
    """Fetch PRs named on the command line, in the order given.

    Raises:
        PRLookupError: If gh cannot return a PR
        PRNotOpenError: If a PR is merged or closed
    """
    prs: list[StackedPR] = []
    for number in dedupe_pr_numbers(numbers):
        try:
            pr = github.get_pr(repo_root, str(number))
        except (CommandError, ValueError) as e:
            raise PRLookupError(number, str(e)) from e
        if not pr.is_open:
            raise PRNotOpenError(pr)
        prs.append(pr)
    return prs


def _lookup_branch_pr(github: GitHub, repo_root: Path, branch: str) -> StackedPR | None:
    """Best-effort lookup of the open PR for a branch.

    Any failure means "this branch has no open PR".
    """
    try:
        pr = github.get_pr(repo_root, branch)
    except (CommandError, ValueError) as e:
        logger.debug("No PR found for branch %s: %s", branch, e)
        return None
    if not pr.is_open or pr.head_ref != branch:
        return None
    return pr


def discover_worktree_prs(
    github: GitHub,
    repo_root: Path,
    worktrees: list[WorktreeInfo],
    *,
    limit: int,
) -> list[StackedPR]:
    """Find the open PRs whose head branches are checked out in worktrees.

    Open PRs are listed once; branches missing from that page (e.g. more open
    PRs than the limit) are looked up individually on a best-effort basis.

    Args:
        github: GitHub integration
        repo_root: Repository root
        worktrees: Worktrees in listing order; PRs are returned in this order
        limit: Page size for the open PR listing

    Raises:
        CommandError: If listing open PRs fails
        ValueError: If the listing cannot be decoded
        NoStackFoundError: If no worktree branch has an open PR
    """
    listed = github.list_open_prs(repo_root, limit=limit)
    logger.debug("Found %d open PRs", len(listed))
    # Counts rows; several rows can share a head name
    listing_full = len(listed) >= limit

    open_prs: dict[str, StackedPR] = {}
    for pr in listed:
        open_prs.setdefault(pr.head_ref, pr)

    prs: list[StackedPR] = []
    seen: set[int] = set()
    for wt in worktrees:
        if wt.branch is None:
            continue
        pr = open_prs.get(wt.branch)
        if pr is None and listing_full:
            pr = _lookup_branch_pr(github, repo_root, wt.branch)
        if pr is None or pr.number in seen:
            continue
        seen.add(pr.number)
        prs.append(pr)

    if not prs:
        raise NoStackFoundError()

    return prs
