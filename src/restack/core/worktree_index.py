"""Branch to worktree location mapping."""

from pathlib import Path

from restack.core.git.abc import WorktreeInfo
from restack.core.git.parsing import parse_worktree_porcelain

WorktreeIndex = dict[str, Path]


def build_worktree_index(worktrees: list[WorktreeInfo]) -> WorktreeIndex:
    """Map each checked-out branch to its worktree path.

    Worktrees without a branch (detached HEAD) are skipped. If a branch were
    ever listed twice, the last listing wins.
    """
    index: WorktreeIndex = {}
    for wt in worktrees:
        if wt.branch is not None:
            index[wt.branch] = wt.path
    return index


def parse_worktree_index(output: str) -> WorktreeIndex:
    """Build the index straight from `git worktree list --porcelain` output."""
    return build_worktree_index(parse_worktree_porcelain(output))
