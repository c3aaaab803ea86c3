"""Parsing of git plumbing output."""

from pathlib import Path

from restack.core.git.abc import WorktreeInfo

BRANCH_REF_PREFIX = "refs/heads/"
WORKTREE_PREFIX = "worktree "
BRANCH_PREFIX = "branch "


def parse_worktree_porcelain(output: str) -> list[WorktreeInfo]:
    """Parse `git worktree list --porcelain` output into WorktreeInfo records.

    The listing is a sequence of blocks separated by blank lines. Each block
    starts with `worktree <path>` and may contain `branch refs/heads/<name>`.
    Detached or bare worktrees have no branch line and get branch=None.
    A branch line is only ever attached to the most recent worktree line of
    the current block.
    """
    worktrees: list[WorktreeInfo] = []
    current_path: Path | None = None
    current_branch: str | None = None

    for line in output.splitlines():
        if line.startswith(WORKTREE_PREFIX):
            if current_path is not None:
                worktrees.append(WorktreeInfo(path=current_path, branch=current_branch))
            current_path = Path(line[len(WORKTREE_PREFIX) :])
            current_branch = None
        elif line.startswith(BRANCH_PREFIX):
            if current_path is None:
                continue
            branch_ref = line[len(BRANCH_PREFIX) :]
            if branch_ref.startswith(BRANCH_REF_PREFIX):
                current_branch = branch_ref[len(BRANCH_REF_PREFIX) :]
        elif line == "" and current_path is not None:
            worktrees.append(WorktreeInfo(path=current_path, branch=current_branch))
            current_path = None
            current_branch = None

    if current_path is not None:
        worktrees.append(WorktreeInfo(path=current_path, branch=current_branch))

    return worktrees
