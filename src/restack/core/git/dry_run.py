"""Dry-run Git wrapper.

This module provides a Git wrapper that prevents execution of mutating
operations while delegating read-only operations to the wrapped implementation.
"""

from pathlib import Path

from restack.cli.output import user_output
from restack.core.git.abc import Git, WorktreeInfo

# ============================================================================
# Dry-run Wrapper
# ============================================================================


class DryRunGit(Git):
    """Wrapper that prints mutating git operations instead of running them.

    Read-only operations (worktree listing, status, ref checks) are delegated
    so that preflight validation stays real during a dry run.

    Usage:
        real_ops = RealGit()
        dry_run_ops = DryRunGit(real_ops)

        # Prints "[DRY RUN] Would run: git rebase origin/main" instead of rebasing
        dry_run_ops.rebase(worktree, "origin/main", autostash=False)
    """

    def __init__(self, wrapped: Git) -> None:
        """Create a dry-run wrapper around a Git implementation.

        Args:
            wrapped: The Git implementation to wrap (usually RealGit or FakeGit)
        """
        self._wrapped = wrapped

    # Read-only operations: delegate to wrapped implementation

    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get repository root (read-only, delegates to wrapped)."""
        return self._wrapped.get_repository_root(cwd)

    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        """List all worktrees (read-only, delegates to wrapped)."""
        return self._wrapped.list_worktrees(repo_root)

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check for uncommitted changes (read-only, delegates to wrapped)."""
        return self._wrapped.has_uncommitted_changes(cwd)

    def ref_exists(self, repo_root: Path, ref: str) -> bool:
        """Check ref existence (read-only, delegates to wrapped)."""
        return self._wrapped.ref_exists(repo_root, ref)

    def path_exists(self, path: Path) -> bool:
        """Check path existence (read-only, delegates to wrapped)."""
        return self._wrapped.path_exists(path)

    # Mutating operations: print dry-run message instead of executing

    def fetch_remote(self, repo_root: Path, remote: str) -> None:
        """Print dry-run message instead of fetching."""
        user_output(f"[DRY RUN] Would run: git fetch {remote}")

    def create_tracking_branch(self, repo_root: Path, branch: str, remote_ref: str) -> None:
        """Print dry-run message instead of creating a tracking branch."""
        user_output(f"[DRY RUN] Would run: git branch --track {branch} {remote_ref}")

    def add_worktree(self, repo_root: Path, path: Path, branch: str) -> None:
        """Print dry-run message instead of adding a worktree."""
        user_output(f"[DRY RUN] Would run: git worktree add {path} {branch}")

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Print dry-run message instead of removing a worktree."""
        force_flag = "--force " if force else ""
        user_output(f"[DRY RUN] Would run: git worktree remove {force_flag}{path}")

    def rebase(self, cwd: Path, onto: str, *, autostash: bool) -> None:
        """Print dry-run message instead of rebasing."""
        autostash_flag = "--autostash " if autostash else ""
        user_output(f"[DRY RUN] Would run: git rebase {autostash_flag}{onto} (in {cwd})")

    def push_force_with_lease(self, cwd: Path, remote: str, branch: str) -> None:
        """Print dry-run message instead of pushing."""
        user_output(f"[DRY RUN] Would run: git push --force-with-lease {remote} {branch}")
