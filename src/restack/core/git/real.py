"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import subprocess
from pathlib import Path

from restack.core.git.abc import Git, WorktreeInfo
from restack.core.git.parsing import parse_worktree_porcelain
from restack.core.subprocess import CommandError, run_subprocess_with_context

# ============================================================================
# Production Implementation
# ============================================================================


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the repository containing cwd."""
        try:
            result = subprocess.run(
                ["git", "rev-parse", "--show-toplevel"],
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandError(
                program="git",
                args=["rev-parse", "--show-toplevel"],
                returncode=None,
                stderr="",
                operation_context="find the repository root",
            ) from e
        if result.returncode != 0:
            return None
        return Path(result.stdout.strip())

    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        """List all worktrees in the repository."""
        result = run_subprocess_with_context(
            ["git", "worktree", "list", "--porcelain"],
            operation_context="list worktrees",
            cwd=repo_root,
        )
        return parse_worktree_porcelain(result.stdout)

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check if a worktree has uncommitted changes."""
        result = run_subprocess_with_context(
            ["git", "status", "--porcelain"],
            operation_context=f"check status of {cwd}",
            cwd=cwd,
        )
        return bool(result.stdout.strip())

    def ref_exists(self, repo_root: Path, ref: str) -> bool:
        """Check whether a fully-qualified ref exists."""
        result = subprocess.run(
            ["git", "show-ref", "--verify", "--quiet", ref],
            cwd=repo_root,
            capture_output=True,
            check=False,
        )
        return result.returncode == 0

    def fetch_remote(self, repo_root: Path, remote: str) -> None:
        """Fetch all branches from a remote."""
        run_subprocess_with_context(
            ["git", "fetch", remote],
            operation_context=f"fetch remote '{remote}'",
            cwd=repo_root,
        )

    def create_tracking_branch(self, repo_root: Path, branch: str, remote_ref: str) -> None:
        """Create a local tracking branch from a remote branch."""
        run_subprocess_with_context(
            ["git", "branch", "--track", branch, remote_ref],
            operation_context=f"create tracking branch '{branch}' from '{remote_ref}'",
            cwd=repo_root,
        )

    def add_worktree(self, repo_root: Path, path: Path, branch: str) -> None:
        """Add a worktree at path with an existing branch checked out."""
        run_subprocess_with_context(
            ["git", "worktree", "add", str(path), branch],
            operation_context=f"add worktree for branch '{branch}' at {path}",
            cwd=repo_root,
        )

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Remove a worktree."""
        cmd = ["git", "worktree", "remove"]
        if force:
            cmd.append("--force")
        cmd.append(str(path))
        run_subprocess_with_context(
            cmd,
            operation_context=f"remove worktree at {path}",
            cwd=repo_root,
        )

    def rebase(self, cwd: Path, onto: str, *, autostash: bool) -> None:
        """Rebase the branch checked out in cwd onto the given ref."""
        cmd = ["git", "rebase"]
        if autostash:
            cmd.append("--autostash")
        cmd.append(onto)
        run_subprocess_with_context(
            cmd,
            operation_context=f"rebase onto '{onto}'",
            cwd=cwd,
        )

    def push_force_with_lease(self, cwd: Path, remote: str, branch: str) -> None:
        """Force-push a branch, refusing if the remote moved since the last fetch."""
        run_subprocess_with_context(
            ["git", "push", "--force-with-lease", remote, branch],
            operation_context=f"push branch '{branch}' to '{remote}'",
            cwd=cwd,
        )

    def path_exists(self, path: Path) -> bool:
        """Check if a path exists on the filesystem."""
        return path.exists()
