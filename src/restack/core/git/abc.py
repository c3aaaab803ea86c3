"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
codebase more testable and maintainable.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- DryRunGit: Wrapper that delegates reads and prints intended writes
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class WorktreeInfo:
    """Information about a single git worktree."""

    path: Path
    branch: str | None


# ============================================================================
# Abstract Interface
# ============================================================================


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the repository containing cwd.

        Returns:
            Repository root, or None if cwd is not inside a git repository
        """
        ...

    @abstractmethod
    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        """List all worktrees in the repository."""
        ...

    @abstractmethod
    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check if a worktree has uncommitted changes.

        Uses git status --porcelain to detect any uncommitted changes.

        Args:
            cwd: Working directory to check

        Returns:
            True if there are any uncommitted changes (staged, modified, or untracked)
        """
        ...

    @abstractmethod
    def ref_exists(self, repo_root: Path, ref: str) -> bool:
        """Check whether a fully-qualified ref exists.

        Args:
            repo_root: Path to the repository root
            ref: Full ref name (e.g. 'refs/heads/feat-a', 'refs/remotes/origin/main')
        """
        ...

    @abstractmethod
    def fetch_remote(self, repo_root: Path, remote: str) -> None:
        """Fetch all branches from a remote."""
        ...

    @abstractmethod
    def create_tracking_branch(self, repo_root: Path, branch: str, remote_ref: str) -> None:
        """Create a local tracking branch from a remote branch.

        Args:
            repo_root: Path to the repository root
            branch: Name for the local branch (e.g., 'feat-a')
            remote_ref: Remote reference to track (e.g., 'origin/feat-a')
        """
        ...

    @abstractmethod
    def add_worktree(self, repo_root: Path, path: Path, branch: str) -> None:
        """Add a worktree at path with an existing branch checked out."""
        ...

    @abstractmethod
    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Remove a worktree.

        Args:
            repo_root: Path to the git repository root
            path: Path to the worktree to remove
            force: True to force removal even if worktree has uncommitted changes
        """
        ...

    @abstractmethod
    def rebase(self, cwd: Path, onto: str, *, autostash: bool) -> None:
        """Rebase the branch checked out in cwd onto the given ref.

        A failed rebase is left in progress so the operator can resolve it.

        Args:
            cwd: Worktree whose checked-out branch is rebased
            onto: Ref to rebase onto (local branch or remote-tracking ref)
            autostash: Pass --autostash to stash local changes around the rebase
        """
        ...

    @abstractmethod
    def push_force_with_lease(self, cwd: Path, remote: str, branch: str) -> None:
        """Force-push a branch, refusing if the remote moved since the last fetch."""
        ...

    @abstractmethod
    def path_exists(self, path: Path) -> bool:
        """Check if a path exists on the filesystem.

        In production (RealGit), this delegates to Path.exists(). In tests
        (FakeGit), this checks an in-memory set of existing paths to avoid
        filesystem I/O.
        """
        ...

    def branch_exists_locally(self, repo_root: Path, branch: str) -> bool:
        """Check whether a local branch exists."""
        return self.ref_exists(repo_root, f"refs/heads/{branch}")

    def remote_branch_exists(self, repo_root: Path, remote: str, branch: str) -> bool:
        """Check whether a remote-tracking branch exists (as of the last fetch)."""
        return self.ref_exists(repo_root, f"refs/remotes/{remote}/{branch}")
