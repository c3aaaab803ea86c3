"""Abstract base class for GitHub operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from restack.core.github.types import StackedPR


class GitHub(ABC):
    """Abstract interface for GitHub operations.

    All implementations (real and fake) must implement this interface.
    Every operation is read-only.
    """

    @abstractmethod
    def get_pr(self, repo_root: Path, reference: str) -> StackedPR:
        """Get a single PR by number or head branch name.

        Args:
            repo_root: Repository root directory
            reference: PR number (as a string) or head branch name

        Returns:
            StackedPR for the referenced PR, in any state

        Raises:
            CommandError: If gh fails (no such PR, not authenticated, not installed)
            ValueError: If gh output cannot be decoded
        """
        ...

    @abstractmethod
    def list_open_prs(self, repo_root: Path, *, limit: int) -> list[StackedPR]:
        """List open PRs in the repository.

        Args:
            repo_root: Repository root directory
            limit: Maximum number of PRs to request

        Returns:
            Open PRs as listed by gh, at most limit rows

        Raises:
            CommandError: If gh fails
            ValueError: If gh output cannot be decoded
        """
        ...
