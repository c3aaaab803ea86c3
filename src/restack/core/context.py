"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from restack.core.config import RestackConfig, load_config
from restack.core.git.abc import Git
from restack.core.git.dry_run import DryRunGit
from restack.core.git.real import RealGit
from restack.core.github.abc import GitHub
from restack.core.github.real import RealGitHub
from restack.core.user_feedback import InteractiveFeedback, UserFeedback


@dataclass(frozen=True)
class RestackContext:
    """Immutable context holding all dependencies for restack operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.

    Note: repo_root is None when the command was started outside a git
    repository; the command reports that before doing anything else.
    """

    git: Git
    github: GitHub
    feedback: UserFeedback
    cwd: Path  # Current working directory at CLI invocation
    repo_root: Path | None
    config: RestackConfig
    dry_run: bool

    @staticmethod
    def for_test(
        git: Git | None = None,
        github: GitHub | None = None,
        feedback: UserFeedback | None = None,
        cwd: Path | None = None,
        repo_root: Path | None = None,
        config: RestackConfig | None = None,
        dry_run: bool = False,
    ) -> "RestackContext":
        """Create test context with optional pre-configured integration classes.

        Args:
            git: Optional Git implementation. If None, creates empty FakeGit.
            github: Optional GitHub implementation. If None, creates empty FakeGitHub.
            feedback: Optional UserFeedback. If None, creates FakeUserFeedback.
            cwd: Optional current working directory. If None, uses sentinel_path().
            repo_root: Optional repository root. If None, uses cwd.
            config: Optional RestackConfig. If None, uses defaults.
            dry_run: Whether to enable dry-run mode (default False).

        Returns:
            RestackContext configured with provided values and test defaults

        Example:
            >>> git = FakeGit(worktrees={repo: [WorktreeInfo(repo, "main")]})
            >>> github = FakeGitHub(prs=[StackedPR(1, "feat-a", "main", "OPEN")])
            >>> ctx = RestackContext.for_test(git=git, github=github, repo_root=repo)
        """
        from tests.fakes.git import FakeGit
        from tests.fakes.github import FakeGitHub
        from tests.fakes.user_feedback import FakeUserFeedback
        from tests.test_utils.paths import sentinel_path

        if git is None:
            git = FakeGit()

        if github is None:
            github = FakeGitHub()

        if feedback is None:
            feedback = FakeUserFeedback()

        if cwd is None:
            cwd = sentinel_path()

        if repo_root is None:
            repo_root = cwd

        if config is None:
            config = RestackConfig()

        # Apply dry-run wrapper if needed (matching production behavior)
        if dry_run:
            git = DryRunGit(git)

        return RestackContext(
            git=git,
            github=github,
            feedback=feedback,
            cwd=cwd,
            repo_root=repo_root,
            config=config,
            dry_run=dry_run,
        )


def create_context(*, dry_run: bool) -> RestackContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Args:
        dry_run: If True, wrap git with DryRunGit so that mutating
                 operations are printed instead of executed

    Returns:
        RestackContext with real implementations

    Raises:
        ValueError: If a config file is malformed
    """
    # 1. Capture cwd (no deps)
    cwd = Path.cwd()

    # 2. Create integration classes
    git: Git = RealGit()
    github: GitHub = RealGitHub()

    # 3. Discover repo root (only needs cwd and git)
    repo_root = git.get_repository_root(cwd)

    # 4. Load config (global file, then repo pyproject.toml)
    config = load_config(repo_root=repo_root)

    # 5. Apply dry-run wrapper if needed
    if dry_run:
        git = DryRunGit(git)

    return RestackContext(
        git=git,
        github=github,
        feedback=InteractiveFeedback(),
        cwd=cwd,
        repo_root=repo_root,
        config=config,
        dry_run=dry_run,
    )
