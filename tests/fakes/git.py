"""Fake implementation of Git for testing.

FakeGit is an in-memory implementation that accepts pre-configured state in
its constructor. Mutating operations are recorded for assertions; failures
are configured up front and raised as CommandError, exactly like RealGit.
"""

from pathlib import Path

from restack.core.git.abc import Git, WorktreeInfo
from restack.core.subprocess import CommandError


def _command_error(args: list[str], operation_context: str, stderr: str) -> CommandError:
    return CommandError(
        program="git",
        args=args,
        returncode=1,
        stderr=stderr,
        operation_context=operation_context,
    )


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    This class has NO public setup methods. All state is provided via
    constructor using keyword arguments with sensible defaults.

    Examples:
        >>> repo = Path("/repo")
        >>> git = FakeGit(
        ...     worktrees={repo: [WorktreeInfo(repo, "main")]},
        ...     existing_refs={"refs/remotes/origin/main"},
        ...     failing_rebases={repo},
        ... )
    """

    def __init__(
        self,
        *,
        worktrees: dict[Path, list[WorktreeInfo]] | None = None,
        repository_roots: dict[Path, Path] | None = None,
        dirty_worktrees: set[Path] | None = None,
        broken_worktrees: set[Path] | None = None,
        existing_refs: set[str] | None = None,
        existing_paths: set[Path] | None = None,
        failing_fetches: set[str] | None = None,
        failing_tracking_branches: set[str] | None = None,
        failing_worktree_adds: set[str] | None = None,
        failing_worktree_removals: set[Path] | None = None,
        failing_rebases: set[Path] | None = None,
        failing_pushes: set[str] | None = None,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            worktrees: Mapping of repo_root -> worktrees in listing order
            repository_roots: Mapping of cwd -> repository root
            dirty_worktrees: Worktree paths reporting uncommitted changes
            broken_worktrees: Worktree paths where `git status` fails
            existing_refs: Fully-qualified refs that exist
            existing_paths: Paths reported as existing by path_exists()
            failing_fetches: Remotes whose fetch fails
            failing_tracking_branches: Branches whose tracking branch creation fails
            failing_worktree_adds: Branches that cannot be checked out in a new worktree
            failing_worktree_removals: Worktree paths that cannot be removed
            failing_rebases: Worktree paths where the rebase stops on a conflict
            failing_pushes: Branches whose push is rejected
        """
        self._worktrees = worktrees or {}
        self._repository_roots = repository_roots or {}
        self._dirty_worktrees = dirty_worktrees or set()
        self._broken_worktrees = broken_worktrees or set()
        self._existing_refs = set(existing_refs or ())
        self._existing_paths = set(existing_paths or ())
        self._failing_fetches = failing_fetches or set()
        self._failing_tracking_branches = failing_tracking_branches or set()
        self._failing_worktree_adds = failing_worktree_adds or set()
        self._failing_worktree_removals = failing_worktree_removals or set()
        self._failing_rebases = failing_rebases or set()
        self._failing_pushes = failing_pushes or set()

        self._fetched_remotes: list[str] = []
        self._created_tracking_branches: list[tuple[str, str]] = []
        self._added_worktrees: list[tuple[Path, str]] = []
        self._removed_worktrees: list[tuple[Path, bool]] = []
        self._rebase_calls: list[tuple[Path, str, bool]] = []
        self._push_calls: list[tuple[Path, str, str]] = []

    def get_repository_root(self, cwd: Path) -> Path | None:
        return self._repository_roots.get(cwd)

    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        return list(self._worktrees.get(repo_root, []))

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        if cwd in self._broken_worktrees:
            raise _command_error(
                ["status", "--porcelain"],
                f"check status of {cwd}",
                "fatal: not a git repository",
            )
        return cwd in self._dirty_worktrees

    def ref_exists(self, repo_root: Path, ref: str) -> bool:
        return ref in self._existing_refs

    def fetch_remote(self, repo_root: Path, remote: str) -> None:
        self._fetched_remotes.append(remote)
        if remote in self._failing_fetches:
            raise _command_error(
                ["fetch", remote],
                f"fetch {remote}",
                f"fatal: '{remote}' does not appear to be a git repository",
            )

    def create_tracking_branch(self, repo_root: Path, branch: str, remote_ref: str) -> None:
        self._created_tracking_branches.append((branch, remote_ref))
        if branch in self._failing_tracking_branches:
            raise _command_error(
                ["branch", "--track", branch, remote_ref],
                f"create tracking branch '{branch}'",
                f"fatal: not a valid object name: '{remote_ref}'",
            )
        self._existing_refs.add(f"refs/heads/{branch}")

    def add_worktree(self, repo_root: Path, path: Path, branch: str) -> None:
        self._added_worktrees.append((path, branch))
        if branch in self._failing_worktree_adds:
            raise _command_error(
                ["worktree", "add", str(path), branch],
                f"add worktree for '{branch}'",
                f"fatal: invalid reference: {branch}",
            )
        self._existing_paths.add(path)

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        self._removed_worktrees.append((path, force))
        if path in self._failing_worktree_removals:
            raise _command_error(
                ["worktree", "remove", "--force", str(path)],
                f"remove worktree at {path}",
                "fatal: cannot remove worktree",
            )
        self._existing_paths.discard(path)

    def rebase(self, cwd: Path, onto: str, *, autostash: bool) -> None:
        self._rebase_calls.append((cwd, onto, autostash))
        if cwd in self._failing_rebases:
            raise _command_error(
                ["rebase", onto],
                f"rebase onto {onto}",
                "CONFLICT (content): Merge conflict in README.md",
            )

    def push_force_with_lease(self, cwd: Path, remote: str, branch: str) -> None:
        self._push_calls.append((cwd, remote, branch))
        if branch in self._failing_pushes:
            raise _command_error(
                ["push", "--force-with-lease", remote, branch],
                f"push '{branch}' to {remote}",
                "! [rejected] (stale info)",
            )

    def path_exists(self, path: Path) -> bool:
        return path in self._existing_paths

    @property
    def fetched_remotes(self) -> list[str]:
        """Remotes passed to fetch_remote(), in call order."""
        return self._fetched_remotes

    @property
    def created_tracking_branches(self) -> list[tuple[str, str]]:
        """(branch, remote_ref) tuples passed to create_tracking_branch()."""
        return self._created_tracking_branches

    @property
    def added_worktrees(self) -> list[tuple[Path, str]]:
        """(path, branch) tuples passed to add_worktree()."""
        return self._added_worktrees

    @property
    def removed_worktrees(self) -> list[tuple[Path, bool]]:
        """(path, force) tuples passed to remove_worktree()."""
        return self._removed_worktrees

    @property
    def rebase_calls(self) -> list[tuple[Path, str, bool]]:
        """(cwd, onto, autostash) tuples passed to rebase()."""
        return self._rebase_calls

    @property
    def push_calls(self) -> list[tuple[Path, str, str]]:
        """(cwd, remote, branch) tuples passed to push_force_with_lease()."""
        return self._push_calls
