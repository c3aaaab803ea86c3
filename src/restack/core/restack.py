"""Rebase orchestration for an ordered stack of PRs.

Each PR is rebased onto its base branch in execution order. A PR whose base
was rebased earlier in the same run targets the freshly rebased local branch;
every other PR targets the remote-tracking branch. The set of branches rebased
so far (the ledger) is owned by a single restack_stack() call.

Failures never raise out of restack_stack(): the run stops at the first
failing PR and the failure is returned as a StepFailure whose kind decides
what happens to a temporary worktree.
"""

import logging
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from restack.core.context import RestackContext
from restack.core.github.types import StackedPR
from restack.core.subprocess import CommandError
from restack.core.worktree_index import WorktreeIndex

logger = logging.getLogger(__name__)


class TargetKind(Enum):
    LOCAL = "local"  # base branch was rebased earlier in this run
    REMOTE = "remote"  # base branch as of the last fetch


@dataclass(frozen=True)
class RebaseTarget:
    """Where a PR's head branch gets rebased onto."""

    kind: TargetKind
    ref: str  # value handed to `git rebase`
    branch: str  # base branch name without remote prefix


class FailureKind(Enum):
    NOT_FOUND = "not found"
    DIRTY_WORKTREE = "dirty worktree"
    MISSING_WORKTREE = "missing worktree"
    STALE_TEMP_WORKTREE = "stale temporary worktree"
    REBASE_CONFLICT = "rebase conflict"
    PUSH_REJECTED = "push rejected"


@dataclass(frozen=True)
class StepFailure:
    """Why a PR could not be (or was not) restacked, and what to do about it."""

    kind: FailureKind
    pr: StackedPR
    location: Path | None
    detail: str
    remediation: str


# Preflight problems carry the same information as execution failures
PreflightProblem = StepFailure


@dataclass
class RestackResult:
    """Outcome of one restack run.

    Attributes:
        completed: PRs fully processed, in execution order
        rebased: Head branches rebased in this run (the ledger)
        failure: The failure that stopped the run, if any
    """

    completed: list[StackedPR] = field(default_factory=list)
    rebased: set[str] = field(default_factory=set)
    failure: StepFailure | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None


class RestackStepError(Exception):
    """Carries a StepFailure out of a progress block."""

    def __init__(self, failure: StepFailure) -> None:
        self.failure = failure
        super().__init__(f"PR #{failure.pr.number}: {failure.kind.value}")


def resolve_rebase_target(pr: StackedPR, rebased: set[str], remote: str) -> RebaseTarget:
    """Pick the ref to rebase pr onto.

    Examples:
        >>> pr = StackedPR(2, "feat-b", "feat-a", "OPEN")
        >>> resolve_rebase_target(pr, set(), "origin").ref
        'origin/feat-a'
        >>> resolve_rebase_target(pr, {"feat-a"}, "origin").ref
        'feat-a'
    """
    if pr.base_ref in rebased:
        return RebaseTarget(kind=TargetKind.LOCAL, ref=pr.base_ref, branch=pr.base_ref)
    return RebaseTarget(kind=TargetKind.REMOTE, ref=f"{remote}/{pr.base_ref}", branch=pr.base_ref)


def temp_worktree_path(branch: str) -> Path:
    """Location of the disposable worktree used for a branch with no worktree."""
    sanitized = branch.replace("/", "-")
    return Path(tempfile.gettempdir()) / f"restack-{sanitized}"


def describe_step(pr: StackedPR, target: RebaseTarget, *, push: bool) -> str:
    push_note = " + push" if push else ""
    return f"#{pr.number} {pr.head_ref} → {target.ref}{push_note}"


# ============================================================================
# Preflight
# ============================================================================


def check_preconditions(
    ctx: RestackContext,
    repo_root: Path,
    prs: list[StackedPR],
    worktree_index: WorktreeIndex,
) -> list[PreflightProblem]:
    """Validate every PR before any branch is touched.

    Returns:
        All problems found, one per offending PR or base branch. Empty when
        the run may proceed.
    """
    remote = ctx.config.remote
    problems: list[PreflightProblem] = []

    for pr in prs:
        location = worktree_index.get(pr.head_ref)
        if location is not None:
            problem = _check_worktree_clean(ctx, pr, location)
            if problem is not None:
                problems.append(problem)
            continue

        if ctx.config.require_worktrees:
            problems.append(
                StepFailure(
                    kind=FailureKind.MISSING_WORKTREE,
                    pr=pr,
                    location=None,
                    detail=f"branch '{pr.head_ref}' is not checked out in any worktree",
                    remediation=f"check it out first: git worktree add <path> {pr.head_ref}",
                )
            )
            continue

        if not ctx.git.branch_exists_locally(
            repo_root, pr.head_ref
        ) and not ctx.git.remote_branch_exists(repo_root, remote, pr.head_ref):
            problems.append(
                StepFailure(
                    kind=FailureKind.NOT_FOUND,
                    pr=pr,
                    location=None,
                    detail=f"branch '{pr.head_ref}' exists neither locally nor on {remote}",
                    remediation=f"run 'git fetch {remote}' and check the PR's head branch",
                )
            )
            continue

        temp_path = temp_worktree_path(pr.head_ref)
        if ctx.git.path_exists(temp_path):
            problems.append(
                StepFailure(
                    kind=FailureKind.STALE_TEMP_WORKTREE,
                    pr=pr,
                    location=temp_path,
                    detail=f"temporary worktree from an earlier run still exists at {temp_path}",
                    remediation=(
                        "finish or abort the rebase there, then run: "
                        f"git worktree remove --force {temp_path}"
                    ),
                )
            )

    heads = {pr.head_ref for pr in prs}
    checked_bases: set[str] = set()
    for pr in prs:
        if pr.base_ref in heads or pr.base_ref in checked_bases:
            continue
        checked_bases.add(pr.base_ref)
        if not ctx.git.remote_branch_exists(repo_root, remote, pr.base_ref):
            problems.append(
                StepFailure(
                    kind=FailureKind.NOT_FOUND,
                    pr=pr,
                    location=None,
                    detail=f"base branch '{remote}/{pr.base_ref}' not found",
                    remediation=f"run 'git fetch {remote}' and check the PR's base branch",
                )
            )

    logger.debug("Preflight found %d problem(s)", len(problems))
    return problems


def _check_worktree_clean(
    ctx: RestackContext, pr: StackedPR, location: Path
) -> PreflightProblem | None:
    try:
        dirty = ctx.git.has_uncommitted_changes(location)
    except CommandError as e:
        return StepFailure(
            kind=FailureKind.NOT_FOUND,
            pr=pr,
            location=location,
            detail=f"worktree at {location} is not usable:\n{e}",
            remediation="run 'git worktree prune' if the directory was deleted",
        )
    if not dirty:
        return None
    return StepFailure(
        kind=FailureKind.DIRTY_WORKTREE,
        pr=pr,
        location=location,
        detail=f"worktree at {location} has uncommitted changes",
        remediation="commit or stash the changes, then re-run",
    )


# ============================================================================
# Execution
# ============================================================================


def restack_stack(
    ctx: RestackContext,
    repo_root: Path,
    prs: list[StackedPR],
    worktree_index: WorktreeIndex,
    *,
    push: bool,
) -> RestackResult:
    """Rebase (and optionally push) each PR in execution order.

    Args:
        ctx: Context with git integration, feedback and config
        repo_root: Repository root, used for temporary worktrees
        prs: PRs in execution order (see sort_by_dependency)
        worktree_index: Branch -> worktree path
        push: Force-push with lease after each successful rebase

    Returns:
        RestackResult; on failure, PRs after the failing one are untouched and
        earlier ones are not rolled back
    """
    result = RestackResult()

    for pr in prs:
        target = resolve_rebase_target(pr, result.rebased, ctx.config.remote)
        location = worktree_index.get(pr.head_ref)
        logger.debug(
            "PR #%d: %s onto %s (%s), worktree=%s",
            pr.number,
            pr.head_ref,
            target.ref,
            target.kind.value,
            location,
        )

        try:
            with ctx.feedback.progress(describe_step(pr, target, push=push)):
                if location is not None:
                    _rebase_and_push(ctx, pr, location, target, push=push, rebased=result.rebased)
                else:
                    _restack_in_temp_worktree(
                        ctx, repo_root, pr, target, push=push, rebased=result.rebased
                    )
        except RestackStepError as e:
            logger.debug("Stopping at PR #%d: %s", pr.number, e.failure.kind.value)
            result.failure = e.failure
            return result

        result.completed.append(pr)

    return result


def _rebase_and_push(
    ctx: RestackContext,
    pr: StackedPR,
    cwd: Path,
    target: RebaseTarget,
    *,
    push: bool,
    rebased: set[str],
    cleanup_hint: str | None = None,
) -> None:
    remote = ctx.config.remote

    try:
        ctx.git.rebase(cwd, target.ref, autostash=ctx.config.autostash)
    except CommandError as e:
        continue_cmd = "git rebase --continue"
        if push:
            continue_cmd += f" && git push --force-with-lease {remote} {pr.head_ref}"
        remediation = f"resolve conflicts in {cwd} then run: {continue_cmd}"
        if cleanup_hint is not None:
            remediation += f"\n{cleanup_hint}"
        raise RestackStepError(
            StepFailure(
                kind=FailureKind.REBASE_CONFLICT,
                pr=pr,
                location=cwd,
                detail=str(e),
                remediation=remediation,
            )
        ) from e

    # A successful rebase is what lets later PRs target this branch locally
    rebased.add(pr.head_ref)

    if not push:
        return

    try:
        ctx.git.push_force_with_lease(cwd, remote, pr.head_ref)
    except CommandError as e:
        raise RestackStepError(
            StepFailure(
                kind=FailureKind.PUSH_REJECTED,
                pr=pr,
                location=cwd,
                detail=str(e),
                remediation=(
                    f"'{pr.head_ref}' was rebased locally but {remote}/{pr.head_ref} "
                    f"changed since the last fetch; inspect it, then run: "
                    f"git push --force-with-lease {remote} {pr.head_ref}"
                ),
            )
        ) from e


def _restack_in_temp_worktree(
    ctx: RestackContext,
    repo_root: Path,
    pr: StackedPR,
    target: RebaseTarget,
    *,
    push: bool,
    rebased: set[str],
) -> None:
    remote = ctx.config.remote
    temp_path = temp_worktree_path(pr.head_ref)

    try:
        if not ctx.git.branch_exists_locally(repo_root, pr.head_ref):
            ctx.git.create_tracking_branch(repo_root, pr.head_ref, f"{remote}/{pr.head_ref}")
        ctx.git.add_worktree(repo_root, temp_path, pr.head_ref)
    except CommandError as e:
        raise RestackStepError(
            StepFailure(
                kind=FailureKind.NOT_FOUND,
                pr=pr,
                location=temp_path,
                detail=f"failed to create temporary worktree for branch '{pr.head_ref}':\n{e}",
                remediation=f"check that '{pr.head_ref}' exists locally or on {remote}",
            )
        ) from e

    cleanup_hint = f"afterwards remove the temporary worktree: git worktree remove {temp_path}"
    try:
        _rebase_and_push(
            ctx,
            pr,
            temp_path,
            target,
            push=push,
            rebased=rebased,
            cleanup_hint=cleanup_hint,
        )
    except RestackStepError as e:
        # Keep the worktree for conflict resolution; otherwise the branch ref
        # has already moved and the worktree is of no further use
        if e.failure.kind is not FailureKind.REBASE_CONFLICT:
            _remove_temp_worktree(ctx, repo_root, temp_path)
        raise

    _remove_temp_worktree(ctx, repo_root, temp_path)


def _remove_temp_worktree(ctx: RestackContext, repo_root: Path, path: Path) -> None:
    """Best-effort removal; a leftover directory is reported by the next preflight."""
    try:
        ctx.git.remove_worktree(repo_root, path, force=True)
    except CommandError as e:
        logger.warning("Could not remove temporary worktree at %s: %s", path, e)
