"""The restack command: rebase a stack of PRs onto their current bases."""

import logging
import os
from dataclasses import replace
from pathlib import Path

import click

from restack.cli.ensure import Ensure, fail
from restack.cli.output import user_output
from restack.cli.parse_pr_reference import parse_pr_reference
from restack.cli.rendering import branch_colors, format_failure, render_stack_tree
from restack.core.context import RestackContext, create_context
from restack.core.discovery import (
    NoStackFoundError,
    PRLookupError,
    PRNotOpenError,
    discover_worktree_prs,
    fetch_requested_prs,
)
from restack.core.git.abc import WorktreeInfo
from restack.core.git.dry_run import DryRunGit
from restack.core.github.types import StackedPR
from restack.core.restack import check_preconditions, restack_stack
from restack.core.stack_sort import CircularDependencyError, sort_by_dependency
from restack.core.stack_tree import StackTree
from restack.core.subprocess import CommandError
from restack.core.worktree_index import build_worktree_index

logger = logging.getLogger(__name__)

# Enable debug logging if RESTACK_DEBUG environment variable is set
if os.getenv("RESTACK_DEBUG"):
    logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

DRY_RUN_MESSAGE = "(dry run — no changes made)"
SUCCESS_MESSAGE = "All PRs restacked successfully."


@click.command("restack", context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="restack")
@click.argument("prs", nargs=-1, metavar="[PRS]...")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print git commands that would change branches instead of running them.",
)
@click.option("--no-push", is_flag=True, help="Rebase locally without force-pushing.")
@click.pass_context
def cli(click_ctx: click.Context, prs: tuple[str, ...], dry_run: bool, no_push: bool) -> None:
    """Rebase a stack of PRs onto their current base branches.

    PRS are PR numbers or GitHub PR URLs. Without PRS, the stack is made of
    the open PRs whose head branches are checked out in this repository's
    worktrees.

    PRs are rebased parents first. A PR whose base was rebased in the same
    run is rebased onto the local branch, others onto <remote>/<base>. Each
    rebased branch is pushed with --force-with-lease.
    """
    # Only create context if not already provided (e.g., by tests)
    if click_ctx.obj is None:
        try:
            click_ctx.obj = create_context(dry_run=dry_run)
        except ValueError as e:
            fail(f"Invalid configuration: {e}")
        except CommandError as e:
            fail(str(e))

    ctx: RestackContext = click_ctx.obj
    if dry_run and not ctx.dry_run:
        ctx = replace(ctx, git=DryRunGit(ctx.git), dry_run=True)

    push = ctx.config.push and not no_push
    run_restack(ctx, list(prs), push=push)


def run_restack(ctx: RestackContext, references: list[str], *, push: bool) -> None:
    """Discover, order, validate and restack; exits with status 1 on any error."""
    repo_root = Ensure.not_none(ctx.repo_root, f"not in a git repository: {ctx.cwd}")
    remote = ctx.config.remote

    try:
        worktrees = ctx.git.list_worktrees(repo_root)
    except CommandError as e:
        fail(str(e))
    worktree_index = build_worktree_index(worktrees)
    logger.debug("Worktree index: %s", worktree_index)

    stack = _resolve_stack(ctx, repo_root, references, worktrees)

    try:
        ordered = sort_by_dependency(stack)
    except CircularDependencyError as e:
        fail(str(e))

    user_output(render_stack_tree(StackTree.build(ordered), branch_colors(ordered)))
    user_output()

    try:
        with ctx.feedback.progress(f"Fetching {remote}"):
            ctx.git.fetch_remote(repo_root, remote)
    except CommandError as e:
        fail(str(e))

    problems = check_preconditions(ctx, repo_root, ordered, worktree_index)
    if problems:
        user_output(
            click.style("Error: ", fg="red")
            + f"{len(problems)} problem(s) found, no branches were changed:"
        )
        for problem in problems:
            user_output(format_failure(problem))
        raise SystemExit(1)

    result = restack_stack(ctx, repo_root, ordered, worktree_index, push=push)
    if result.failure is not None:
        done = len(result.completed)
        fail(
            f"stopped after {done} of {len(ordered)} PR(s)\n"
            + format_failure(result.failure)
        )

    user_output()
    if ctx.dry_run:
        ctx.feedback.info(DRY_RUN_MESSAGE)
    else:
        ctx.feedback.success(SUCCESS_MESSAGE)


def _resolve_stack(
    ctx: RestackContext,
    repo_root: Path,
    references: list[str],
    worktrees: list[WorktreeInfo],
) -> list[StackedPR]:
    try:
        if references:
            numbers = [parse_pr_reference(reference) for reference in references]
            return fetch_requested_prs(ctx.github, repo_root, numbers)
        return discover_worktree_prs(
            ctx.github, repo_root, worktrees, limit=ctx.config.open_pr_limit
        )
    except (PRLookupError, PRNotOpenError, NoStackFoundError, CommandError, ValueError) as e:
        fail(str(e))


def main() -> None:
    """CLI entry point used by the `restack` console script."""
    cli()
