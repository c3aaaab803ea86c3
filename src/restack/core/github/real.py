"""Production implementation of GitHub operations."""

from pathlib import Path

from restack.core.github.abc import GitHub
from restack.core.github.parsing import parse_pr_list, parse_pr_view
from restack.core.github.types import PR_JSON_FIELDS, StackedPR
from restack.core.subprocess import run_subprocess_with_context


class RealGitHub(GitHub):
    """Production implementation using gh CLI.

    All GitHub operations execute actual gh commands via subprocess.
    """

    def get_pr(self, repo_root: Path, reference: str) -> StackedPR:
        """Get a single PR by number or head branch name."""
        result = run_subprocess_with_context(
            ["gh", "pr", "view", reference, "--json", PR_JSON_FIELDS],
            operation_context=f"get info for PR {reference}",
            cwd=repo_root,
        )
        try:
            return parse_pr_view(result.stdout)
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Failed to parse info for PR {reference}: {e}"
            raise ValueError(msg) from e

    def list_open_prs(self, repo_root: Path, *, limit: int) -> list[StackedPR]:
        """List open PRs in the repository."""
        result = run_subprocess_with_context(
            [
                "gh",
                "pr",
                "list",
                "--state",
                "open",
                "--limit",
                str(limit),
                "--json",
                PR_JSON_FIELDS,
            ],
            operation_context="list open PRs",
            cwd=repo_root,
        )
        try:
            return parse_pr_list(result.stdout)
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Failed to parse open PRs list: {e}"
            raise ValueError(msg) from e
