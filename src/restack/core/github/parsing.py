"""Parsing of gh CLI JSON output."""

import json
from typing import Any

from restack.core.github.types import StackedPR


def _pr_from_json(data: dict[str, Any]) -> StackedPR:
    return StackedPR(
        number=int(data["number"]),
        head_ref=data["headRefName"],
        base_ref=data["baseRefName"],
        state=data["state"],
    )


def parse_pr_view(json_str: str) -> StackedPR:
    """Parse `gh pr view --json number,headRefName,baseRefName,state` output.

    Raises:
        json.JSONDecodeError: If output is not valid JSON
        KeyError: If a required field is missing
    """
    return _pr_from_json(json.loads(json_str))


def parse_pr_list(json_str: str) -> list[StackedPR]:
    """Parse `gh pr list --json ...` output.

    Returns:
        One StackedPR per listed row, in listing order. Several rows may share
        a head branch name (e.g. PRs from forks that all use `main`).
    """
    return [_pr_from_json(entry) for entry in json.loads(json_str)]
