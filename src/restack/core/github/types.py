"""Type definitions for GitHub operations."""

from dataclasses import dataclass
from typing import Literal

PRState = Literal["OPEN", "MERGED", "CLOSED"]

# Fields requested from `gh pr view` / `gh pr list`
PR_JSON_FIELDS = "number,headRefName,baseRefName,state"


@dataclass(frozen=True)
class StackedPR:
    """One pull request in a stack.

    head_ref is the branch holding the PR's commits; base_ref is the branch
    the PR currently targets on GitHub.
    """

    number: int
    head_ref: str
    base_ref: str
    state: PRState

    @property
    def is_open(self) -> bool:
        return self.state == "OPEN"
