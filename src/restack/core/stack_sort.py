"""Dependency ordering for stacked PRs."""

from restack.core.github.types import StackedPR


class CircularDependencyError(Exception):
    """Raised when the remaining PRs depend on each other in a cycle.

    Attributes:
        prs: Every PR that could not be placed, in input order
    """

    def __init__(self, prs: list[StackedPR]) -> None:
        self.prs = prs
        lines = "\n  ".join(f"PR #{pr.number} ({pr.head_ref} → {pr.base_ref})" for pr in prs)
        super().__init__(f"circular dependency detected among PRs:\n  {lines}")


def sort_by_dependency(prs: list[StackedPR]) -> list[StackedPR]:
    """Sort PRs so each one comes after the PR whose head branch it targets.

    If PR B's base_ref is PR A's head_ref, A comes first. Among PRs that are
    ready at the same time the first in input order is placed first, so
    independent PRs keep their relative order.

    Args:
        prs: PRs in discovery or command-line order

    Returns:
        New list in execution order

    Raises:
        CircularDependencyError: If no remaining PR can be placed
    """
    remaining = list(prs)
    ordered: list[StackedPR] = []

    while remaining:
        remaining_heads = {pr.head_ref for pr in remaining}
        ready = next(
            (i for i, pr in enumerate(remaining) if pr.base_ref not in remaining_heads),
            None,
        )
        if ready is None:
            raise CircularDependencyError(remaining)
        ordered.append(remaining.pop(ready))

    return ordered
