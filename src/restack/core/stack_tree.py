"""Tree structure for displaying a stack of PRs.

This module contains pure business logic: which branches are roots and which
PRs hang under each branch. Colored terminal rendering lives in
restack.cli.rendering.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from restack.core.github.types import StackedPR


@dataclass(frozen=True)
class StackNode:
    """One PR in the tree, positioned under its base branch."""

    number: int
    head_ref: str
    prefix: str  # indentation inherited from ancestors
    is_last: bool  # last child of its parent


@dataclass(frozen=True)
class StackTree:
    """Dependency forest of a set of PRs.

    roots are the base branches that are not themselves the head of any PR,
    sorted for reproducible output. children maps a branch to the PRs that
    target it, in execution order.
    """

    roots: list[str]
    children: dict[str, list[tuple[int, str]]] = field(default_factory=dict)

    @staticmethod
    def build(prs: list[StackedPR]) -> "StackTree":
        head_refs = {pr.head_ref for pr in prs}
        children: dict[str, list[tuple[int, str]]] = {}
        for pr in prs:
            children.setdefault(pr.base_ref, []).append((pr.number, pr.head_ref))

        roots = sorted({pr.base_ref for pr in prs if pr.base_ref not in head_refs})
        return StackTree(roots=roots, children=children)

    def walk(self, root: str) -> Iterator[StackNode]:
        """Yield the PRs under root depth-first, with connector prefixes."""
        yield from self._walk_children(self.children.get(root, []), "")

    def _walk_children(self, nodes: list[tuple[int, str]], prefix: str) -> Iterator[StackNode]:
        for i, (number, head_ref) in enumerate(nodes):
            is_last = i == len(nodes) - 1
            yield StackNode(number=number, head_ref=head_ref, prefix=prefix, is_last=is_last)
            grandchildren = self.children.get(head_ref)
            if grandchildren:
                child_prefix = prefix + ("   " if is_last else "│  ")
                yield from self._walk_children(grandchildren, child_prefix)

    def format(
        self,
        *,
        root_style: Callable[[str], str],
        node_style: Callable[[StackNode], str],
    ) -> str:
        lines: list[str] = []
        for root in self.roots:
            lines.append(root_style(root))
            lines.extend(node_style(node) for node in self.walk(root))
        return "\n".join(lines)

    def format_plain(self) -> str:
        """Render the tree without colors.

        Example:
            main
            ├─ #1 feat-a
            │  └─ #3 feat-c
            └─ #2 feat-b
        """
        return self.format(
            root_style=lambda root: root,
            node_style=lambda node: (
                f"{node.prefix}{connector(node)} #{node.number} {node.head_ref}"
            ),
        )


def connector(node: StackNode) -> str:
    return "└─" if node.is_last else "├─"
