"""Colored terminal rendering of a PR stack and of step failures."""

import click

from restack.core.github.types import StackedPR
from restack.core.restack import StepFailure
from restack.core.stack_tree import StackNode, StackTree, connector

BRANCH_PALETTE = ("green", "cyan", "blue", "magenta", "yellow", "red")


def branch_colors(prs: list[StackedPR]) -> dict[str, str]:
    """Assign each branch a palette color in first-seen order (base, then head).

    The palette wraps around when there are more branches than colors.
    """
    colors: dict[str, str] = {}
    for pr in prs:
        for branch in (pr.base_ref, pr.head_ref):
            if branch not in colors:
                colors[branch] = BRANCH_PALETTE[len(colors) % len(BRANCH_PALETTE)]
    return colors


def style_branch(branch: str, colors: dict[str, str], *, bold: bool = False) -> str:
    return click.style(branch, fg=colors.get(branch), bold=bold)


def render_stack_tree(tree: StackTree, colors: dict[str, str]) -> str:
    """Render the tree with bold roots, dim connectors and colored branches."""

    def node_style(node: StackNode) -> str:
        lines = click.style(f"{node.prefix}{connector(node)}", dim=True)
        number = click.style(f"#{node.number}", bold=True)
        return f"{lines} {number} {style_branch(node.head_ref, colors)}"

    return tree.format(
        root_style=lambda root: style_branch(root, colors, bold=True),
        node_style=node_style,
    )


def format_failure(failure: StepFailure) -> str:
    """Format a failure as a headline plus indented detail and remediation."""
    headline = f"PR #{failure.pr.number} ({failure.pr.head_ref}): {failure.kind.value}"
    lines = [headline]
    lines.extend(f"  {line}" for line in failure.detail.splitlines())
    lines.append("  " + click.style("→ ", fg="yellow") + failure.remediation.replace("\n", "\n    "))
    return "\n".join(lines)
