"""Output utilities for CLI commands.

Everything restack prints is meant for the operator (stack trees, progress,
dry-run commands, errors), so it all goes to stderr.
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    """Write operator-facing output to stderr."""
    click.echo(message, nl=nl, err=True)
