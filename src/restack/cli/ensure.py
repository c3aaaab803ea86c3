"""CLI error handling utilities with styled output.

Ensure asserts invariants in the restack command with consistent,
user-friendly error messages. All errors use a red "Error:" prefix.
"""

from typing import NoReturn, TypeVar

import click

from restack.cli.output import user_output

T = TypeVar("T")


def fail(error_message: str) -> NoReturn:
    """Output a styled error and exit with status 1.

    Raises:
        SystemExit: Always (with exit code 1)
    """
    user_output(click.style("Error: ", fg="red") + error_message)
    raise SystemExit(1)


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def not_none(value: T | None, error_message: str) -> T:
        """Ensure value is not None, otherwise output styled error and exit.

        Provides type narrowing from `T | None` to `T`.

        Example:
            >>> repo_root = Ensure.not_none(ctx.repo_root, "not in a git repository")
        """
        if value is None:
            fail(error_message)
        return value
