"""User-facing progress and diagnostic output."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

import click
from rich.console import Console

from restack.cli.output import user_output

SPINNER = "dots"


class UserFeedback(ABC):
    """Provides user-facing progress output for long-running steps.

    Core code reports through ctx.feedback instead of printing, so tests can
    swap in a recording fake and the terminal can show a spinner.

    Usage:
        with ctx.feedback.progress("Fetching origin"):
            ctx.git.fetch_remote(repo_root, "origin")

    The progress block prints a ✔ line when it completes and a ✘ line when
    an exception escapes it; the exception is re-raised unchanged.
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message."""

    @abstractmethod
    @contextmanager
    def progress(self, message: str) -> Iterator[None]:
        """Run the enclosed block as one reported step."""


class InteractiveFeedback(UserFeedback):
    """Feedback for a terminal: spinner while running, ✔/✘ afterwards."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console

    def _get_console(self) -> Console:
        # Created lazily so click's stream redirection is picked up
        if self._console is None:
            self._console = Console(stderr=True)
        return self._console

    def info(self, message: str) -> None:
        """Show informational message."""
        user_output(message)

    def success(self, message: str) -> None:
        """Show success message in green."""
        user_output(click.style(message, fg="green"))

    @contextmanager
    def progress(self, message: str) -> Iterator[None]:
        ok = False
        try:
            with self._get_console().status(message, spinner=SPINNER):
                yield
            ok = True
        finally:
            if ok:
                mark = click.style("✔", fg="green", bold=True)
            else:
                mark = click.style("✘", fg="red", bold=True)
            user_output(f"{mark} {message}")
