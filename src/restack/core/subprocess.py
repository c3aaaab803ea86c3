"""Subprocess execution with structured error context.

Every git and gh invocation goes through run_subprocess_with_context so that
a failure always carries the program, its arguments, the exit code and the
captured stderr. Callers branch on the operation that failed, not on the
text of the message.
"""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """A subprocess exited non-zero or could not be started.

    Attributes:
        program: Executable name (e.g. "git")
        args: Arguments passed after the program name
        returncode: Exit code, or None when the program was not found
        stderr: Captured standard error, stripped
        operation_context: Human-readable description of the operation
    """

    def __init__(
        self,
        *,
        program: str,
        args: list[str],
        returncode: int | None,
        stderr: str,
        operation_context: str,
    ) -> None:
        self.program = program
        self.args_list = args
        self.returncode = returncode
        self.stderr = stderr
        self.operation_context = operation_context
        super().__init__(self._build_message())

    @property
    def command_line(self) -> str:
        return " ".join([self.program, *self.args_list])

    def _build_message(self) -> str:
        if self.returncode is None:
            return (
                f"Command not found while trying to {self.operation_context}: {self.program}"
                f"\nFull command: {self.command_line}"
            )
        message = f"Failed to {self.operation_context}"
        message += f"\nCommand: {self.command_line}"
        message += f"\nExit code: {self.returncode}"
        if self.stderr:
            message += f"\nstderr: {self.stderr}"
        return message


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
    **kwargs: Any,
) -> subprocess.CompletedProcess[str]:
    """Execute a subprocess, raising CommandError with full context on failure.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of the operation,
            phrased to follow "Failed to ..."
        cwd: Working directory for command execution
        **kwargs: Additional arguments passed to subprocess.run()

    Returns:
        CompletedProcess with captured text stdout/stderr

    Raises:
        CommandError: If the command exits non-zero or is not installed
    """
    logger.debug("Running %s (cwd=%s)", " ".join(cmd), cwd)
    try:
        return subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=True,
            **kwargs,
        )
    except subprocess.CalledProcessError as e:
        stderr_text = e.stderr
        if not isinstance(stderr_text, str):
            stderr_text = (stderr_text or b"").decode("utf-8", errors="replace")
        raise CommandError(
            program=str(cmd[0]),
            args=[str(arg) for arg in cmd[1:]],
            returncode=e.returncode,
            stderr=stderr_text.strip(),
            operation_context=operation_context,
        ) from e
    except FileNotFoundError as e:
        raise CommandError(
            program=str(cmd[0]),
            args=[str(arg) for arg in cmd[1:]],
            returncode=None,
            stderr="",
            operation_context=operation_context,
        ) from e
