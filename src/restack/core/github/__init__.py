"""GitHub operations subpackage (gh CLI)."""

from restack.core.github.abc import GitHub
from restack.core.github.real import RealGitHub
from restack.core.github.types import StackedPR

__all__ = [
    "GitHub",
    "RealGitHub",
    "StackedPR",
]
