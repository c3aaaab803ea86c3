"""Path utilities for tests."""

from pathlib import Path


def sentinel_path() -> Path:
    """Return sentinel path for tests that don't need a real filesystem.

    FakeGit never touches the filesystem, so any Path works as cwd or
    repository root. All tests share the same sentinel; they are isolated by
    their separate RestackContext instances, not by different paths.

    Examples:
        ctx = RestackContext.for_test(cwd=sentinel_path())
    """
    return Path("/test/sentinel")
