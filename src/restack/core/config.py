"""Configuration data structures and loading.

Settings are layered, later sources win:

1. Built-in defaults
2. Global config at ~/.restack/config.toml (or $RESTACK_CONFIG)
3. The repository's pyproject.toml, [tool.restack] section

Example ~/.restack/config.toml:

    remote = "upstream"
    autostash = true
"""

import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

CONFIG_ENV_VAR = "RESTACK_CONFIG"


@dataclass(frozen=True)
class RestackConfig:
    """Immutable configuration, loaded once at CLI entry point."""

    remote: str = "origin"
    push: bool = True
    autostash: bool = False
    require_worktrees: bool = False
    open_pr_limit: int = 100


_FIELD_TYPES: dict[str, type] = {
    "remote": str,
    "push": bool,
    "autostash": bool,
    "require_worktrees": bool,
    "open_pr_limit": int,
}


def global_config_path() -> Path:
    """Get the path to the global config file.

    Returns:
        $RESTACK_CONFIG if set, otherwise ~/.restack/config.toml
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".restack" / "config.toml"


def apply_overrides(config: RestackConfig, data: dict[str, Any], source: Path) -> RestackConfig:
    """Return a copy of config with values from data applied.

    Raises:
        ValueError: On unknown keys or values of the wrong type
    """
    known = {f.name for f in fields(RestackConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown setting(s) {', '.join(unknown)} in {source}")

    for key, value in data.items():
        expected = _FIELD_TYPES[key]
        # bool is a subclass of int; reject true/false for numeric settings
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ValueError(
                f"Setting '{key}' in {source} must be a {expected.__name__}, got {value!r}"
            )

    if "open_pr_limit" in data and data["open_pr_limit"] < 1:
        raise ValueError(f"Setting 'open_pr_limit' in {source} must be at least 1")

    return replace(config, **data)


def read_pyproject_section(repo_root: Path) -> dict[str, Any] | None:
    """Read the [tool.restack] section from the repository's pyproject.toml.

    Returns:
        The section as a dict, or None if the file or section is absent
    """
    pyproject_path = repo_root / "pyproject.toml"

    if not pyproject_path.exists():
        return None

    with pyproject_path.open("rb") as f:
        data = tomllib.load(f)

    tool_section = data.get("tool")
    if tool_section is None:
        return None

    return tool_section.get("restack")


def load_config(*, repo_root: Path | None, global_path: Path | None = None) -> RestackConfig:
    """Load configuration from all sources.

    Args:
        repo_root: Repository root whose pyproject.toml is consulted, if any
        global_path: Global config file (defaults to global_config_path())

    Returns:
        RestackConfig with defaults for anything not configured

    Raises:
        ValueError: If a config file contains unknown keys or bad values
        tomllib.TOMLDecodeError: If a config file is not valid TOML
    """
    config = RestackConfig()

    config_path = global_path if global_path is not None else global_config_path()
    if config_path.exists():
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        config = apply_overrides(config, data, config_path)

    if repo_root is not None:
        section = read_pyproject_section(repo_root)
        if section is not None:
            config = apply_overrides(config, section, repo_root / "pyproject.toml")

    return config
