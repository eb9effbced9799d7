"""Repository configuration stored in `[tool.stackmerge]` of pyproject.toml.

Reads go through tomllib; writes go through tomlkit so that existing
formatting and comments in the file survive.
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import tomlkit

from stackmerge.core.github.types import MERGE_METHODS, MergeMethod

SETTING_KEYS = ("trunk_branch", "merge_method", "timeout_minutes", "stack_cli")


class ConfigError(ValueError):
    """A configuration value is missing or malformed."""


@dataclass(frozen=True)
class RepoConfig:
    """Immutable repo-level settings.

    Loaded once at CLI entry point and stored in StackMergeContext.
    """

    trunk_branch: str | None = None
    merge_method: MergeMethod | None = None
    timeout_minutes: float | None = None
    stack_cli: str = "gt"


def parse_setting(key: str, raw: Any) -> Any:
    """Validate and convert a single setting value.

    Raises:
        ConfigError: If the key is unknown or the value is invalid
    """
    if key not in SETTING_KEYS:
        msg = f"Unknown setting '{key}'. Valid settings: {', '.join(SETTING_KEYS)}"
        raise ConfigError(msg)

    if key == "merge_method":
        if raw not in MERGE_METHODS:
            msg = f"Invalid merge_method '{raw}'. Expected one of: {', '.join(MERGE_METHODS)}"
            raise ConfigError(msg)
        return cast(MergeMethod, raw)

    if key == "timeout_minutes":
        try:
            value = float(raw)
        except (TypeError, ValueError):
            msg = f"Invalid timeout_minutes '{raw}': expected a number"
            raise ConfigError(msg) from None
        if value <= 0:
            msg = f"Invalid timeout_minutes '{raw}': must be positive"
            raise ConfigError(msg)
        return int(value) if value.is_integer() else value

    value = str(raw).strip()
    if not value:
        msg = f"Setting '{key}' cannot be empty"
        raise ConfigError(msg)
    return value


def load_repo_config(repo_root: Path) -> RepoConfig:
    """Load `[tool.stackmerge]` from the repository's pyproject.toml.

    Returns defaults when the file or the section is absent.

    Raises:
        ConfigError: If a configured value is invalid
    """
    pyproject_path = repo_root / "pyproject.toml"
    if not pyproject_path.exists():
        return RepoConfig()

    with pyproject_path.open("rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get("stackmerge")
    if section is None:
        return RepoConfig()

    values = {key: parse_setting(key, section[key]) for key in SETTING_KEYS if key in section}
    return RepoConfig(**values)


def write_repo_setting(repo_root: Path, key: str, raw: Any) -> Any:
    """Write one setting to `[tool.stackmerge]` in pyproject.toml.

    Creates the file and the section if needed.

    Returns:
        The validated value that was written
    """
    value = parse_setting(key, raw)
    pyproject_path = repo_root / "pyproject.toml"

    if pyproject_path.exists():
        with pyproject_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)
    else:
        doc = tomlkit.document()

    if "tool" not in doc:
        doc["tool"] = tomlkit.table()  # type: ignore[index]

    if "stackmerge" not in doc["tool"]:  # type: ignore[operator]
        doc["tool"]["stackmerge"] = tomlkit.table()  # type: ignore[index]

    doc["tool"]["stackmerge"][key] = value  # type: ignore[index]

    with pyproject_path.open("w", encoding="utf-8") as f:
        tomlkit.dump(doc, f)

    return value
