"""Fake git operations for testing.

FakeGit is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from pathlib import Path

from stackmerge.core.git.abc import Git


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults (empty dicts).
    """

    def __init__(
        self,
        *,
        current_branches: dict[Path, str | None] | None = None,
        uncommitted_changes: dict[Path, bool] | None = None,
        trunk_branches: dict[Path, str] | None = None,
        git_common_dirs: dict[Path, Path] | None = None,
        branch_config: dict[tuple[str, str], str] | None = None,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            current_branches: Mapping of cwd -> current branch (None for detached HEAD)
            uncommitted_changes: Mapping of cwd -> whether tracked files are modified
            trunk_branches: Mapping of repo_root -> trunk branch (default "main")
            git_common_dirs: Mapping of cwd -> common .git directory
            branch_config: Mapping of (branch, key) -> value
        """
        self._current_branches = current_branches or {}
        self._uncommitted_changes = uncommitted_changes or {}
        self._trunk_branches = trunk_branches or {}
        self._git_common_dirs = git_common_dirs or {}
        self._branch_config = dict(branch_config or {})
        self._config_writes: list[tuple[str, str, str | None]] = []

    @property
    def branch_config(self) -> dict[tuple[str, str], str]:
        """Current (branch, key) -> value config state for test assertions."""
        return self._branch_config

    @property
    def config_writes(self) -> list[tuple[str, str, str | None]]:
        """Recorded config mutations as (branch, key, value) tuples.

        A value of None records an unset.
        """
        return self._config_writes

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branches.get(cwd)

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        return self._uncommitted_changes.get(cwd, False)

    def get_trunk_branch(self, repo_root: Path) -> str:
        return self._trunk_branches.get(repo_root, "main")

    def get_git_common_dir(self, cwd: Path) -> Path | None:
        return self._git_common_dirs.get(cwd)

    def get_branch_config(self, repo_root: Path, branch: str, key: str) -> str | None:
        return self._branch_config.get((branch, key))

    def set_branch_config(self, repo_root: Path, branch: str, key: str, value: str) -> None:
        self._branch_config[(branch, key)] = value
        self._config_writes.append((branch, key, value))

    def unset_branch_config(self, repo_root: Path, branch: str, key: str) -> None:
        self._branch_config.pop((branch, key), None)
        self._config_writes.append((branch, key, None))
