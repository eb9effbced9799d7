"""Abstract base class for git operations."""

from abc import ABC, abstractmethod
from pathlib import Path


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch.

        Returns:
            Branch name, or None when HEAD is detached or cwd is not a repository
        """
        ...

    @abstractmethod
    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check whether tracked files have staged or unstaged modifications.

        Untracked files are ignored: they survive checkouts and rebases.
        """
        ...

    @abstractmethod
    def get_trunk_branch(self, repo_root: Path) -> str:
        """Get the trunk branch name for the repository.

        Detects trunk by checking git's remote HEAD reference, falling back to
        common trunk branch names if detection fails.
        """
        ...

    @abstractmethod
    def get_git_common_dir(self, cwd: Path) -> Path | None:
        """Get the common git directory for a path.

        For regular repos, this is the .git directory. For worktrees, this is
        the shared .git directory.

        Returns:
            Path to the common git directory, or None if not in a git repo
        """
        ...

    @abstractmethod
    def get_branch_config(self, repo_root: Path, branch: str, key: str) -> str | None:
        """Read `branch.<branch>.<key>` from git config, or None if unset."""
        ...

    @abstractmethod
    def set_branch_config(self, repo_root: Path, branch: str, key: str, value: str) -> None:
        """Write `branch.<branch>.<key>` to the repository's git config."""
        ...

    @abstractmethod
    def unset_branch_config(self, repo_root: Path, branch: str, key: str) -> None:
        """Remove `branch.<branch>.<key>` from git config (no-op if unset)."""
        ...
