"""Abstract base class for stack tool operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from stackmerge.core.git.abc import Git
from stackmerge.core.stack.types import BranchMetadata, SubmitResult, SyncOptions, SyncResult


class Stack(ABC):
    """Abstract interface for the stacked-branch tool.

    Reads expose the local branch graph. sync() and submit() are the mutating
    collaborators the merge loop calls after every merge; both must be safe to
    repeat.
    """

    @abstractmethod
    def get_all_branches(self, git: Git, repo_root: Path) -> dict[str, BranchMetadata]:
        """Get metadata for every tracked branch, keyed by branch name.

        Returns an empty dict when the repository has no stack metadata.
        """
        ...

    @abstractmethod
    def set_frozen(self, git: Git, repo_root: Path, branch: str, *, frozen: bool) -> None:
        """Mark a branch frozen or unfrozen."""
        ...

    @abstractmethod
    def sync(self, repo_root: Path, options: SyncOptions) -> SyncResult:
        """Pull trunk, delete merged/closed branches, and restack survivors.

        Raises:
            StackCommandError: If the stack tool fails
        """
        ...

    @abstractmethod
    def submit(self, repo_root: Path) -> SubmitResult:
        """Push restacked branches and update PR bases, titles and bodies.

        Raises:
            StackCommandError: If the stack tool fails
        """
        ...
