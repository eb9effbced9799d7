"""Type definitions for stack tool operations."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BranchMetadata:
    """Metadata for a single branch tracked by the stack tool.

    Attributes:
        name: Branch name
        parent: Parent branch name, or None for trunk
        children: List of child branch names
        is_trunk: True if this is the trunk branch (main/master)
        pr_number: Associated pull request number, if the branch was submitted
        frozen: True if the branch is frozen and must not be merged
    """

    name: str
    parent: str | None
    children: list[str]
    is_trunk: bool
    pr_number: int | None = None
    frozen: bool = False

    @staticmethod
    def trunk(name: str = "main", *, children: list[str] | None = None) -> "BranchMetadata":
        """Create a trunk branch (main/master/develop).

        Args:
            name: Branch name (default: "main")
            children: List of child branch names (defaults to empty list)

        Returns:
            BranchMetadata with parent=None and is_trunk=True
        """
        return BranchMetadata(
            name=name,
            parent=None,
            children=children if children is not None else [],
            is_trunk=True,
        )

    @staticmethod
    def branch(
        name: str,
        parent: str = "main",
        *,
        children: list[str] | None = None,
        pr_number: int | None = None,
        frozen: bool = False,
    ) -> "BranchMetadata":
        """Create a regular feature branch.

        Args:
            name: Branch name
            parent: Parent branch name (default: "main")
            children: List of child branch names (defaults to empty list)
            pr_number: Associated PR number (default: None)
            frozen: Whether the branch is frozen (default: False)

        Returns:
            BranchMetadata with is_trunk=False
        """
        return BranchMetadata(
            name=name,
            parent=parent,
            children=children if children is not None else [],
            is_trunk=False,
            pr_number=pr_number,
            frozen=frozen,
        )


@dataclass(frozen=True)
class SyncOptions:
    """Options for the stack tool's sync.

    pull: fetch trunk from the remote
    force: force-update the local trunk ref and skip confirmation prompts
    delete: delete local branches whose PRs are merged or closed
    restack: rebase surviving branches onto the new trunk tip
    """

    pull: bool = True
    force: bool = True
    delete: bool = True
    restack: bool = True


@dataclass(frozen=True)
class SyncResult:
    deleted_branches: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BaseUpdate:
    pr_number: int
    new_base: str


@dataclass(frozen=True)
class SubmitResult:
    pushed: list[str] = field(default_factory=list)
    updated_bases: list[BaseUpdate] = field(default_factory=list)


class StackCommandError(RuntimeError):
    """The stack tool's sync or submit command failed."""
