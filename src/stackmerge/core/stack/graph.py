"""Read-only snapshot of the local branch graph."""

from dataclasses import dataclass
from pathlib import Path

from stackmerge.core.git.abc import Git
from stackmerge.core.stack.abc import Stack
from stackmerge.core.stack.types import BranchMetadata


@dataclass(frozen=True)
class BranchGraph:
    """Parent links, PR numbers and frozen flags for every tracked branch.

    A snapshot is only valid until the next sync: merges delete branches and
    restacks move parents, so callers load a fresh one instead of holding on.
    """

    branches: dict[str, BranchMetadata]

    @staticmethod
    def load(stack: Stack, git: Git, repo_root: Path) -> "BranchGraph":
        return BranchGraph(branches=stack.get_all_branches(git, repo_root))

    def is_tracked(self, name: str) -> bool:
        return name in self.branches

    def is_trunk(self, name: str) -> bool:
        metadata = self.branches.get(name)
        return metadata is not None and metadata.is_trunk

    def parent_of(self, name: str) -> str | None:
        metadata = self.branches.get(name)
        if metadata is None:
            return None
        return metadata.parent

    def is_frozen(self, name: str) -> bool:
        metadata = self.branches.get(name)
        return metadata is not None and metadata.frozen

    def pr_number_of(self, name: str) -> int | None:
        metadata = self.branches.get(name)
        if metadata is None:
            return None
        return metadata.pr_number
