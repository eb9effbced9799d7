"""Repository discovery functionality.

Discovers git repository information from a given path without requiring
full StackMergeContext (enables config loading before context creation).
"""

from dataclasses import dataclass
from pathlib import Path

from stackmerge.core.git.abc import Git


@dataclass(frozen=True)
class RepoContext:
    """Represents a git repo root."""

    root: Path
    repo_name: str


@dataclass(frozen=True)
class NoRepoSentinel:
    """Sentinel value indicating execution outside a git repository.

    Commands that require repo context can check for this sentinel and fail fast.
    """

    message: str = "Not inside a git repository"


def discover_repo_or_sentinel(cwd: Path, git: Git) -> RepoContext | NoRepoSentinel:
    """Find the repository containing `cwd`.

    Properly handles git worktrees by resolving the main repository root from
    the common git directory, not the worktree's .git file.
    """
    if not cwd.exists():
        return NoRepoSentinel(message=f"Start path '{cwd}' does not exist")

    git_common_dir = git.get_git_common_dir(cwd)
    if git_common_dir is None:
        return NoRepoSentinel(message="Not inside a git repository (no .git found up the tree)")

    root = git_common_dir.parent.resolve()
    return RepoContext(root=root, repo_name=root.name)
