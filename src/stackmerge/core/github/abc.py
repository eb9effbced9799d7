"""Abstract base class for GitHub operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from stackmerge.core.github.types import MergeMethod, PullRequestStatus, RepoMergeMethods


class GitHub(ABC):
    """Abstract interface for the review platform.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def get_pull_request(self, repo_root: Path, pr_number: int) -> PullRequestStatus:
        """Fetch a fresh snapshot of a pull request.

        Args:
            repo_root: Repository root directory
            pr_number: PR number to query

        Raises:
            TransientGitHubError: On network/API failures worth retrying
            RuntimeError: On any other failure
        """
        ...

    @abstractmethod
    def merge_pull_request(self, repo_root: Path, pr_number: int, method: MergeMethod) -> None:
        """Merge a pull request.

        Args:
            repo_root: Repository root directory
            pr_number: PR number to merge
            method: One of "squash", "merge", "rebase"

        Raises:
            MergeBlockedError: If branch protection rejected the merge
            TransientGitHubError: On network/API failures worth retrying
            RuntimeError: On any other failure
        """
        ...

    @abstractmethod
    def get_repo_merge_methods(self, repo_root: Path) -> RepoMergeMethods:
        """Report the merge methods the repository allows and its default."""
        ...
