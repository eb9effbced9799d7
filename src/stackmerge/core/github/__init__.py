"""GitHub operations subpackage."""

from stackmerge.core.github.abc import GitHub
from stackmerge.core.github.errors import MergeBlockedError, TransientGitHubError
from stackmerge.core.github.fake import FakeGitHub
from stackmerge.core.github.real import RealGitHub
from stackmerge.core.github.types import (
    CheckSummary,
    MergeMethod,
    PullRequestStatus,
    RepoMergeMethods,
)

__all__ = [
    "CheckSummary",
    "FakeGitHub",
    "GitHub",
    "MergeBlockedError",
    "MergeMethod",
    "PullRequestStatus",
    "RealGitHub",
    "RepoMergeMethods",
    "TransientGitHubError",
]
