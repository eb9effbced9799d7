"""Type definitions for GitHub operations."""

from dataclasses import dataclass, field
from typing import Literal

PRState = Literal["OPEN", "MERGED", "CLOSED"]

# GitHub's mergeStateStatus. Anything else the API returns is mapped to UNKNOWN.
MergeStateStatus = Literal["CLEAN", "BLOCKED", "BEHIND", "DIRTY", "UNKNOWN", "UNSTABLE"]

MergeMethod = Literal["squash", "merge", "rebase"]

MERGE_METHODS: tuple[MergeMethod, ...] = ("squash", "merge", "rebase")


@dataclass(frozen=True)
class CheckSummary:
    """Check-run counts for a pull request's head commit."""

    completed: int
    total: int
    failing: int = 0

    @property
    def all_completed(self) -> bool:
        return self.completed >= self.total


@dataclass(frozen=True)
class PullRequestStatus:
    """Snapshot of a pull request, fetched fresh on every poll."""

    number: int
    state: PRState
    base_ref_name: str
    head_ref_name: str
    merge_state_status: MergeStateStatus
    checks: CheckSummary = field(default_factory=lambda: CheckSummary(completed=0, total=0))

    @property
    def is_closed_or_merged(self) -> bool:
        return self.state in ("MERGED", "CLOSED")


@dataclass(frozen=True)
class RepoMergeMethods:
    """Merge methods the repository allows, plus the one used by default."""

    allowed: tuple[MergeMethod, ...]
    default: MergeMethod
