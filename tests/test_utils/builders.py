"""Builders for branch graphs and pull request snapshots used across tests."""

from stackmerge.core.github.types import (
    CheckSummary,
    MergeStateStatus,
    PRState,
    PullRequestStatus,
)
from stackmerge.core.stack.types import BranchMetadata


def linear_stack(
    names: list[str],
    *,
    trunk: str = "main",
    first_pr: int = 101,
    frozen: tuple[str, ...] = (),
    without_pr: tuple[str, ...] = (),
) -> dict[str, BranchMetadata]:
    """Build trunk → names[0] → names[1] → ... with sequential PR numbers."""
    branches: dict[str, BranchMetadata] = {
        trunk: BranchMetadata.trunk(trunk, children=names[:1]),
    }
    parent = trunk
    for index, name in enumerate(names):
        children = [names[index + 1]] if index + 1 < len(names) else []
        branches[name] = BranchMetadata.branch(
            name,
            parent,
            children=children,
            pr_number=None if name in without_pr else first_pr + index,
            frozen=name in frozen,
        )
        parent = name
    return branches


def pr_status(
    number: int,
    merge_state: MergeStateStatus = "CLEAN",
    *,
    state: PRState = "OPEN",
    head: str = "feature",
    base: str = "main",
    completed: int = 3,
    total: int = 3,
    failing: int = 0,
) -> PullRequestStatus:
    return PullRequestStatus(
        number=number,
        state=state,
        base_ref_name=base,
        head_ref_name=head,
        merge_state_status=merge_state,
        checks=CheckSummary(completed=completed, total=total, failing=failing),
    )
