"""Resolve the ordered list of branches to merge from the local branch graph."""

from stackmerge.cli.commands.merge.errors import (
    DetachedHeadError,
    OnTrunkError,
    UntilNotInStackError,
    UntrackedBranchError,
)
from stackmerge.cli.commands.merge.models import BranchNode, TargetList
from stackmerge.core.stack.graph import BranchGraph


def _is_trunk(graph: BranchGraph, name: str, trunk_branch: str | None) -> bool:
    return graph.is_trunk(name) or name == trunk_branch


def resolve_targets(
    graph: BranchGraph,
    current_branch: str | None,
    until_branch: str | None,
    trunk_branch: str | None,
) -> TargetList:
    """Walk parent links from the current branch down to trunk.

    The walk is reversed so the trunk-adjacent branch comes first, then cut
    after `until_branch` when one is given. Trunk itself is never a target.

    Args:
        graph: Snapshot of tracked branches
        current_branch: Checked-out branch, None for detached HEAD
        until_branch: Last branch to merge, inclusive
        trunk_branch: Configured or detected trunk name

    Returns:
        Targets ordered trunk-outward

    Raises:
        DetachedHeadError: If HEAD is detached
        OnTrunkError: If the current branch is trunk
        UntrackedBranchError: If the current branch, or any ancestor, is untracked
        UntilNotInStackError: If until_branch is not between trunk and current
    """
    if current_branch is None:
        raise DetachedHeadError()

    if _is_trunk(graph, current_branch, trunk_branch):
        raise OnTrunkError(current_branch)

    walk: list[BranchNode] = []
    seen: set[str] = set()
    name = current_branch
    while not _is_trunk(graph, name, trunk_branch):
        if not graph.is_tracked(name) or name in seen:
            raise UntrackedBranchError(name)
        seen.add(name)
        node = BranchNode.from_graph(graph, name)
        walk.append(node)
        if node.parent_name is None:
            raise UntrackedBranchError(name)
        name = node.parent_name

    walk.reverse()
    targets = TargetList(nodes=tuple(walk))

    if until_branch is None:
        return targets

    if until_branch not in targets.names:
        raise UntilNotInStackError(until_branch, targets.names)

    return targets.truncate_after(until_branch)
