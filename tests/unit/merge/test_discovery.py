"""Tests for resolving the merge order from the branch graph."""

import pytest

from stackmerge.cli.commands.merge.discovery import resolve_targets
from stackmerge.cli.commands.merge.errors import (
    DetachedHeadError,
    OnTrunkError,
    UntilNotInStackError,
    UntrackedBranchError,
)
from stackmerge.core.stack.graph import BranchGraph
from stackmerge.core.stack.types import BranchMetadata
from tests.test_utils.builders import linear_stack


def _graph(names: list[str], **kwargs: object) -> BranchGraph:
    return BranchGraph(branches=linear_stack(names, **kwargs))  # type: ignore[arg-type]


def test_resolve_orders_trunk_outward() -> None:
    graph = _graph(["feature-a", "feature-b", "feature-c"])

    targets = resolve_targets(graph, "feature-c", None, "main")

    assert targets.names == ["feature-a", "feature-b", "feature-c"]
    assert [node.pr_number for node in targets] == [101, 102, 103]
    assert [node.parent_name for node in targets] == ["main", "feature-a", "feature-b"]


def test_resolve_ignores_branches_above_current() -> None:
    graph = _graph(["feature-a", "feature-b", "feature-c"])

    targets = resolve_targets(graph, "feature-b", None, "main")

    assert targets.names == ["feature-a", "feature-b"]


def test_resolve_until_is_inclusive() -> None:
    graph = _graph(["feature-a", "feature-b", "feature-c"])

    targets = resolve_targets(graph, "feature-c", "feature-b", "main")

    assert targets.names == ["feature-a", "feature-b"]


def test_resolve_until_outside_stack_fails() -> None:
    graph = _graph(["feature-a", "feature-b"])

    with pytest.raises(UntilNotInStackError) as exc_info:
        resolve_targets(graph, "feature-a", "feature-b", "main")

    assert exc_info.value.until_branch == "feature-b"
    assert exc_info.value.stack == ["feature-a"]


def test_resolve_detached_head_fails() -> None:
    with pytest.raises(DetachedHeadError):
        resolve_targets(_graph(["feature-a"]), None, None, "main")


def test_resolve_on_trunk_fails() -> None:
    with pytest.raises(OnTrunkError):
        resolve_targets(_graph(["feature-a"]), "main", None, "main")


def test_resolve_configured_trunk_stops_walk() -> None:
    branches = linear_stack(["release", "feature-a"])
    graph = BranchGraph(branches=branches)

    targets = resolve_targets(graph, "feature-a", None, "release")

    assert targets.names == ["feature-a"]


def test_resolve_untracked_current_branch_fails() -> None:
    with pytest.raises(UntrackedBranchError) as exc_info:
        resolve_targets(_graph(["feature-a"]), "scratch", None, "main")

    assert exc_info.value.branch == "scratch"


def test_resolve_cycle_fails_instead_of_looping() -> None:
    graph = BranchGraph(
        branches={
            "main": BranchMetadata.trunk(),
            "x": BranchMetadata.branch("x", "y", pr_number=1),
            "y": BranchMetadata.branch("y", "x", pr_number=2),
        }
    )

    with pytest.raises(UntrackedBranchError):
        resolve_targets(graph, "x", None, "main")


def test_frozen_truncation_is_a_view() -> None:
    graph = _graph(["feature-a", "feature-b", "feature-c"], frozen=("feature-b",))
    targets = resolve_targets(graph, "feature-c", None, "main")

    frozen = targets.first_frozen()
    assert frozen is not None
    truncated = targets.truncate_before(frozen.name)

    assert truncated.names == ["feature-a"]
    assert targets.names == ["feature-a", "feature-b", "feature-c"]
