"""Value types shared across the merge command."""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

from stackmerge.core.github.types import MergeMethod
from stackmerge.core.stack.graph import BranchGraph

POLL_INTERVAL_SECONDS = 30.0
DEFAULT_TIMEOUT_MINUTES = 15.0


@dataclass(frozen=True)
class BranchNode:
    """One member of the stack, as read from the branch graph."""

    name: str
    parent_name: str | None
    pr_number: int | None
    frozen: bool

    @staticmethod
    def from_graph(graph: BranchGraph, name: str) -> "BranchNode":
        return BranchNode(
            name=name,
            parent_name=graph.parent_of(name),
            pr_number=graph.pr_number_of(name),
            frozen=graph.is_frozen(name),
        )


@dataclass(frozen=True)
class TargetList:
    """Branches to merge, trunk-adjacent first.

    Order is the merge order. Every narrowing operation returns a new view.
    """

    nodes: tuple[BranchNode, ...]

    def __iter__(self) -> Iterator[BranchNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def names(self) -> list[str]:
        return [node.name for node in self.nodes]

    def first_frozen(self) -> BranchNode | None:
        for node in self.nodes:
            if node.frozen:
                return node
        return None

    def truncate_before(self, name: str) -> "TargetList":
        """Keep the nodes strictly before `name` (all of them if absent)."""
        names = self.names
        if name not in names:
            return self
        return TargetList(nodes=self.nodes[: names.index(name)])

    def truncate_after(self, name: str) -> "TargetList":
        """Keep the nodes up to and including `name` (all of them if absent)."""
        names = self.names
        if name not in names:
            return self
        return TargetList(nodes=self.nodes[: names.index(name) + 1])

    def refreshed(self, graph: BranchGraph) -> "TargetList":
        """Re-read every node from `graph`, dropping branches it no longer tracks."""
        return TargetList(
            nodes=tuple(
                BranchNode.from_graph(graph, node.name)
                for node in self.nodes
                if graph.is_tracked(node.name)
            )
        )


@dataclass(frozen=True)
class MergeSessionConfig:
    """Settings for one run, fixed before the first merge."""

    dry_run: bool
    until_branch: str | None
    timeout_minutes: float
    merge_method_override: MergeMethod | None
    interactive: bool
    verbose: bool = False

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_minutes * 60


@dataclass(frozen=True)
class ValidationResult:
    """Targets that survived precondition checks and the initial sync."""

    targets: TargetList
    stopped_at_frozen: str | None


OutcomeKind = Literal["merged", "skipped_already_merged", "stopped_at_frozen", "aborted"]


@dataclass(frozen=True)
class MergeOutcome:
    """Per-branch result of a run. The ordered list of these is the run's result."""

    kind: OutcomeKind
    branch: str
    pr_number: int | None = None
    reason: str | None = None
    error_kind: str | None = None

    @staticmethod
    def merged(branch: str, pr_number: int) -> "MergeOutcome":
        return MergeOutcome(kind="merged", branch=branch, pr_number=pr_number)

    @staticmethod
    def skipped_already_merged(branch: str, pr_number: int | None) -> "MergeOutcome":
        return MergeOutcome(kind="skipped_already_merged", branch=branch, pr_number=pr_number)

    @staticmethod
    def stopped_at_frozen(branch: str) -> "MergeOutcome":
        return MergeOutcome(kind="stopped_at_frozen", branch=branch)

    @staticmethod
    def aborted(
        branch: str, pr_number: int | None, reason: str, *, error_kind: str | None = None
    ) -> "MergeOutcome":
        return MergeOutcome(
            kind="aborted",
            branch=branch,
            pr_number=pr_number,
            reason=reason,
            error_kind=error_kind,
        )

    @property
    def is_success(self) -> bool:
        return self.kind != "aborted"


@dataclass(frozen=True)
class DryRunEntry:
    pr_number: int | None
    branch: str
    base_branch: str | None
    note: str
