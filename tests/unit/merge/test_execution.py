"""Tests for the sequential merge loop."""

from pathlib import Path

from stackmerge.cli.commands.merge.decisions import Decision, ScriptedDecisionProvider
from stackmerge.cli.commands.merge.execution import MergeRun, merge_stack
from stackmerge.cli.commands.merge.models import (
    BranchNode,
    MergeOutcome,
    MergeSessionConfig,
    TargetList,
    ValidationResult,
)
from stackmerge.cli.commands.merge.state_machine import MergeState
from stackmerge.core.config import RepoConfig
from stackmerge.core.context import StackMergeContext
from stackmerge.core.github.fake import FakeGitHub, PullRequestScript
from stackmerge.core.github.types import MergeMethod, RepoMergeMethods
from stackmerge.core.stack.fake import FakeStack, SubmitScript, SyncScript
from stackmerge.core.stack.graph import BranchGraph
from stackmerge.core.stack.types import (
    BaseUpdate,
    BranchMetadata,
    StackCommandError,
    SubmitResult,
    SyncResult,
)
from stackmerge.core.time.fake import FakeTime
from tests.test_utils.builders import linear_stack, pr_status

REPO_ROOT = Path("/test/repo")


def _session(
    *, method: MergeMethod | None = None, timeout_minutes: float = 15.0
) -> MergeSessionConfig:
    return MergeSessionConfig(
        dry_run=False,
        until_branch=None,
        timeout_minutes=timeout_minutes,
        merge_method_override=method,
        interactive=False,
    )


def _targets(branches: dict[str, BranchMetadata], names: list[str]) -> TargetList:
    graph = BranchGraph(branches=branches)
    return TargetList(nodes=tuple(BranchNode.from_graph(graph, name) for name in names))


def _run(
    branches: dict[str, BranchMetadata],
    names: list[str],
    pull_requests: dict[int, PullRequestScript],
    *,
    sync_results: SyncScript | None = None,
    submit_results: SubmitScript | None = None,
    decisions: list[Decision] | None = None,
    session: MergeSessionConfig | None = None,
    stopped_at_frozen: str | None = None,
    repo_config: RepoConfig | None = None,
) -> tuple[MergeRun, FakeGitHub, FakeStack]:
    github = FakeGitHub(
        pull_requests=pull_requests,
        merge_methods=RepoMergeMethods(allowed=("merge", "rebase"), default="merge"),
    )
    stack = FakeStack(branches=branches, sync_results=sync_results, submit_results=submit_results)
    ctx = StackMergeContext.for_test(
        github=github, stack=stack, time=FakeTime(), repo_config=repo_config
    )
    validation = ValidationResult(
        targets=_targets(branches, names), stopped_at_frozen=stopped_at_frozen
    )
    run = merge_stack(
        ctx,
        REPO_ROOT,
        validation,
        session or _session(),
        ScriptedDecisionProvider(decisions),
    )
    return run, github, stack


def test_two_pr_stack_merges_in_order_with_propagation_between() -> None:
    run, github, stack = _run(
        linear_stack(["feature-a", "feature-b"]),
        ["feature-a", "feature-b"],
        {101: pr_status(101, head="feature-a"), 102: pr_status(102, head="feature-b")},
        sync_results=[
            SyncResult(deleted_branches=["feature-a"]),
            SyncResult(deleted_branches=["feature-b"]),
        ],
        submit_results=SubmitResult(updated_bases=[BaseUpdate(pr_number=102, new_base="main")]),
    )

    assert run.outcomes == [
        MergeOutcome.merged("feature-a", 101),
        MergeOutcome.merged("feature-b", 102),
    ]
    assert run.succeeded
    assert github.merged_prs == [(101, "merge"), (102, "merge")]
    assert len(stack.sync_calls) == 2
    assert len(stack.submit_calls) == 2
    assert set(stack.branches) == {"main"}


def test_at_most_one_pr_in_flight() -> None:
    run, _, _ = _run(
        linear_stack(["feature-a", "feature-b", "feature-c"]),
        ["feature-a", "feature-b", "feature-c"],
        {
            101: [pr_status(101, "BLOCKED"), pr_status(101)],
            102: [pr_status(102, "BEHIND"), pr_status(102)],
            103: pr_status(103),
        },
    )

    order = [transition.pr_number for transition in run.transitions]
    assert order == sorted(order)
    for earlier, later in zip(run.transitions, run.transitions[1:], strict=False):
        if earlier.pr_number != later.pr_number:
            assert earlier.state == MergeState.DONE
            assert later.state == MergeState.WAITING
            assert later.at >= earlier.at


def test_abort_stops_run_and_keeps_earlier_merges() -> None:
    run, github, stack = _run(
        linear_stack(["feature-a", "feature-b", "feature-c"]),
        ["feature-a", "feature-b", "feature-c"],
        {
            101: pr_status(101),
            102: pr_status(102, "BLOCKED", failing=1),
            103: pr_status(103),
        },
        sync_results=SyncResult(deleted_branches=["feature-a"]),
    )

    assert [outcome.kind for outcome in run.outcomes] == ["merged", "aborted"]
    assert run.outcomes[1].branch == "feature-b"
    assert run.outcomes[1].error_kind == "checks_failed"
    assert not run.succeeded
    assert github.merged_prs == [(101, "merge")]
    assert 103 not in github.get_pull_request_calls
    assert len(stack.sync_calls) == 1


def test_already_merged_prs_are_skipped_idempotently() -> None:
    run, github, stack = _run(
        linear_stack(["feature-a", "feature-b"]),
        ["feature-a", "feature-b"],
        {101: pr_status(101, state="MERGED"), 102: pr_status(102, state="MERGED")},
    )

    assert [outcome.kind for outcome in run.outcomes] == [
        "skipped_already_merged",
        "skipped_already_merged",
    ]
    assert run.succeeded
    assert github.merge_attempts == []
    assert len(stack.sync_calls) == 2


def test_branch_removed_by_earlier_sync_is_skipped() -> None:
    run, github, _ = _run(
        linear_stack(["feature-a", "feature-b"]),
        ["feature-a", "feature-b"],
        {101: pr_status(101), 102: pr_status(102)},
        sync_results=SyncResult(deleted_branches=["feature-a", "feature-b"]),
    )

    assert run.outcomes[1] == MergeOutcome.skipped_already_merged("feature-b", 102)
    assert github.merged_prs == [(101, "merge")]


def test_frozen_cut_point_is_reported_last() -> None:
    run, github, _ = _run(
        linear_stack(["feature-a", "feature-b"], frozen=("feature-b",)),
        ["feature-a"],
        {101: pr_status(101)},
        stopped_at_frozen="feature-b",
    )

    assert run.outcomes == [
        MergeOutcome.merged("feature-a", 101),
        MergeOutcome.stopped_at_frozen("feature-b"),
    ]
    assert run.succeeded
    assert 102 not in github.get_pull_request_calls


def test_branch_frozen_during_run_stops_before_it() -> None:
    run, github, _ = _run(
        linear_stack(["feature-a", "feature-b"], frozen=("feature-b",)),
        ["feature-a", "feature-b"],
        {101: pr_status(101), 102: pr_status(102)},
    )

    assert run.outcomes[-1] == MergeOutcome.stopped_at_frozen("feature-b")
    assert github.merged_prs == [(101, "merge")]


def test_platform_default_method_is_queried_once() -> None:
    _, github, _ = _run(
        linear_stack(["feature-a", "feature-b"]),
        ["feature-a", "feature-b"],
        {101: pr_status(101), 102: pr_status(102)},
    )

    assert github.merge_methods_calls == 1


def test_method_override_wins_over_config_and_platform() -> None:
    _, github, _ = _run(
        linear_stack(["feature-a"]),
        ["feature-a"],
        {101: pr_status(101)},
        session=_session(method="rebase"),
        repo_config=RepoConfig(merge_method="squash"),
    )

    assert github.merged_prs == [(101, "rebase")]
    assert github.merge_methods_calls == 0


def test_repo_config_method_used_without_override() -> None:
    _, github, _ = _run(
        linear_stack(["feature-a"]),
        ["feature-a"],
        {101: pr_status(101)},
        repo_config=RepoConfig(merge_method="squash"),
    )

    assert github.merged_prs == [(101, "squash")]
    assert github.merge_methods_calls == 0


def test_sync_failure_retry_repeats_sync() -> None:
    run, _, stack = _run(
        linear_stack(["feature-a"]),
        ["feature-a"],
        {101: pr_status(101)},
        sync_results=[StackCommandError("rebase conflict in feature-b"), SyncResult()],
        decisions=["retry"],
    )

    assert run.outcomes == [MergeOutcome.merged("feature-a", 101)]
    assert len(stack.sync_calls) == 2
    assert len(stack.submit_calls) == 1


def test_submit_failure_abort_reports_merged_pr() -> None:
    run, github, _ = _run(
        linear_stack(["feature-a", "feature-b"]),
        ["feature-a", "feature-b"],
        {101: pr_status(101), 102: pr_status(102)},
        submit_results=StackCommandError("push rejected"),
    )

    assert [outcome.kind for outcome in run.outcomes] == ["merged", "aborted"]
    assert run.outcomes[0] == MergeOutcome.merged("feature-a", 101)
    outcome = run.outcomes[1]
    assert outcome.branch == "feature-a"
    assert outcome.error_kind == "submit_failed"
    assert "re-run" in (outcome.reason or "")
    assert github.merged_prs == [(101, "merge")]
    assert not run.succeeded


def test_sync_failure_abort_keeps_merged_outcome() -> None:
    run, github, stack = _run(
        linear_stack(["feature-a", "feature-b"]),
        ["feature-a", "feature-b"],
        {101: pr_status(101), 102: pr_status(102)},
        sync_results=StackCommandError("rebase conflict in feature-b"),
    )

    assert run.outcomes[0] == MergeOutcome.merged("feature-a", 101)
    assert run.outcomes[1].kind == "aborted"
    assert run.outcomes[1].error_kind == "sync_failed"
    assert len(run.outcomes) == 2
    assert github.merged_prs == [(101, "merge")]
    assert stack.submit_calls == []
