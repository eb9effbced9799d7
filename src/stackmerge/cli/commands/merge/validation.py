"""Precondition checks run before anything is merged."""

from pathlib import Path

from stackmerge.cli.commands.merge.errors import (
    DirtyWorkingTreeError,
    MissingPullRequestError,
    OnTrunkError,
    SyncFailureError,
)
from stackmerge.cli.commands.merge.models import TargetList, ValidationResult
from stackmerge.cli.commands.merge.output import _check, _emit, _format_description
from stackmerge.core.context import StackMergeContext
from stackmerge.core.stack.graph import BranchGraph
from stackmerge.core.stack.types import StackCommandError, SyncOptions


def _validate_clean_working_tree(ctx: StackMergeContext, current_branch: str) -> None:
    if ctx.git.has_uncommitted_changes(ctx.cwd):
        raise DirtyWorkingTreeError(str(ctx.cwd), current_branch)


def _validate_not_trunk(ctx: StackMergeContext, graph: BranchGraph, current_branch: str) -> None:
    if graph.is_trunk(current_branch) or current_branch == ctx.trunk_branch:
        raise OnTrunkError(current_branch)


def _validate_pull_requests(targets: TargetList) -> None:
    missing = [node.name for node in targets if node.pr_number is None]
    if missing:
        raise MissingPullRequestError(missing)


def _run_initial_sync(ctx: StackMergeContext, repo_root: Path, current_branch: str) -> None:
    try:
        result = ctx.stack.sync(repo_root, SyncOptions())
    except StackCommandError as e:
        raise SyncFailureError(current_branch, None, f"initial sync failed: {e}") from e

    _emit(_format_description("sync", _check()))
    for branch in result.deleted_branches:
        _emit(f"  deleted merged branch {branch}")


def validate_preconditions(
    ctx: StackMergeContext,
    repo_root: Path,
    targets: TargetList,
    current_branch: str,
) -> ValidationResult:
    """Check every precondition, sync once, then narrow the targets.

    Checks run in order and the first failure is raised:
    1. No uncommitted changes to tracked files
    2. Current branch is not trunk
    3. Every target has a pull request
    4. Initial sync succeeds (pulls trunk, deletes merged branches, restacks)
    5. The refreshed targets are cut before the first frozen branch

    Branches the initial sync removed were already merged and are dropped.

    Raises:
        PreconditionError: If any of checks 1-3 fails
        SyncFailureError: If the initial sync fails
    """
    _validate_clean_working_tree(ctx, current_branch)
    _validate_not_trunk(ctx, BranchGraph.load(ctx.stack, ctx.git, repo_root), current_branch)
    _validate_pull_requests(targets)

    _run_initial_sync(ctx, repo_root, current_branch)

    refreshed = targets.refreshed(BranchGraph.load(ctx.stack, ctx.git, repo_root))
    frozen = refreshed.first_frozen()
    if frozen is None:
        return ValidationResult(targets=refreshed, stopped_at_frozen=None)

    return ValidationResult(targets=refreshed.truncate_before(frozen.name), stopped_at_frozen=frozen.name)
