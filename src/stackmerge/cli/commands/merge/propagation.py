"""Propagate a merge to the rest of the stack: sync, then submit."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from stackmerge.cli.commands.merge.decisions import DecisionProvider
from stackmerge.cli.commands.merge.errors import (
    RecoverableMergeError,
    SubmitFailureError,
    SyncFailureError,
)
from stackmerge.cli.commands.merge.models import BranchNode
from stackmerge.cli.commands.merge.output import _check, _emit, _format_description
from stackmerge.core.context import StackMergeContext
from stackmerge.core.stack.types import StackCommandError, SubmitResult, SyncOptions, SyncResult

T = TypeVar("T")


@dataclass(frozen=True)
class PropagationResult:
    sync: SyncResult
    submit: SubmitResult


def _run_with_recovery(
    action: Callable[[], T],
    make_error: Callable[[str], RecoverableMergeError],
    decisions: DecisionProvider,
) -> T:
    """Run `action`, asking the decision provider after each failure.

    Raises:
        RecoverableMergeError: When the provider decides to abort
    """
    while True:
        try:
            return action()
        except StackCommandError as e:
            error = make_error(str(e))
            if decisions.ask_retry_or_abort(error) == "abort":
                raise error from e


def propagate_merge(
    ctx: StackMergeContext,
    repo_root: Path,
    node: BranchNode,
    decisions: DecisionProvider,
) -> PropagationResult:
    """Sync trunk and restack the remaining branches, then push them.

    Sync uses the default SyncOptions, so it always restacks. Submit pushes
    restacked branches and retargets PR bases so the next PR points at trunk.
    Each step is retried on the provider's say-so.

    Args:
        ctx: Stackmerge context
        repo_root: Repository root directory
        node: The branch whose PR was just merged or skipped
        decisions: Provider consulted when a step fails

    Returns:
        What sync and submit changed

    Raises:
        SyncFailureError: If sync fails and the provider aborts
        SubmitFailureError: If submit fails and the provider aborts
    """
    merged_note = f"PR #{node.pr_number} is merged; re-run stackmerge merge to continue"

    sync_result = _run_with_recovery(
        lambda: ctx.stack.sync(repo_root, SyncOptions()),
        lambda detail: SyncFailureError(node.name, node.pr_number, f"{detail} ({merged_note})"),
        decisions,
    )
    _emit(_format_description("sync", _check()))
    for branch in sync_result.deleted_branches:
        _emit(f"    deleted {branch}")

    submit_result = _run_with_recovery(
        lambda: ctx.stack.submit(repo_root),
        lambda detail: SubmitFailureError(node.name, node.pr_number, f"{detail} ({merged_note})"),
        decisions,
    )
    _emit(_format_description("submit", _check()))
    for update in submit_result.updated_bases:
        _emit(f"    PR #{update.pr_number} now targets {update.new_base}")

    return PropagationResult(sync=sync_result, submit=submit_result)
