"""CLI command entry point for merge."""

import logging
import sys
from pathlib import Path
from typing import NoReturn, cast

import click
from rich.console import Console

from stackmerge.cli.commands.merge.decisions import (
    DecisionProvider,
    InteractiveDecisionProvider,
    NonInteractiveDecisionProvider,
)
from stackmerge.cli.commands.merge.discovery import resolve_targets
from stackmerge.cli.commands.merge.display import (
    build_dry_run_report,
    format_dry_run_entry,
    format_merge_summary,
)
from stackmerge.cli.commands.merge.errors import PreconditionError, RecoverableMergeError
from stackmerge.cli.commands.merge.execution import MergeRun, merge_stack
from stackmerge.cli.commands.merge.models import (
    DEFAULT_TIMEOUT_MINUTES,
    MergeSessionConfig,
    TargetList,
)
from stackmerge.cli.commands.merge.output import (
    _emit,
    _emit_machine_error,
    _emit_precondition_error,
)
from stackmerge.cli.commands.merge.validation import validate_preconditions
from stackmerge.cli.output import machine_output
from stackmerge.core.context import StackMergeContext
from stackmerge.core.github.types import MERGE_METHODS, MergeMethod
from stackmerge.core.repo_discovery import NoRepoSentinel
from stackmerge.core.stack.graph import BranchGraph

logger = logging.getLogger(__name__)


def _fail_precondition(error: PreconditionError, *, interactive: bool, branch: str) -> NoReturn:
    _emit_precondition_error(error)
    if not interactive:
        _emit_machine_error(kind=error.kind, branch=branch, pr_number=None, reason=str(error))
    raise SystemExit(1)


def _report_dry_run(targets: TargetList) -> None:
    frozen = targets.first_frozen()
    if frozen is not None:
        targets = targets.truncate_before(frozen.name)

    _emit(click.style("Dry run: ", bold=True) + "would merge in this order:")
    for entry in build_dry_run_report(targets):
        machine_output(format_dry_run_entry(entry))

    if frozen is not None:
        _emit(f"Would stop at frozen branch {click.style(frozen.name, fg='yellow')}")


def _show_transitions(run: MergeRun) -> None:
    if not run.transitions:
        return
    origin = run.transitions[0].at
    _emit("\nState transitions:")
    for transition in run.transitions:
        _emit(f"  {transition.at - origin:8.1f}s  PR #{transition.pr_number}  {transition.state.value}")


@click.command("merge")
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the merge order without validating, syncing or merging.",
)
@click.option(
    "--until",
    "until_branch",
    help="Last branch to merge (inclusive). Defaults to the current branch.",
)
@click.option(
    "--timeout",
    "timeout_minutes",
    type=click.FloatRange(min=0, min_open=True),
    help=f"Minutes to wait for each PR to become mergeable. [default: {DEFAULT_TIMEOUT_MINUTES:g}]",
)
@click.option(
    "--method",
    "merge_method",
    type=click.Choice(MERGE_METHODS),
    help="Merge method. Defaults to the repo config, then the repository's default.",
)
@click.option(
    "--interactive/--no-interactive",
    default=None,
    help="Prompt to retry or abort on failure. Defaults to on when stdin is a terminal.",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Show every state transition after the run.",
)
@click.pass_obj
def merge_cmd(
    ctx: StackMergeContext,
    dry_run: bool,
    until_branch: str | None,
    timeout_minutes: float | None,
    merge_method: str | None,
    interactive: bool | None,
    verbose: bool,
) -> None:
    """Merge the stack below the current branch, one PR at a time.

    Starting from the branch just above trunk, each PR is polled until the
    platform reports it mergeable, merged, and then sync and submit rebase
    the rest of the stack onto the new trunk before the next PR starts.

    A frozen branch ends the run cleanly and everything from it upward is
    left alone. Any failure that needs a human prompts to retry or abort;
    without a terminal the run aborts and prints a stackmerge-error line to
    stdout.

    Example:
        Stack: main → feat-1 → feat-2 → feat-3
        Current branch: feat-3
        Result: Merges feat-1, then feat-2, then feat-3

    Example (--until):
        Stack: main → feat-1 → feat-2 → feat-3
        Current branch: feat-3, --until feat-2
        Result: Merges feat-1 and feat-2, feat-3 untouched
    """
    if interactive is None:
        interactive = sys.stdin.isatty()

    logger.debug(
        "Command invoked: merge(dry_run=%s, until=%s, timeout=%s, method=%s, interactive=%s)",
        dry_run,
        until_branch,
        timeout_minutes,
        merge_method,
        interactive,
    )

    if isinstance(ctx.repo, NoRepoSentinel):
        _emit(click.style("Error: ", fg="red") + ctx.repo.message)
        raise SystemExit(1)
    repo_root = ctx.repo.root

    if timeout_minutes is None:
        timeout_minutes = ctx.repo_config.timeout_minutes or DEFAULT_TIMEOUT_MINUTES

    session = MergeSessionConfig(
        dry_run=dry_run,
        until_branch=until_branch,
        timeout_minutes=timeout_minutes,
        merge_method_override=cast(MergeMethod | None, merge_method),
        interactive=interactive,
        verbose=verbose,
    )

    try:
        _run(ctx, repo_root, session)
    except FileNotFoundError as e:
        _emit(click.style("Error: ", fg="red") + f"Command not found: {e.filename}")
        _emit("\nTo fix:")
        _emit("  • Install the GitHub CLI: https://cli.github.com")
        _emit(f"  • Install your stack tool ({ctx.repo_config.stack_cli}) and make sure it is on PATH")
        raise SystemExit(1) from None


def _run(ctx: StackMergeContext, repo_root: Path, session: MergeSessionConfig) -> None:
    current_branch = ctx.git.get_current_branch(ctx.cwd)
    logger.debug("Current branch detected: %s", current_branch)

    graph = BranchGraph.load(ctx.stack, ctx.git, repo_root)
    try:
        targets = resolve_targets(graph, current_branch, session.until_branch, ctx.trunk_branch)
    except PreconditionError as e:
        _fail_precondition(e, interactive=session.interactive, branch=current_branch or "HEAD")
    logger.debug("Targets resolved: %s", targets.names)

    if session.dry_run:
        _report_dry_run(targets)
        return

    assert current_branch is not None
    try:
        validation = validate_preconditions(ctx, repo_root, targets, current_branch)
    except PreconditionError as e:
        _fail_precondition(e, interactive=session.interactive, branch=current_branch)
    except RecoverableMergeError as e:
        _emit(click.style("Error: ", fg="red") + str(e))
        if not session.interactive:
            _emit_machine_error(
                kind=e.kind, branch=e.branch, pr_number=e.pr_number, reason=e.detail
            )
        raise SystemExit(1) from None

    if not validation.targets and validation.stopped_at_frozen is None:
        _emit(click.style("✓ ", fg="green") + "All PRs in the stack are already merged.")
        return

    decisions: DecisionProvider
    if session.interactive:
        decisions = InteractiveDecisionProvider()
    else:
        decisions = NonInteractiveDecisionProvider()

    started = ctx.time.monotonic()
    run = merge_stack(ctx, repo_root, validation, session, decisions)
    duration = ctx.time.monotonic() - started

    _emit()
    Console(stderr=True).print(format_merge_summary(run.outcomes, duration))
    if session.verbose:
        _show_transitions(run)

    if run.succeeded:
        return

    failed = run.outcomes[-1]
    if not session.interactive:
        _emit_machine_error(
            kind=failed.error_kind or "aborted",
            branch=failed.branch,
            pr_number=failed.pr_number,
            reason=failed.reason or "aborted",
        )
    raise SystemExit(1)
