"""Sequential merge of a validated stack."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import click

from stackmerge.cli.commands.merge.decisions import DecisionProvider
from stackmerge.cli.commands.merge.errors import PullRequestQueryError, RecoverableMergeError
from stackmerge.cli.commands.merge.models import (
    BranchNode,
    MergeOutcome,
    MergeSessionConfig,
    ValidationResult,
)
from stackmerge.cli.commands.merge.output import _emit, _format_pr
from stackmerge.cli.commands.merge.propagation import propagate_merge
from stackmerge.cli.commands.merge.retry import retry_with_backoff
from stackmerge.cli.commands.merge.state_machine import PullRequestMerger, StateTransition
from stackmerge.core.context import StackMergeContext
from stackmerge.core.github.types import MergeMethod, RepoMergeMethods
from stackmerge.core.stack.graph import BranchGraph

logger = logging.getLogger(__name__)


@dataclass
class MergeRun:
    """Everything a finished run produced."""

    outcomes: list[MergeOutcome] = field(default_factory=list)
    transitions: list[StateTransition] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(outcome.is_success for outcome in self.outcomes)


def resolve_merge_method(
    ctx: StackMergeContext, repo_root: Path, session: MergeSessionConfig
) -> MergeMethod:
    """Pick the merge method: --method, then repo config, then the platform default.

    The platform is asked at most once per run.
    """
    if session.merge_method_override is not None:
        return session.merge_method_override
    if ctx.repo_config.merge_method is not None:
        return ctx.repo_config.merge_method

    @retry_with_backoff(ctx=ctx)
    def fetch() -> RepoMergeMethods:
        return ctx.github.get_repo_merge_methods(repo_root)

    methods = fetch()
    logger.debug("Repository allows %s; default %s", methods.allowed, methods.default)
    return methods.default


def _emit_header(index: int, total: int, node: BranchNode) -> None:
    branch = click.style(node.name, fg="yellow")
    base = click.style(node.parent_name or "?", fg="yellow")
    _emit(
        click.style(f"\n[{index}/{total}] ", bold=True)
        + f"PR {_format_pr(node.pr_number)}: {branch} → {base}"
    )


def merge_stack(
    ctx: StackMergeContext,
    repo_root: Path,
    validation: ValidationResult,
    session: MergeSessionConfig,
    decisions: DecisionProvider,
) -> MergeRun:
    """Merge every target in order, propagating after each one.

    At most one PR is ever between WAITING and DONE: the next PR's machine
    starts only after the previous PR's sync and submit finished. The branch
    graph is re-read before every PR because sync deletes merged branches
    and restacking changes parents.

    A run stops at the first abort. Merges that already happened stay merged.
    When validation cut the stack at a frozen branch, a successful run ends
    with a StoppedAtFrozen outcome for that branch.

    Args:
        ctx: Stackmerge context
        repo_root: Repository root directory
        validation: Validated targets and the frozen cut point, if any
        session: Run settings
        decisions: Provider consulted on recoverable failures

    Returns:
        Ordered outcomes and every state transition of the run
    """
    run = MergeRun()
    targets = validation.targets
    total = len(targets)

    method: MergeMethod | None = None

    for index, planned in enumerate(targets, start=1):
        graph = BranchGraph.load(ctx.stack, ctx.git, repo_root)

        if not graph.is_tracked(planned.name):
            _emit(f"\n[{index}/{total}] {planned.name} was removed by sync; already merged")
            run.outcomes.append(MergeOutcome.skipped_already_merged(planned.name, planned.pr_number))
            continue

        node = BranchNode.from_graph(graph, planned.name)
        if node.frozen:
            _emit(f"\n{node.name} was frozen during the run; stopping")
            run.outcomes.append(MergeOutcome.stopped_at_frozen(node.name))
            return run

        _emit_header(index, total, node)

        if method is None:
            try:
                method = resolve_merge_method(ctx, repo_root, session)
            except RuntimeError as e:
                error = PullRequestQueryError(node.name, node.pr_number, f"cannot read merge methods: {e}")
                run.outcomes.append(
                    MergeOutcome.aborted(node.name, node.pr_number, str(error), error_kind=error.kind)
                )
                return run

        merger = PullRequestMerger(
            ctx,
            repo_root,
            node,
            method=method,
            timeout_seconds=session.timeout_seconds,
            decisions=decisions,
            transitions=run.transitions,
        )
        outcome = merger.run()
        if not outcome.is_success:
            run.outcomes.append(outcome)
            return run

        try:
            propagate_merge(ctx, repo_root, node, decisions)
        except RecoverableMergeError as e:
            # The PR stays merged on the platform even though propagation stopped.
            run.outcomes.append(outcome)
            run.outcomes.append(
                MergeOutcome.aborted(node.name, node.pr_number, str(e), error_kind=e.kind)
            )
            return run

        run.outcomes.append(outcome)

    if validation.stopped_at_frozen is not None:
        run.outcomes.append(MergeOutcome.stopped_at_frozen(validation.stopped_at_frozen))

    return run
