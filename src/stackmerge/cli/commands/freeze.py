"""Freeze and unfreeze branches so merge runs stop before them."""

from typing import NoReturn

import click

from stackmerge.cli.output import user_output
from stackmerge.core.context import StackMergeContext
from stackmerge.core.repo_discovery import NoRepoSentinel, RepoContext
from stackmerge.core.stack.graph import BranchGraph


def _error(message: str) -> NoReturn:
    user_output(click.style("Error: ", fg="red") + message)
    raise SystemExit(1)


def _require_repo(ctx: StackMergeContext) -> RepoContext:
    if isinstance(ctx.repo, NoRepoSentinel):
        _error(ctx.repo.message)
    return ctx.repo


def _resolve_branch(ctx: StackMergeContext, branch: str | None) -> str:
    if branch is not None:
        return branch
    current = ctx.git.get_current_branch(ctx.cwd)
    if current is None:
        _error("HEAD is detached; pass the branch to act on")
    return current


@click.command("freeze")
@click.argument("branch", required=False)
@click.pass_obj
def freeze_cmd(ctx: StackMergeContext, branch: str | None) -> None:
    """Freeze BRANCH (default: current branch).

    A merge run stops cleanly before a frozen branch and leaves it, and
    everything stacked on it, untouched.
    """
    repo = _require_repo(ctx)
    branch = _resolve_branch(ctx, branch)
    graph = BranchGraph.load(ctx.stack, ctx.git, repo.root)

    if graph.is_trunk(branch) or branch == ctx.trunk_branch:
        _error("Cannot freeze trunk!")

    if not graph.is_tracked(branch):
        _error(f"Branch {branch} is not tracked by the stack tool.")

    if graph.pr_number_of(branch) is None:
        user_output(click.style("Error: ", fg="red") + f"Branch {branch} has no submitted PR.")
        user_output("\nTo fix:")
        user_output("  • Submit it first, e.g.: gt submit")
        raise SystemExit(1)

    if graph.is_frozen(branch):
        user_output(f"Branch {click.style(branch, fg='yellow')} is already frozen.")
        return

    ctx.stack.set_frozen(ctx.git, repo.root, branch, frozen=True)
    user_output(click.style("✓ ", fg="green") + f"Froze branch {click.style(branch, fg='yellow')}.")
    user_output(
        click.style(
            "Tip: stackmerge merge stops before frozen branches; unfreeze to merge past it.",
            dim=True,
        )
    )


@click.command("unfreeze")
@click.argument("branch", required=False)
@click.pass_obj
def unfreeze_cmd(ctx: StackMergeContext, branch: str | None) -> None:
    """Unfreeze BRANCH (default: current branch)."""
    repo = _require_repo(ctx)
    branch = _resolve_branch(ctx, branch)
    graph = BranchGraph.load(ctx.stack, ctx.git, repo.root)

    if not graph.is_tracked(branch):
        _error(f"Branch {branch} is not tracked by the stack tool.")

    if not graph.is_frozen(branch):
        user_output(f"Branch {click.style(branch, fg='yellow')} is not frozen.")
        return

    ctx.stack.set_frozen(ctx.git, repo.root, branch, frozen=False)
    user_output(click.style("✓ ", fg="green") + f"Unfroze branch {click.style(branch, fg='yellow')}.")
