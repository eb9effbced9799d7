"""CLI tests for `stackmerge freeze` and `stackmerge unfreeze`."""

from pathlib import Path

from click.testing import CliRunner

from stackmerge.cli.cli import cli
from stackmerge.core.context import StackMergeContext
from stackmerge.core.git.fake import FakeGit
from stackmerge.core.stack.fake import FakeStack
from stackmerge.core.stack.types import BranchMetadata
from tests.test_utils.builders import linear_stack

CWD = Path("/test/repo")


def _ctx(
    branches: dict[str, BranchMetadata], current: str | None = "feature-a"
) -> tuple[StackMergeContext, FakeStack]:
    stack = FakeStack(branches=branches)
    git = FakeGit(current_branches={CWD: current})
    return StackMergeContext.for_test(git=git, stack=stack, cwd=CWD), stack


def test_freeze_current_branch() -> None:
    ctx, stack = _ctx(linear_stack(["feature-a"]))

    result = CliRunner().invoke(cli, ["freeze"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Froze branch feature-a." in result.output
    assert "Tip:" in result.output
    assert stack.frozen_calls == [("feature-a", True)]


def test_freeze_named_branch() -> None:
    ctx, stack = _ctx(linear_stack(["feature-a", "feature-b"]))

    result = CliRunner().invoke(cli, ["freeze", "feature-b"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert stack.branches["feature-b"].frozen


def test_freeze_trunk_fails() -> None:
    ctx, stack = _ctx(linear_stack(["feature-a"]), current="main")

    result = CliRunner().invoke(cli, ["freeze"], obj=ctx)

    assert result.exit_code == 1
    assert "Cannot freeze trunk!" in result.output
    assert stack.frozen_calls == []


def test_freeze_untracked_branch_fails() -> None:
    ctx, _ = _ctx(linear_stack(["feature-a"]))

    result = CliRunner().invoke(cli, ["freeze", "scratch"], obj=ctx)

    assert result.exit_code == 1
    assert "not tracked" in result.output


def test_freeze_branch_without_pr_fails_with_hint() -> None:
    ctx, stack = _ctx(linear_stack(["feature-a"], without_pr=("feature-a",)))

    result = CliRunner().invoke(cli, ["freeze"], obj=ctx)

    assert result.exit_code == 1
    assert "has no submitted PR" in result.output
    assert "gt submit" in result.output
    assert stack.frozen_calls == []


def test_freeze_already_frozen_is_a_no_op() -> None:
    ctx, stack = _ctx(linear_stack(["feature-a"], frozen=("feature-a",)))

    result = CliRunner().invoke(cli, ["freeze"], obj=ctx)

    assert result.exit_code == 0
    assert "Branch feature-a is already frozen." in result.output
    assert stack.frozen_calls == []


def test_freeze_detached_head_without_branch_fails() -> None:
    ctx, _ = _ctx(linear_stack(["feature-a"]), current=None)

    result = CliRunner().invoke(cli, ["freeze"], obj=ctx)

    assert result.exit_code == 1
    assert "detached" in result.output


def test_unfreeze_frozen_branch() -> None:
    ctx, stack = _ctx(linear_stack(["feature-a"], frozen=("feature-a",)))

    result = CliRunner().invoke(cli, ["unfreeze"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Unfroze branch feature-a." in result.output
    assert not stack.branches["feature-a"].frozen


def test_unfreeze_not_frozen_is_a_no_op() -> None:
    ctx, stack = _ctx(linear_stack(["feature-a"]))

    result = CliRunner().invoke(cli, ["unfreeze"], obj=ctx)

    assert result.exit_code == 0
    assert "is not frozen" in result.output
    assert stack.frozen_calls == []
