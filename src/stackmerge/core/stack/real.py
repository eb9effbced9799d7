"""Production implementation of stack tool operations."""

import dataclasses
from pathlib import Path

from stackmerge.core.git.abc import Git
from stackmerge.core.stack.abc import Stack
from stackmerge.core.stack.parsing import (
    parse_deleted_branches,
    parse_graphite_cache,
    parse_graphite_pr_info,
    parse_submitted_branches,
    parse_updated_bases,
    read_graphite_json_file,
)
from stackmerge.core.stack.types import (
    BranchMetadata,
    StackCommandError,
    SubmitResult,
    SyncOptions,
    SyncResult,
)
from stackmerge.core.subprocess import run_subprocess_with_context

FROZEN_CONFIG_KEY = "stackmerge-frozen"


class RealStack(Stack):
    """Production implementation driving the stack CLI via subprocess.

    Branch metadata is read straight from the stack tool's cache files; the
    frozen flag is kept in per-branch git config.
    """

    def __init__(self, executable: str = "gt") -> None:
        self._executable = executable

    def get_all_branches(self, git: Git, repo_root: Path) -> dict[str, BranchMetadata]:
        git_dir = git.get_git_common_dir(repo_root)
        if git_dir is None:
            return {}

        cache = read_graphite_json_file(git_dir / ".graphite_cache_persist")
        if cache is None:
            return {}
        branches = parse_graphite_cache(cache)

        pr_info = read_graphite_json_file(git_dir / ".graphite_pr_info")
        pr_numbers = parse_graphite_pr_info(pr_info) if pr_info is not None else {}

        return {
            name: dataclasses.replace(
                metadata,
                pr_number=pr_numbers.get(name),
                frozen=git.get_branch_config(repo_root, name, FROZEN_CONFIG_KEY) == "true",
            )
            for name, metadata in branches.items()
        }

    def set_frozen(self, git: Git, repo_root: Path, branch: str, *, frozen: bool) -> None:
        if frozen:
            git.set_branch_config(repo_root, branch, FROZEN_CONFIG_KEY, "true")
        else:
            git.unset_branch_config(repo_root, branch, FROZEN_CONFIG_KEY)

    def _run(self, args: list[str], operation_context: str, repo_root: Path) -> str:
        try:
            result = run_subprocess_with_context(
                [self._executable, *args],
                operation_context=operation_context,
                cwd=repo_root,
            )
        except RuntimeError as e:
            raise StackCommandError(str(e)) from e
        return result.stdout

    def sync(self, repo_root: Path, options: SyncOptions) -> SyncResult:
        """Run `<stack-cli> sync`.

        The stack tool always pulls trunk and deletes merged branches during
        sync, so pull=False or delete=False cannot be honoured.
        """
        if not options.pull or not options.delete:
            msg = f"{self._executable} sync always pulls trunk and deletes merged branches"
            raise ValueError(msg)

        args = ["sync", "--no-interactive"]
        if options.force:
            args.append("--force")
        if not options.restack:
            args.append("--no-restack")

        stdout = self._run(args, "sync stack with trunk", repo_root)
        return SyncResult(deleted_branches=parse_deleted_branches(stdout))

    def submit(self, repo_root: Path) -> SubmitResult:
        stdout = self._run(
            ["submit", "--stack", "--no-interactive", "--update-only", "--force"],
            "submit restacked branches",
            repo_root,
        )
        return SubmitResult(
            pushed=parse_submitted_branches(stdout),
            updated_bases=parse_updated_bases(stdout),
        )
