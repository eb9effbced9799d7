"""Production implementation of GitHub operations."""

import json
from pathlib import Path

from stackmerge.core.github.abc import GitHub
from stackmerge.core.github.errors import MergeBlockedError, TransientGitHubError
from stackmerge.core.github.parsing import (
    is_merge_blocked_failure,
    is_transient_failure,
    parse_pull_request_status,
    parse_repo_merge_methods,
    parse_retry_after,
)
from stackmerge.core.github.types import MergeMethod, PullRequestStatus, RepoMergeMethods
from stackmerge.core.subprocess import run_subprocess_with_context

_PR_FIELDS = "number,state,baseRefName,headRefName,mergeStateStatus,statusCheckRollup"


class RealGitHub(GitHub):
    """Production implementation using gh CLI.

    All GitHub operations execute actual gh commands via subprocess. Commands
    run with check=False so that stderr can be classified into transient,
    merge-blocked, and fatal failures.
    """

    def _run_gh(self, cmd: list[str], operation_context: str, repo_root: Path) -> str:
        result = run_subprocess_with_context(
            cmd,
            operation_context=operation_context,
            cwd=repo_root,
            check=False,
        )
        if result.returncode == 0:
            return result.stdout

        stderr = result.stderr.strip() if result.stderr else ""
        message = f"Failed to {operation_context}: {stderr or f'exit code {result.returncode}'}"
        if is_transient_failure(stderr):
            raise TransientGitHubError(message, retry_after=parse_retry_after(stderr))
        raise RuntimeError(message)

    def get_pull_request(self, repo_root: Path, pr_number: int) -> PullRequestStatus:
        stdout = self._run_gh(
            ["gh", "pr", "view", str(pr_number), "--json", _PR_FIELDS],
            f"fetch PR #{pr_number}",
            repo_root,
        )
        try:
            return parse_pull_request_status(stdout)
        except (json.JSONDecodeError, KeyError) as e:
            msg = f"Unexpected gh output for PR #{pr_number}: {e}"
            raise RuntimeError(msg) from e

    def merge_pull_request(self, repo_root: Path, pr_number: int, method: MergeMethod) -> None:
        """Merge a pull request on GitHub via gh CLI.

        The head branch is left in place; the stack tool's sync deletes it
        once GitHub reports the PR merged.
        """
        cmd = ["gh", "pr", "merge", str(pr_number), f"--{method}"]
        try:
            self._run_gh(cmd, f"merge PR #{pr_number}", repo_root)
        except TransientGitHubError:
            raise
        except RuntimeError as e:
            if is_merge_blocked_failure(str(e)):
                raise MergeBlockedError(pr_number, str(e)) from e
            raise

    def get_repo_merge_methods(self, repo_root: Path) -> RepoMergeMethods:
        stdout = self._run_gh(
            [
                "gh",
                "repo",
                "view",
                "--json",
                "squashMergeAllowed,mergeCommitAllowed,rebaseMergeAllowed",
            ],
            "query repository merge settings",
            repo_root,
        )
        return parse_repo_merge_methods(stdout)
