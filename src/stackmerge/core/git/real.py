"""Production implementation of git operations."""

import subprocess
from pathlib import Path

from stackmerge.core.git.abc import Git
from stackmerge.core.subprocess import run_subprocess_with_context


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch."""
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        branch = result.stdout.strip()
        if branch == "HEAD":
            return None

        return branch

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check if tracked files in the worktree have uncommitted changes."""
        result = run_subprocess_with_context(
            ["git", "status", "--porcelain", "--untracked-files=no"],
            operation_context="check working tree status",
            cwd=cwd,
        )
        return bool(result.stdout.strip())

    def get_trunk_branch(self, repo_root: Path) -> str:
        """Get the trunk branch name for the repository.

        Detects trunk by checking git's remote HEAD reference. Falls back to
        checking for existence of common trunk branch names if detection fails.
        """
        result = subprocess.run(
            ["git", "symbolic-ref", "refs/remotes/origin/HEAD"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == 0:
            # Parse "refs/remotes/origin/master" -> "master"
            ref = result.stdout.strip()
            if ref.startswith("refs/remotes/origin/"):
                return ref.replace("refs/remotes/origin/", "")

        for candidate in ["main", "master"]:
            result = subprocess.run(
                ["git", "show-ref", "--verify", f"refs/heads/{candidate}"],
                cwd=repo_root,
                capture_output=True,
                check=False,
            )
            if result.returncode == 0:
                return candidate

        return "main"

    def get_git_common_dir(self, cwd: Path) -> Path | None:
        result = subprocess.run(
            ["git", "rev-parse", "--git-common-dir"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        git_dir = Path(result.stdout.strip())
        if not git_dir.is_absolute():
            git_dir = cwd / git_dir
        return git_dir.resolve()

    def get_branch_config(self, repo_root: Path, branch: str, key: str) -> str | None:
        # Exit code 1 means the key is unset
        result = subprocess.run(
            ["git", "config", "--get", f"branch.{branch}.{key}"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def set_branch_config(self, repo_root: Path, branch: str, key: str, value: str) -> None:
        run_subprocess_with_context(
            ["git", "config", f"branch.{branch}.{key}", value],
            operation_context=f"set branch.{branch}.{key}",
            cwd=repo_root,
        )

    def unset_branch_config(self, repo_root: Path, branch: str, key: str) -> None:
        if self.get_branch_config(repo_root, branch, key) is None:
            return
        run_subprocess_with_context(
            ["git", "config", "--unset", f"branch.{branch}.{key}"],
            operation_context=f"unset branch.{branch}.{key}",
            cwd=repo_root,
        )
