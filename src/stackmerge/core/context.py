"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

import click

from stackmerge.cli.output import user_output
from stackmerge.core.config import ConfigError, RepoConfig, load_repo_config
from stackmerge.core.git.abc import Git
from stackmerge.core.git.real import RealGit
from stackmerge.core.github.abc import GitHub
from stackmerge.core.github.real import RealGitHub
from stackmerge.core.repo_discovery import NoRepoSentinel, RepoContext, discover_repo_or_sentinel
from stackmerge.core.stack.abc import Stack
from stackmerge.core.stack.real import RealStack
from stackmerge.core.time.abc import Time
from stackmerge.core.time.real import RealTime


@dataclass(frozen=True)
class StackMergeContext:
    """Immutable context holding all dependencies for stackmerge operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: Git
    github: GitHub
    stack: Stack
    time: Time
    cwd: Path  # Current working directory at CLI invocation
    repo: RepoContext | NoRepoSentinel
    repo_config: RepoConfig

    @property
    def trunk_branch(self) -> str | None:
        """Get the trunk branch name.

        Uses the configured trunk_branch when set, otherwise git detection.
        Returns None if not in a repository.
        """
        if isinstance(self.repo, NoRepoSentinel):
            return None
        if self.repo_config.trunk_branch is not None:
            return self.repo_config.trunk_branch
        return self.git.get_trunk_branch(self.repo.root)

    @staticmethod
    def for_test(
        git: Git | None = None,
        github: GitHub | None = None,
        stack: Stack | None = None,
        time: Time | None = None,
        cwd: Path | None = None,
        repo: RepoContext | NoRepoSentinel | None = None,
        repo_config: RepoConfig | None = None,
    ) -> "StackMergeContext":
        """Create test context with optional pre-configured integration classes.

        Any unspecified integration gets its empty fake. When no repo is given,
        one rooted at cwd is assumed.

        Example:
            >>> stack = FakeStack(branches={"main": BranchMetadata.trunk()})
            >>> ctx = StackMergeContext.for_test(stack=stack, cwd=Path("/repo"))
        """
        from stackmerge.core.git.fake import FakeGit
        from stackmerge.core.github.fake import FakeGitHub
        from stackmerge.core.stack.fake import FakeStack
        from stackmerge.core.time.fake import FakeTime

        if cwd is None:
            cwd = Path("/test/repo")

        if repo is None:
            repo = RepoContext(root=cwd, repo_name=cwd.name)

        return StackMergeContext(
            git=git if git is not None else FakeGit(),
            github=github if github is not None else FakeGitHub(),
            stack=stack if stack is not None else FakeStack(),
            time=time if time is not None else FakeTime(),
            cwd=cwd,
            repo=repo,
            repo_config=repo_config if repo_config is not None else RepoConfig(),
        )


def safe_cwd() -> tuple[Path | None, str | None]:
    """Get current working directory, detecting if it no longer exists.

    Returns:
        tuple[Path | None, str | None]: (path, error_message)
        - If successful: (Path, None)
        - If directory deleted: (None, error_message)
    """
    try:
        cwd_path = Path.cwd()
        return (cwd_path, None)
    except (FileNotFoundError, OSError):
        return (
            None,
            "Current working directory no longer exists",
        )


def create_context() -> StackMergeContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.
    """
    cwd, error_msg = safe_cwd()
    if cwd is None:
        assert error_msg is not None
        user_output(click.style("Error: ", fg="red") + error_msg)
        user_output("\nThe directory you're running from has been deleted.")
        user_output("Please change to a valid directory and try again.")
        raise SystemExit(1)

    git: Git = RealGit()
    repo = discover_repo_or_sentinel(cwd, git)

    repo_config = RepoConfig()
    if isinstance(repo, RepoContext):
        try:
            repo_config = load_repo_config(repo.root)
        except ConfigError as e:
            user_output(click.style("Error: ", fg="red") + f"Invalid [tool.stackmerge] config: {e}")
            raise SystemExit(1) from None

    return StackMergeContext(
        git=git,
        github=RealGitHub(),
        stack=RealStack(repo_config.stack_cli),
        time=RealTime(),
        cwd=cwd,
        repo=repo,
        repo_config=repo_config,
    )
