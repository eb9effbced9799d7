"""Fake GitHub operations for testing.

FakeGitHub is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from pathlib import Path

from stackmerge.core.github.abc import GitHub
from stackmerge.core.github.types import MergeMethod, PullRequestStatus, RepoMergeMethods

PullRequestScript = PullRequestStatus | Exception | list[PullRequestStatus | Exception]
MergeScript = Exception | None | list[Exception | None]


class FakeGitHub(GitHub):
    """In-memory fake implementation of GitHub operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults (empty dicts).

    Responses may be scripted as lists: each call consumes the next entry and
    the final entry repeats forever. Exception entries are raised.
    """

    def __init__(
        self,
        *,
        pull_requests: dict[int, PullRequestScript] | None = None,
        merge_results: dict[int, MergeScript] | None = None,
        merge_methods: RepoMergeMethods | None = None,
    ) -> None:
        """Create FakeGitHub with pre-configured state.

        Args:
            pull_requests: Mapping of pr_number -> status (or scripted sequence)
            merge_results: Mapping of pr_number -> exception to raise on merge
                (None for success, or a scripted sequence). Default is success.
            merge_methods: Repository merge settings (default: all allowed, squash)
        """
        self._pull_requests: dict[int, list[PullRequestStatus | Exception]] = {
            number: list(script) if isinstance(script, list) else [script]
            for number, script in (pull_requests or {}).items()
        }
        self._merge_results: dict[int, list[Exception | None]] = {
            number: list(script) if isinstance(script, list) else [script]
            for number, script in (merge_results or {}).items()
        }
        self._merge_methods = merge_methods or RepoMergeMethods(
            allowed=("squash", "merge", "rebase"), default="squash"
        )
        self._get_pull_request_calls: list[int] = []
        self._merge_attempts: list[tuple[int, MergeMethod]] = []
        self._merged_prs: list[tuple[int, MergeMethod]] = []
        self._merge_methods_calls = 0

    @property
    def get_pull_request_calls(self) -> list[int]:
        """PR numbers passed to get_pull_request(), in call order."""
        return self._get_pull_request_calls

    @property
    def merge_attempts(self) -> list[tuple[int, MergeMethod]]:
        """Every merge_pull_request() call, successful or not."""
        return self._merge_attempts

    @property
    def merged_prs(self) -> list[tuple[int, MergeMethod]]:
        """(pr_number, method) for each successful merge."""
        return self._merged_prs

    @property
    def merge_methods_calls(self) -> int:
        """Number of get_repo_merge_methods() calls."""
        return self._merge_methods_calls

    def get_pull_request(self, repo_root: Path, pr_number: int) -> PullRequestStatus:
        self._get_pull_request_calls.append(pr_number)
        script = self._pull_requests.get(pr_number)
        if script is None:
            msg = f"Failed to fetch PR #{pr_number}: no pull requests found"
            raise RuntimeError(msg)

        entry = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(entry, Exception):
            raise entry
        return entry

    def merge_pull_request(self, repo_root: Path, pr_number: int, method: MergeMethod) -> None:
        self._merge_attempts.append((pr_number, method))
        script = self._merge_results.get(pr_number)
        if script is not None:
            entry = script.pop(0) if len(script) > 1 else script[0]
            if entry is not None:
                raise entry
        self._merged_prs.append((pr_number, method))

    def get_repo_merge_methods(self, repo_root: Path) -> RepoMergeMethods:
        self._merge_methods_calls += 1
        return self._merge_methods
