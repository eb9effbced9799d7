"""Errors raised by the GitHub gateway."""


class TransientGitHubError(RuntimeError):
    """A failure that is expected to go away on its own.

    Covers 5xx responses, dropped connections, timeouts and rate limiting.
    retry_after carries the server's Retry-After hint in seconds, when given.
    """

    def __init__(self, message: str, *, retry_after: float | None = None):
        self.retry_after = retry_after
        super().__init__(message)


class MergeBlockedError(RuntimeError):
    """GitHub refused the merge because branch protection is not satisfied.

    This happens when protection state changed between a CLEAN read and the
    merge call, e.g. an approval was dismissed by a late push.
    """

    def __init__(self, pr_number: int, detail: str):
        self.pr_number = pr_number
        self.detail = detail
        super().__init__(f"GitHub rejected merge of PR #{pr_number}: {detail}")
