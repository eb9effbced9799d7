"""Error taxonomy for the merge command.

PreconditionError subclasses are fatal and raised before anything is mutated.
RecoverableMergeError subclasses are resolved by the retry/abort policy.
Errors name the branch and PR they concern.
"""

from typing import ClassVar


class StackMergeError(Exception):
    """Base class for all merge command errors."""

    kind: ClassVar[str] = "error"


class PreconditionError(StackMergeError):
    """A precondition failed; nothing has been merged or mutated."""

    def __init__(self, message: str, *, hints: list[str] | None = None):
        self.hints = hints or []
        super().__init__(message)


class DetachedHeadError(PreconditionError):
    kind = "detached_head"

    def __init__(self) -> None:
        super().__init__(
            "HEAD is detached (not on a branch)",
            hints=["Check out a branch: git checkout <branch-name>"],
        )


class OnTrunkError(PreconditionError):
    kind = "on_trunk"

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(
            f"Current branch '{branch}' is trunk; there is nothing to merge",
            hints=["Check out the top branch of the stack you want to merge"],
        )


class UntrackedBranchError(PreconditionError):
    kind = "untracked_branch"

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(
            f"Branch '{branch}' is not part of a tracked stack",
            hints=["Track the branch with your stack tool, e.g.: gt track"],
        )


class UntilNotInStackError(PreconditionError):
    kind = "until_not_in_stack"

    def __init__(self, until_branch: str, stack: list[str]):
        self.until_branch = until_branch
        self.stack = stack
        super().__init__(
            f"Branch '{until_branch}' is not between trunk and the current branch\n"
            f"Stack: {' → '.join(stack) if stack else '(empty)'}",
            hints=["Pass --until with one of the branches listed above"],
        )


class DirtyWorkingTreeError(PreconditionError):
    kind = "dirty_working_tree"

    def __init__(self, path: str, branch: str):
        self.path = path
        self.branch = branch
        super().__init__(
            f"Working tree has uncommitted changes\nPath: {path}\nBranch: {branch}",
            hints=[
                "Commit your changes: git add . && git commit -m 'message'",
                "Stash your changes: git stash",
            ],
        )


class MissingPullRequestError(PreconditionError):
    kind = "missing_pull_request"

    def __init__(self, branches: list[str]):
        self.branches = branches
        listed = "\n".join(f"  • {branch}" for branch in branches)
        super().__init__(
            f"These branches have no pull request:\n{listed}",
            hints=["Submit the stack first, e.g.: gt submit --stack"],
        )

    @property
    def branch_name(self) -> str:
        return self.branches[0]


class RecoverableMergeError(StackMergeError):
    """A failure that needs human judgment: retry after remediation, or abort."""

    def __init__(self, branch: str, pr_number: int | None, detail: str):
        self.branch = branch
        self.pr_number = pr_number
        self.detail = detail
        super().__init__(f"{self._subject()}: {detail}")

    def _subject(self) -> str:
        if self.pr_number is None:
            return f"{self.branch}"
        return f"PR #{self.pr_number} ({self.branch})"


class ChecksFailedError(RecoverableMergeError):
    kind = "checks_failed"

    def __init__(self, branch: str, pr_number: int, merge_state_status: str, failing: int):
        self.merge_state_status = merge_state_status
        self.failing = failing
        if merge_state_status == "DIRTY":
            detail = "has merge conflicts with its base (DIRTY)"
        else:
            detail = f"{failing} failing check(s) ({merge_state_status})"
        super().__init__(branch, pr_number, detail)


class CheckTimeoutError(RecoverableMergeError):
    kind = "timeout"

    def __init__(self, branch: str, pr_number: int, elapsed_seconds: float, last_status: str):
        self.elapsed_seconds = elapsed_seconds
        self.last_status = last_status
        super().__init__(
            branch,
            pr_number,
            f"not mergeable after {elapsed_seconds / 60:.1f} min (last status: {last_status})",
        )


class PullRequestQueryError(RecoverableMergeError):
    kind = "api_error"


class MergeBlockedFailure(RecoverableMergeError):
    kind = "merge_blocked"


class SyncFailureError(RecoverableMergeError):
    kind = "sync_failed"


class SubmitFailureError(RecoverableMergeError):
    kind = "submit_failed"
