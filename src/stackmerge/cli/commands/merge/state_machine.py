"""Per-PR merge lifecycle.

WAITING polls the platform until the PR is mergeable, MERGING performs the
merge, and the two failure states hand control to the decision provider:

    WAITING ──CLEAN──▶ MERGING ──ok──▶ DONE
       │                  │
       ▼                  ▼
    CHECK_FAILED      MERGE_BLOCKED
       │ retry            │ retry
       └─▶ WAITING        └─▶ MERGING
       abort ▶ ABORTED    abort ▶ ABORTED

A PR that is already merged or closed when WAITING polls it goes straight
to DONE without a merge call. A failed merge call re-queries the PR, and
so does every retry out of MERGE_BLOCKED; a PR the platform reports as
MERGED goes to DONE.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import click

from stackmerge.cli.commands.merge.decisions import DecisionProvider
from stackmerge.cli.commands.merge.errors import (
    ChecksFailedError,
    CheckTimeoutError,
    MergeBlockedFailure,
    PullRequestQueryError,
    RecoverableMergeError,
)
from stackmerge.cli.commands.merge.models import POLL_INTERVAL_SECONDS, BranchNode, MergeOutcome
from stackmerge.cli.commands.merge.output import _check, _emit, _format_description, _format_pr
from stackmerge.cli.commands.merge.retry import retry_with_backoff
from stackmerge.core.context import StackMergeContext
from stackmerge.core.github.errors import MergeBlockedError
from stackmerge.core.github.types import MergeMethod, PullRequestStatus

logger = logging.getLogger(__name__)


class MergeState(Enum):
    WAITING = "waiting"
    MERGING = "merging"
    DONE = "done"
    CHECK_FAILED = "check_failed"
    MERGE_BLOCKED = "merge_blocked"
    ABORTED = "aborted"


TERMINAL_STATES = (MergeState.DONE, MergeState.ABORTED)


@dataclass(frozen=True)
class StateTransition:
    """A state entered by one PR's machine, stamped with the monotonic clock."""

    pr_number: int
    state: MergeState
    at: float


def _is_definite_failure(status: PullRequestStatus) -> bool:
    """Whether the PR cannot become mergeable without someone acting on it.

    DIRTY means a merge conflict. BLOCKED with failing checks will not clear
    on its own. UNSTABLE with failing checks is final once every check ran.
    """
    if status.merge_state_status == "DIRTY":
        return True
    if status.checks.failing == 0:
        return False
    if status.merge_state_status == "BLOCKED":
        return True
    return status.merge_state_status == "UNSTABLE" and status.checks.all_completed


def _describe_status(status: PullRequestStatus) -> str:
    checks = status.checks
    if checks.total == 0:
        return status.merge_state_status
    return f"{status.merge_state_status}, checks {checks.completed}/{checks.total}"


class PullRequestMerger:
    """Drives one PR through WAITING and MERGING to a terminal state.

    Every state entered is appended to `transitions`, which the orchestrator
    shares across PRs so the run's full history can be inspected.
    """

    def __init__(
        self,
        ctx: StackMergeContext,
        repo_root: Path,
        node: BranchNode,
        *,
        method: MergeMethod,
        timeout_seconds: float,
        decisions: DecisionProvider,
        transitions: list[StateTransition],
    ) -> None:
        if node.pr_number is None:
            msg = f"Branch {node.name} has no pull request"
            raise ValueError(msg)
        self._ctx = ctx
        self._repo_root = repo_root
        self._node = node
        self._pr_number = node.pr_number
        self._method = method
        self._timeout_seconds = timeout_seconds
        self._decisions = decisions
        self._transitions = transitions
        self._state = MergeState.WAITING
        self._already_merged = False
        self._error: RecoverableMergeError | None = None

    @property
    def state(self) -> MergeState:
        return self._state

    def run(self) -> MergeOutcome:
        """Run until DONE or ABORTED and report the outcome."""
        self._enter(MergeState.WAITING)
        while self._state not in TERMINAL_STATES:
            if self._state == MergeState.WAITING:
                self._wait_until_mergeable()
            elif self._state == MergeState.MERGING:
                self._merge()
            else:
                self._recover()

        if self._state == MergeState.ABORTED:
            error = self._error
            if error is None:
                msg = f"PR #{self._pr_number} aborted without an error"
                raise RuntimeError(msg)
            return MergeOutcome.aborted(
                self._node.name, self._pr_number, str(error), error_kind=error.kind
            )

        if self._already_merged:
            return MergeOutcome.skipped_already_merged(self._node.name, self._pr_number)
        return MergeOutcome.merged(self._node.name, self._pr_number)

    def _enter(self, state: MergeState) -> None:
        logger.debug("PR #%s: %s -> %s", self._pr_number, self._state.value, state.value)
        self._state = state
        self._transitions.append(
            StateTransition(pr_number=self._pr_number, state=state, at=self._ctx.time.monotonic())
        )

    def _fail(self, state: MergeState, error: RecoverableMergeError) -> None:
        self._error = error
        self._enter(state)

    def _fetch_status(self) -> PullRequestStatus:
        @retry_with_backoff(ctx=self._ctx)
        def fetch() -> PullRequestStatus:
            return self._ctx.github.get_pull_request(self._repo_root, self._pr_number)

        return fetch()

    def _wait_until_mergeable(self) -> None:
        started = self._ctx.time.monotonic()
        last_reported: str | None = None

        while True:
            try:
                status = self._fetch_status()
            except RuntimeError as e:
                error = PullRequestQueryError(self._node.name, self._pr_number, str(e))
                self._fail(MergeState.CHECK_FAILED, error)
                return

            if status.is_closed_or_merged:
                _emit(f"  PR {_format_pr(self._pr_number)} is already {status.state.lower()}; skipping merge")
                self._already_merged = True
                self._enter(MergeState.DONE)
                return

            if status.merge_state_status == "CLEAN":
                _emit(_format_description(f"PR #{self._pr_number} is mergeable", _check()))
                self._enter(MergeState.MERGING)
                return

            if _is_definite_failure(status):
                error = ChecksFailedError(
                    self._node.name,
                    self._pr_number,
                    status.merge_state_status,
                    status.checks.failing,
                )
                self._fail(MergeState.CHECK_FAILED, error)
                return

            elapsed = self._ctx.time.monotonic() - started
            if elapsed >= self._timeout_seconds:
                error = CheckTimeoutError(
                    self._node.name, self._pr_number, elapsed, _describe_status(status)
                )
                self._fail(MergeState.CHECK_FAILED, error)
                return

            description = _describe_status(status)
            if description != last_reported:
                _emit(click.style(f"  waiting for PR #{self._pr_number} ({description})", dim=True))
                last_reported = description
            self._ctx.time.sleep(min(POLL_INTERVAL_SECONDS, self._timeout_seconds - elapsed))

    def _merge(self) -> None:
        @retry_with_backoff(ctx=self._ctx)
        def merge() -> None:
            self._ctx.github.merge_pull_request(self._repo_root, self._pr_number, self._method)

        try:
            merge()
        except MergeBlockedError as e:
            self._merge_failed(e.detail)
            return
        except RuntimeError as e:
            self._merge_failed(str(e))
            return

        _emit(_format_description(f"merged PR #{self._pr_number} ({self._method})", _check()))
        self._enter(MergeState.DONE)

    def _merge_failed(self, detail: str) -> None:
        if self._merged_on_platform():
            return
        self._fail(
            MergeState.MERGE_BLOCKED,
            MergeBlockedFailure(self._node.name, self._pr_number, detail),
        )

    def _merged_on_platform(self) -> bool:
        """Re-query the PR and enter DONE if the platform already merged it.

        A merge call can fail after the platform accepted it, for example a
        502 whose retry then reports the PR as already merged.
        """
        try:
            status = self._fetch_status()
        except RuntimeError as e:
            logger.debug("PR #%s: status re-check failed: %s", self._pr_number, e)
            return False

        if status.state != "MERGED":
            return False
        _emit(_format_description(f"PR #{self._pr_number} is merged", _check()))
        self._enter(MergeState.DONE)
        return True

    def _recover(self) -> None:
        error = self._error
        if error is None:
            msg = f"PR #{self._pr_number} entered {self._state.value} without an error"
            raise RuntimeError(msg)

        decision = self._decisions.ask_retry_or_abort(error)
        if decision == "abort":
            self._enter(MergeState.ABORTED)
            return

        resume = MergeState.WAITING if self._state == MergeState.CHECK_FAILED else MergeState.MERGING
        self._error = None
        if resume == MergeState.MERGING and self._merged_on_platform():
            return
        self._enter(resume)
