"""Parsing helpers for gh CLI output."""

import json
import re
from typing import Any, cast

from stackmerge.core.github.types import (
    MERGE_METHODS,
    CheckSummary,
    MergeMethod,
    MergeStateStatus,
    PRState,
    PullRequestStatus,
    RepoMergeMethods,
)

_KNOWN_MERGE_STATES = {"CLEAN", "BLOCKED", "BEHIND", "DIRTY", "UNKNOWN", "UNSTABLE"}

_FAILING_CONCLUSIONS = {"FAILURE", "ERROR", "CANCELLED", "TIMED_OUT", "ACTION_REQUIRED"}

_TRANSIENT_PATTERNS = (
    re.compile(r"HTTP 5\d\d"),
    re.compile(r"rate limit", re.IGNORECASE),
    re.compile(r"connection reset", re.IGNORECASE),
    re.compile(r"timed? ?out", re.IGNORECASE),
    re.compile(r"could not resolve host", re.IGNORECASE),
    re.compile(r"\bEOF\b"),
)

_BLOCKED_PATTERNS = (
    re.compile(r"not mergeable", re.IGNORECASE),
    re.compile(r"base branch policy prohibits", re.IGNORECASE),
    re.compile(r"required status check", re.IGNORECASE),
    re.compile(r"review required|approving review", re.IGNORECASE),
    re.compile(r"HTTP 405"),
)

_RETRY_AFTER = re.compile(r"retry[- ]after:?\s*(\d+)", re.IGNORECASE)


def _summarize_checks(rollup: list[dict[str, Any]] | None) -> CheckSummary:
    """Reduce a statusCheckRollup list to completed/total/failing counts.

    The rollup mixes CheckRun entries (status + conclusion) and StatusContext
    entries (state only).
    """
    if not rollup:
        return CheckSummary(completed=0, total=0)

    completed = 0
    failing = 0
    for check in rollup:
        if check.get("__typename") == "StatusContext":
            state = check.get("state", "")
            if state != "PENDING" and state != "EXPECTED":
                completed += 1
            if state in ("FAILURE", "ERROR"):
                failing += 1
            continue

        if check.get("status") == "COMPLETED":
            completed += 1
            if check.get("conclusion") in _FAILING_CONCLUSIONS:
                failing += 1

    return CheckSummary(completed=completed, total=len(rollup), failing=failing)


def parse_pull_request_status(stdout: str) -> PullRequestStatus:
    """Parse `gh pr view --json ...` output into a PullRequestStatus.

    Raises:
        json.JSONDecodeError: If stdout is not valid JSON
        KeyError: If a required field is missing
    """
    data = json.loads(stdout)
    merge_state = data.get("mergeStateStatus") or "UNKNOWN"
    if merge_state not in _KNOWN_MERGE_STATES:
        merge_state = "UNKNOWN"

    return PullRequestStatus(
        number=int(data["number"]),
        state=cast(PRState, data["state"]),
        base_ref_name=data["baseRefName"],
        head_ref_name=data["headRefName"],
        merge_state_status=cast(MergeStateStatus, merge_state),
        checks=_summarize_checks(data.get("statusCheckRollup")),
    )


def parse_repo_merge_methods(stdout: str) -> RepoMergeMethods:
    """Parse `gh repo view --json ...MergeAllowed` output.

    The default is the first allowed method in squash, merge, rebase order.
    """
    data = json.loads(stdout)
    flags: dict[MergeMethod, bool] = {
        "squash": bool(data.get("squashMergeAllowed")),
        "merge": bool(data.get("mergeCommitAllowed")),
        "rebase": bool(data.get("rebaseMergeAllowed")),
    }
    allowed = tuple(method for method in MERGE_METHODS if flags[method])
    if not allowed:
        msg = "Repository does not allow any merge method"
        raise RuntimeError(msg)
    return RepoMergeMethods(allowed=allowed, default=allowed[0])


def is_transient_failure(stderr: str) -> bool:
    return any(pattern.search(stderr) for pattern in _TRANSIENT_PATTERNS)


def is_merge_blocked_failure(stderr: str) -> bool:
    return any(pattern.search(stderr) for pattern in _BLOCKED_PATTERNS)


def parse_retry_after(stderr: str) -> float | None:
    match = _RETRY_AFTER.search(stderr)
    if match is None:
        return None
    return float(match.group(1))
