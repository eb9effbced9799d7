"""Tests for gh CLI output parsing and failure classification."""

import json

import pytest

from stackmerge.core.github.parsing import (
    is_merge_blocked_failure,
    is_transient_failure,
    parse_pull_request_status,
    parse_repo_merge_methods,
    parse_retry_after,
)


def _pr_json(**overrides: object) -> str:
    data: dict[str, object] = {
        "number": 101,
        "state": "OPEN",
        "baseRefName": "main",
        "headRefName": "feature-a",
        "mergeStateStatus": "BLOCKED",
        "statusCheckRollup": [],
    }
    data.update(overrides)
    return json.dumps(data)


def test_parse_pull_request_status_basic_fields() -> None:
    status = parse_pull_request_status(_pr_json())

    assert status.number == 101
    assert status.state == "OPEN"
    assert status.base_ref_name == "main"
    assert status.head_ref_name == "feature-a"
    assert status.merge_state_status == "BLOCKED"
    assert status.checks.total == 0


def test_parse_pull_request_status_counts_checks() -> None:
    rollup = [
        {"__typename": "CheckRun", "status": "COMPLETED", "conclusion": "SUCCESS"},
        {"__typename": "CheckRun", "status": "COMPLETED", "conclusion": "FAILURE"},
        {"__typename": "CheckRun", "status": "IN_PROGRESS", "conclusion": None},
        {"__typename": "StatusContext", "state": "SUCCESS"},
        {"__typename": "StatusContext", "state": "PENDING"},
    ]

    status = parse_pull_request_status(_pr_json(statusCheckRollup=rollup))

    assert status.checks.total == 5
    assert status.checks.completed == 3
    assert status.checks.failing == 1
    assert not status.checks.all_completed


def test_parse_pull_request_status_maps_unknown_merge_state() -> None:
    status = parse_pull_request_status(_pr_json(mergeStateStatus="HAS_HOOKS"))

    assert status.merge_state_status == "UNKNOWN"


def test_parse_pull_request_status_missing_merge_state_is_unknown() -> None:
    status = parse_pull_request_status(_pr_json(mergeStateStatus=None))

    assert status.merge_state_status == "UNKNOWN"


def test_parse_pull_request_status_merged_is_closed_or_merged() -> None:
    status = parse_pull_request_status(_pr_json(state="MERGED"))

    assert status.is_closed_or_merged


def test_parse_pull_request_status_missing_field_raises() -> None:
    with pytest.raises(KeyError):
        parse_pull_request_status(json.dumps({"number": 1}))


def test_parse_repo_merge_methods_default_is_first_allowed() -> None:
    stdout = json.dumps(
        {"squashMergeAllowed": False, "mergeCommitAllowed": True, "rebaseMergeAllowed": True}
    )

    methods = parse_repo_merge_methods(stdout)

    assert methods.allowed == ("merge", "rebase")
    assert methods.default == "merge"


def test_parse_repo_merge_methods_none_allowed_raises() -> None:
    stdout = json.dumps(
        {"squashMergeAllowed": False, "mergeCommitAllowed": False, "rebaseMergeAllowed": False}
    )

    with pytest.raises(RuntimeError, match="does not allow any merge method"):
        parse_repo_merge_methods(stdout)


@pytest.mark.parametrize(
    "stderr",
    [
        "HTTP 502: Bad Gateway (https://api.github.com/graphql)",
        "API rate limit exceeded for user",
        "read: connection reset by peer",
        "dial tcp: i/o timeout",
    ],
)
def test_is_transient_failure_matches(stderr: str) -> None:
    assert is_transient_failure(stderr)


def test_is_transient_failure_rejects_not_found() -> None:
    assert not is_transient_failure("GraphQL: Could not resolve to a PullRequest with the number of 9")


def test_is_merge_blocked_failure_matches_protection_message() -> None:
    stderr = "X Pull request #101 is not mergeable: the base branch policy prohibits the merge."

    assert is_merge_blocked_failure(stderr)


def test_parse_retry_after() -> None:
    assert parse_retry_after("HTTP 429: rate limited\nRetry-After: 42") == 42.0
    assert parse_retry_after("HTTP 502") is None
