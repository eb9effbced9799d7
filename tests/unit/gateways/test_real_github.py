"""Tests for RealGitHub failure classification, with subprocess.run patched."""

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from stackmerge.core.github.errors import MergeBlockedError, TransientGitHubError
from stackmerge.core.github.real import RealGitHub

REPO_ROOT = Path("/repo")


def _completed(returncode: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


def test_get_pull_request_parses_output() -> None:
    stdout = json.dumps(
        {
            "number": 101,
            "state": "OPEN",
            "baseRefName": "main",
            "headRefName": "feature-a",
            "mergeStateStatus": "CLEAN",
            "statusCheckRollup": [],
        }
    )
    with patch("stackmerge.core.subprocess.subprocess.run", return_value=_completed(0, stdout)) as run:
        status = RealGitHub().get_pull_request(REPO_ROOT, 101)

    assert status.merge_state_status == "CLEAN"
    cmd = run.call_args.args[0]
    assert cmd[:4] == ["gh", "pr", "view", "101"]


def test_get_pull_request_server_error_is_transient() -> None:
    result = _completed(1, stderr="HTTP 503: Service Unavailable\nRetry-After: 10")
    with patch("stackmerge.core.subprocess.subprocess.run", return_value=result):
        with pytest.raises(TransientGitHubError) as exc_info:
            RealGitHub().get_pull_request(REPO_ROOT, 101)

    assert exc_info.value.retry_after == 10.0


def test_get_pull_request_not_found_is_fatal() -> None:
    result = _completed(1, stderr="GraphQL: Could not resolve to a PullRequest with the number of 9.")
    with patch("stackmerge.core.subprocess.subprocess.run", return_value=result):
        with pytest.raises(RuntimeError) as exc_info:
            RealGitHub().get_pull_request(REPO_ROOT, 9)

    assert not isinstance(exc_info.value, TransientGitHubError)
    assert "fetch PR #9" in str(exc_info.value)


def test_merge_pull_request_uses_method_flag() -> None:
    with patch("stackmerge.core.subprocess.subprocess.run", return_value=_completed(0)) as run:
        RealGitHub().merge_pull_request(REPO_ROOT, 101, "rebase")

    assert run.call_args.args[0] == ["gh", "pr", "merge", "101", "--rebase"]


def test_merge_pull_request_protection_failure_is_blocked() -> None:
    result = _completed(
        1, stderr="X Pull request #101 is not mergeable: the base branch policy prohibits the merge."
    )
    with patch("stackmerge.core.subprocess.subprocess.run", return_value=result):
        with pytest.raises(MergeBlockedError) as exc_info:
            RealGitHub().merge_pull_request(REPO_ROOT, 101, "squash")

    assert exc_info.value.pr_number == 101


def test_missing_gh_binary_propagates_file_not_found() -> None:
    with patch("stackmerge.core.subprocess.subprocess.run", side_effect=FileNotFoundError("gh")):
        with pytest.raises(FileNotFoundError):
            RealGitHub().get_repo_merge_methods(REPO_ROOT)
