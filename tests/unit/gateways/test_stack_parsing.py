"""Tests for stack tool cache parsing and command output parsing."""

from stackmerge.core.stack.parsing import (
    parse_deleted_branches,
    parse_graphite_cache,
    parse_graphite_pr_info,
    parse_submitted_branches,
    parse_updated_bases,
)
from stackmerge.core.stack.types import BaseUpdate


def test_parse_graphite_cache_marks_trunk_and_parents() -> None:
    data = {
        "branches": [
            ["main", {"validationResult": "TRUNK", "children": ["feature-a"]}],
            ["feature-a", {"parentBranchName": "main", "children": ["feature-b"]}],
            ["feature-b", {"parentBranchName": "feature-a", "children": []}],
        ]
    }

    branches = parse_graphite_cache(data)

    assert branches["main"].is_trunk
    assert branches["main"].parent is None
    assert branches["feature-a"].parent == "main"
    assert branches["feature-a"].children == ["feature-b"]
    assert not branches["feature-b"].is_trunk


def test_parse_graphite_cache_branch_without_parent_is_trunk() -> None:
    branches = parse_graphite_cache({"branches": [["master", {"children": []}]]})

    assert branches["master"].is_trunk


def test_parse_graphite_pr_info_skips_incomplete_entries() -> None:
    data = {
        "prInfos": [
            {"headRefName": "feature-a", "prNumber": 101},
            {"headRefName": "feature-b"},
            {"prNumber": 7},
        ]
    }

    assert parse_graphite_pr_info(data) == {"feature-a": 101}


def test_parse_deleted_branches() -> None:
    stdout = "Pulling main...\nDeleted branch feature-a\ndeleted branch: feature-x\n"

    assert parse_deleted_branches(stdout) == ["feature-a", "feature-x"]


def test_parse_submitted_branches_ignores_no_ops() -> None:
    stdout = (
        "feature-b: https://github.com/o/r/pull/102 (updated)\n"
        "feature-c: https://github.com/o/r/pull/103 (no-op)\n"
    )

    assert parse_submitted_branches(stdout) == ["feature-b"]


def test_parse_updated_bases() -> None:
    stdout = "PR #102 base updated to main\n"

    assert parse_updated_bases(stdout) == [BaseUpdate(pr_number=102, new_base="main")]
