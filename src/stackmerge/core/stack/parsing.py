"""Parsing of stack tool metadata files and command output.

The stack tool persists its branch graph in `.graphite_cache_persist` and
pull request numbers in `.graphite_pr_info`, both JSON files inside the git
common directory.
"""

import json
import re
from pathlib import Path
from typing import Any

from stackmerge.core.stack.types import BaseUpdate, BranchMetadata

_DELETED_BRANCH = re.compile(r"[Dd]eleted branch:? (?P<branch>\S+)")
_SUBMITTED_BRANCH = re.compile(
    r"^(?P<branch>[^\s:]+): https?://\S+ \((?P<action>created|updated|no-op)\)"
)
_UPDATED_BASE = re.compile(r"PR #(?P<number>\d+) base (?:updated|changed) to (?P<base>\S+)")


def read_graphite_json_file(path: Path) -> dict[str, Any] | None:
    """Read a stack tool JSON file, returning None when it does not exist."""
    if not path.exists():
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def parse_graphite_cache(data: dict[str, Any]) -> dict[str, BranchMetadata]:
    """Parse the branch graph from `.graphite_cache_persist` contents.

    A branch is trunk when it is marked TRUNK or has no parent.
    """
    branches: dict[str, BranchMetadata] = {}
    for name, info in data.get("branches", []):
        parent = info.get("parentBranchName")
        is_trunk = info.get("validationResult") == "TRUNK" or parent is None
        branches[name] = BranchMetadata(
            name=name,
            parent=None if is_trunk else parent,
            children=list(info.get("children", [])),
            is_trunk=is_trunk,
        )
    return branches


def parse_graphite_pr_info(data: dict[str, Any]) -> dict[str, int]:
    """Map head branch name -> PR number from `.graphite_pr_info` contents."""
    pr_numbers: dict[str, int] = {}
    for info in data.get("prInfos", []):
        head = info.get("headRefName")
        number = info.get("prNumber")
        if head is None or number is None:
            continue
        pr_numbers[head] = int(number)
    return pr_numbers


def parse_deleted_branches(stdout: str) -> list[str]:
    return [match.group("branch") for match in _DELETED_BRANCH.finditer(stdout)]


def parse_submitted_branches(stdout: str) -> list[str]:
    pushed: list[str] = []
    for line in stdout.splitlines():
        match = _SUBMITTED_BRANCH.match(line.strip())
        if match is not None and match.group("action") != "no-op":
            pushed.append(match.group("branch"))
    return pushed


def parse_updated_bases(stdout: str) -> list[BaseUpdate]:
    return [
        BaseUpdate(pr_number=int(match.group("number")), new_base=match.group("base"))
        for match in _UPDATED_BASE.finditer(stdout)
    ]
