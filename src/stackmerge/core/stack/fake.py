"""Fake stack tool operations for testing.

FakeStack is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

import dataclasses
from pathlib import Path
from typing import TypeVar

from stackmerge.core.git.abc import Git
from stackmerge.core.stack.abc import Stack
from stackmerge.core.stack.types import BranchMetadata, SubmitResult, SyncOptions, SyncResult

SyncScript = SyncResult | Exception | list[SyncResult | Exception]
SubmitScript = SubmitResult | Exception | list[SubmitResult | Exception]

T = TypeVar("T")


class FakeStack(Stack):
    """In-memory fake implementation of stack tool operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults (empty dicts).

    sync() applies its scripted SyncResult to the in-memory graph: each deleted
    branch disappears and its children are reparented onto its parent, the way
    a real restack moves survivors onto trunk.
    """

    def __init__(
        self,
        *,
        branches: dict[str, BranchMetadata] | None = None,
        sync_results: SyncScript | None = None,
        submit_results: SubmitScript | None = None,
    ) -> None:
        """Create FakeStack with pre-configured state.

        Args:
            branches: Mapping of branch name -> BranchMetadata
            sync_results: SyncResult (or exception) returned by sync(), or a scripted
                sequence whose last entry repeats. Default: nothing deleted.
            submit_results: SubmitResult (or exception) returned by submit(), or a
                scripted sequence. Default: nothing pushed.
        """
        self._branches = dict(branches or {})
        self._sync_results = self._as_script(sync_results, SyncResult())
        self._submit_results = self._as_script(submit_results, SubmitResult())
        self._sync_calls: list[tuple[Path, SyncOptions]] = []
        self._submit_calls: list[Path] = []
        self._frozen_calls: list[tuple[str, bool]] = []

    @staticmethod
    def _as_script(script: T | list[T] | None, default: T) -> list[T]:
        if script is None:
            return [default]
        if isinstance(script, list):
            return list(script)
        return [script]

    @staticmethod
    def _next(script: list[T]) -> T:
        return script.pop(0) if len(script) > 1 else script[0]

    @property
    def branches(self) -> dict[str, BranchMetadata]:
        """Current in-memory branch graph for test assertions."""
        return self._branches

    @property
    def sync_calls(self) -> list[tuple[Path, SyncOptions]]:
        """Get the list of sync() calls that were made.

        Returns list of (repo_root, options) tuples.
        """
        return self._sync_calls

    @property
    def submit_calls(self) -> list[Path]:
        """Get the list of repo roots passed to submit()."""
        return self._submit_calls

    @property
    def frozen_calls(self) -> list[tuple[str, bool]]:
        """(branch, frozen) for each set_frozen() call."""
        return self._frozen_calls

    def get_all_branches(self, git: Git, repo_root: Path) -> dict[str, BranchMetadata]:
        return self._branches.copy()

    def set_frozen(self, git: Git, repo_root: Path, branch: str, *, frozen: bool) -> None:
        self._frozen_calls.append((branch, frozen))
        self._branches[branch] = dataclasses.replace(self._branches[branch], frozen=frozen)

    def sync(self, repo_root: Path, options: SyncOptions) -> SyncResult:
        self._sync_calls.append((repo_root, options))
        entry = self._next(self._sync_results)
        if isinstance(entry, Exception):
            raise entry

        for deleted in entry.deleted_branches:
            self._delete_branch(deleted)
        return entry

    def submit(self, repo_root: Path) -> SubmitResult:
        self._submit_calls.append(repo_root)
        entry = self._next(self._submit_results)
        if isinstance(entry, Exception):
            raise entry
        return entry

    def _delete_branch(self, name: str) -> None:
        removed = self._branches.pop(name, None)
        if removed is None:
            return

        for child in removed.children:
            if child in self._branches:
                self._branches[child] = dataclasses.replace(
                    self._branches[child], parent=removed.parent
                )

        if removed.parent is not None and removed.parent in self._branches:
            parent = self._branches[removed.parent]
            siblings = [b for b in parent.children if b != name]
            self._branches[removed.parent] = dataclasses.replace(
                parent, children=siblings + removed.children
            )
