"""Stacked-branch tool operations subpackage."""

from stackmerge.core.stack.abc import Stack
from stackmerge.core.stack.fake import FakeStack
from stackmerge.core.stack.graph import BranchGraph
from stackmerge.core.stack.real import RealStack
from stackmerge.core.stack.types import (
    BaseUpdate,
    BranchMetadata,
    StackCommandError,
    SubmitResult,
    SyncOptions,
    SyncResult,
)

__all__ = [
    "BaseUpdate",
    "BranchGraph",
    "BranchMetadata",
    "FakeStack",
    "RealStack",
    "Stack",
    "StackCommandError",
    "SubmitResult",
    "SyncOptions",
    "SyncResult",
]
