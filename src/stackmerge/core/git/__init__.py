"""Git operations subpackage.

This subpackage provides abstractions over git operations with support for
testing via fakes.
"""

from stackmerge.core.git.abc import Git
from stackmerge.core.git.fake import FakeGit
from stackmerge.core.git.real import RealGit

__all__ = [
    "FakeGit",
    "Git",
    "RealGit",
]
