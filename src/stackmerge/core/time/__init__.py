"""Time operations abstraction for testing."""

from stackmerge.core.time.abc import Time
from stackmerge.core.time.fake import FakeTime
from stackmerge.core.time.real import RealTime

__all__ = [
    "FakeTime",
    "RealTime",
    "Time",
]
