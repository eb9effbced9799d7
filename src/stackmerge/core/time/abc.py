"""Time operations abstraction for testing.

This module provides an ABC for time operations (sleep and a monotonic clock)
so that polling loops and backoff delays can be exercised in tests without
actually waiting.
"""

from abc import ABC, abstractmethod


class Time(ABC):
    """Abstract time operations for dependency injection."""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Sleep for specified number of seconds.

        Args:
            seconds: Number of seconds to sleep
        """
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return a monotonic clock reading in seconds.

        Only differences between two readings are meaningful.
        """
        ...
