"""Fake Time implementation for testing.

FakeTime is an in-memory implementation that tracks sleep() calls without
actually sleeping. Each sleep advances a virtual clock, so code that measures
elapsed time with monotonic() observes the simulated delay.
"""

from stackmerge.core.time.abc import Time


class FakeTime(Time):
    """In-memory fake implementation that tracks calls without sleeping.

    This class has NO public setup methods. All state is provided via constructor
    or captured during execution.
    """

    def __init__(self, *, start: float = 0.0) -> None:
        """Create FakeTime with empty call tracking.

        Args:
            start: Initial reading of the virtual monotonic clock
        """
        self._now = start
        self._sleep_calls: list[float] = []

    @property
    def sleep_calls(self) -> list[float]:
        """Get the list of sleep() calls that were made.

        Returns list of seconds values passed to sleep().

        This property is for test assertions only.
        """
        return self._sleep_calls

    @property
    def now(self) -> float:
        """Current reading of the virtual clock (for test assertions)."""
        return self._now

    def sleep(self, seconds: float) -> None:
        """Track sleep call and advance the virtual clock.

        Args:
            seconds: Number of seconds that would have been slept
        """
        self._sleep_calls.append(seconds)
        self._now += seconds

    def monotonic(self) -> float:
        return self._now
