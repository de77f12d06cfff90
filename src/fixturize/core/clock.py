# src/fixturize/core/clock.py
"""Clock abstraction for testable wall-clock reads.

The volatile fingerprint used for engines without checksum support is
derived from the wall clock. Production code uses SystemClock (the default).
Tests inject MockClock to pin or advance time.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Abstract wall clock.

    Implementations:
    - SystemClock: Uses time.time_ns() (production)
    - MockClock: Returns controllable times (testing)
    """

    def time_ns(self) -> int:
        """Return wall-clock time in nanoseconds since the epoch.

        Corresponds to time.time_ns(). Not guaranteed to be monotonic.
        """
        ...


class SystemClock:
    """Production clock using time.time_ns()."""

    def time_ns(self) -> int:
        """Return system wall-clock time."""
        return time.time_ns()


class MockClock:
    """Controllable clock for deterministic testing.

    Example:
        clock = MockClock(start_ns=1_000)
        provider = FingerprintProvider(clock=clock)

        clock.advance(500)
        assert clock.time_ns() == 1_500
    """

    def __init__(self, start_ns: int = 0) -> None:
        """Initialize mock clock at a given time.

        Args:
            start_ns: Initial time in nanoseconds (default 0).
        """
        self._current = start_ns

    def time_ns(self) -> int:
        """Return current mock time."""
        return self._current

    def advance(self, nanoseconds: int) -> None:
        """Advance mock time by the given number of nanoseconds.

        Raises:
            ValueError: If nanoseconds is negative.
        """
        if nanoseconds < 0:
            raise ValueError(f"Cannot advance time by negative amount: {nanoseconds}")
        self._current += nanoseconds

    def set(self, value_ns: int) -> None:
        """Set mock time to an absolute value, including earlier times."""
        self._current = value_ns


# Default clock for production use
DEFAULT_CLOCK: Clock = SystemClock()
