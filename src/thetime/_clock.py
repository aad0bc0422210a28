"""Monotonic clock port used to time NTP round trips.

Provides ClockPort (Protocol) and MonotonicClock.

**Why monotonic?** The NTP exchange estimates sub-second precision from
the local round-trip latency.  Measuring that latency with the wall
clock could yield negative or inflated values whenever the system clock
is stepped mid-request; ``time.monotonic()`` cannot go backwards.  Only
*differences* between two ``now()`` calls are meaningful (PEP 418).
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class ClockPort(Protocol):
    """Monotonic clock for latency measurements.

    Tests inject :class:`thetime.testing.FakeClock` to make the
    estimated sub-second part of an NTP reading deterministic.
    """

    def now(self) -> float:
        """Return monotonic time in seconds from an arbitrary epoch."""
        ...


class MonotonicClock:
    """Production clock wrapping ``time.monotonic()``.

    Satisfies :class:`ClockPort` via structural subtyping.
    """

    def now(self) -> float:
        return time.monotonic()
