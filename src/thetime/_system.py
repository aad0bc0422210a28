"""System time source — the local wall clock.

:class:`System` reads the platform clock at the moment of the call and
captures the machine's current UTC offset alongside it.  There is no
I/O beyond the clock read itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Self

from thetime._errors import ClockError
from thetime._time import PROVENANCE_SYSTEM, TimeOps


def read_local_clock() -> datetime:
    """Return the current local time as an aware datetime.

    Raises:
        ClockError: If the platform clock or local-timezone lookup fails.
    """
    try:
        return datetime.now().astimezone()
    except (OSError, OverflowError, ValueError) as exc:
        msg = f"Cannot read the system clock: {exc}"
        raise ClockError(msg) from exc


@dataclass(frozen=True, slots=True, eq=False)
class System(TimeOps):
    """Time as read from the local system clock.

    The stored offset is the machine's offset at reading time, so
    :meth:`format` renders local wall-clock time.  Use
    :meth:`change_timezone` to render the same instant elsewhere.

    Usage::

        now = System.now()
        print(now, now.tz_offset())
        print(now.to_mac_os_seconds())
    """

    seconds_since_1601: int
    subsec_milliseconds: int
    utc_offset: int = 0
    provenance: str = PROVENANCE_SYSTEM

    @classmethod
    def now(cls) -> Self:
        """Read the wall clock.

        Raises:
            ClockError: If the platform clock cannot be read.
        """
        return cls.from_datetime(read_local_clock(), provenance=PROVENANCE_SYSTEM)
