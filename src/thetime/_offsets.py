"""Parsing and rendering of ``±HH:MM`` UTC offset strings."""

from __future__ import annotations

import re

from thetime._constants import SECONDS_PER_DAY, SECONDS_PER_HOUR, SECONDS_PER_MINUTE
from thetime._errors import OffsetParseError, TimeRangeError

_OFFSET_RE = re.compile(r"([+-])([0-9]{2}):([0-9]{2})")


def parse_offset(offset: str) -> int:
    """Convert ``"+HH:MM"`` / ``"-HH:MM"`` into signed seconds east of UTC.

    The sign applies to the whole offset, so ``"-03:30"`` is ``-12600``.

    Raises:
        OffsetParseError: If *offset* is not exactly one sign character,
            two hour digits, a colon and two minute digits, or if the
            hours exceed 23 or the minutes exceed 59.
    """
    match = _OFFSET_RE.fullmatch(offset)
    if match is None:
        msg = f"UTC offset must look like '+HH:MM' or '-HH:MM', got {offset!r}"
        raise OffsetParseError(msg, text=offset)

    sign, hours, minutes = match.group(1), int(match.group(2)), int(match.group(3))
    if hours > 23 or minutes > 59:
        msg = f"UTC offset out of range: {offset!r}"
        raise OffsetParseError(msg, text=offset)

    seconds = hours * SECONDS_PER_HOUR + minutes * SECONDS_PER_MINUTE
    return -seconds if sign == "-" else seconds


def format_offset(seconds: int) -> str:
    """Render signed offset seconds as ``±HH:MM``.

    Sub-minute remainders are truncated.  Zero renders as ``+00:00``.
    """
    sign = "-" if seconds < 0 else "+"
    seconds = abs(seconds)
    hours, rest = divmod(seconds, SECONDS_PER_HOUR)
    return f"{sign}{hours:02d}:{rest // SECONDS_PER_MINUTE:02d}"


def check_offset(seconds: int) -> int:
    """Return *seconds* unchanged if it is a valid UTC offset.

    Raises:
        TimeRangeError: If the magnitude is 24 hours or more.
    """
    if abs(seconds) >= SECONDS_PER_DAY:
        msg = f"UTC offset must be within ±24h, got {seconds!r} seconds"
        raise TimeRangeError(msg)
    return seconds
