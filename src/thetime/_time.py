"""Time capability set shared by every time source.

Provides:

- :class:`Time` — the ``Protocol`` every time value satisfies
  (structural subtyping, PEP 544).  Cross-source operations such as
  :meth:`TimeOps.compare_relative` accept any ``Time``.
- :class:`TimeOps` — a stateless mixin implementing the whole
  capability set on top of three facts a concrete source stores:
  the second count since 1601, the sub-second milliseconds, and the
  UTC offset.
- :class:`RelativeTime` — result of :meth:`TimeOps.compare_relative`.
- :func:`format_duration` — ``"Xw Xd Xh Xm Xs"`` rendering.

**Representation.**  A value stores the UTC instant as whole seconds
since ``1601-01-01 00:00:00`` plus milliseconds.  The combined
millisecond count is called :attr:`~TimeOps.raw` and is the *only*
basis for equality, ordering, hashing and differences.  The UTC offset
is a display attribute: it selects the wall clock used by
:meth:`~TimeOps.format`, and two values at the same instant compare
equal whatever their offsets.

**Why 1601?**  It is the Windows/WebKit epoch and precedes every other
supported epoch, so all practically reachable dates are non-negative
counts and Windows ticks need no detour through Unix time.

Concrete sources (:class:`~thetime.System`, :class:`~thetime.Ntp`) are
frozen dataclasses that mix in :class:`TimeOps`.  They share behaviour
only, never fields.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta, timezone
from enum import StrEnum
from functools import total_ordering
from typing import Protocol, Self, runtime_checkable

from thetime._constants import (
    MAGIC_MAC_OS,
    MAGIC_MAC_OS_CFA,
    MAGIC_SAS_4GL,
    MILLIS_PER_SECOND,
    OFFSET_1601,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    SECONDS_PER_WEEK,
    WEBKIT_MICROS_PER_MILLI,
    WINDOWS_TICKS_PER_MILLI,
)
from thetime._errors import TimeParseError, TimeRangeError
from thetime._offsets import check_offset, format_offset, parse_offset

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Provenance tags
# ---------------------------------------------------------------------------

PROVENANCE_SYSTEM = "system"
PROVENANCE_PARSED = "parsed"
PROVENANCE_CONSTRUCTED = "constructed"
NTP_PROVENANCE_PREFIX = "ntp:"

# ---------------------------------------------------------------------------
# Fixed formats
# ---------------------------------------------------------------------------

PRETTY_FORMAT = "%Y-%m-%d %H:%M:%S"
ISO8601_PARSE_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"
RFC3339_PARSE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

_EPOCH_1601 = datetime(1601, 1, 1, tzinfo=UTC)
_ONE_MILLI = timedelta(milliseconds=1)
_UTC_SUFFIX = " +0000"
_UTC_SUFFIX_FORMAT = " %z"


class RelativeTime(StrEnum):
    """Position of one time value relative to another."""

    PAST = "past"
    PRESENT = "present"
    FUTURE = "future"


@runtime_checkable
class Time(Protocol):
    """Capability set satisfied by every time value.

    :class:`TimeOps` implements all of it; code that only consumes time
    values should annotate with ``Time``.
    """

    @property
    def raw(self) -> int:
        """Milliseconds since ``1601-01-01 00:00:00`` UTC."""
        ...

    @property
    def utc_offset(self) -> int:
        """Offset east of UTC, in seconds, used for display."""
        ...

    @property
    def provenance(self) -> str:
        """How the value was produced (``"system"``, ``"ntp:<host>"``, ...)."""
        ...

    @classmethod
    def now(cls) -> Self: ...

    def epoch(self) -> int: ...

    # conversions
    def to_unix_seconds(self) -> int: ...
    def to_unix_milliseconds(self) -> int: ...
    def to_windows_ticks(self) -> int: ...
    def to_webkit_microseconds(self) -> int: ...
    def to_mac_os_seconds(self) -> int: ...
    def to_mac_os_absolute_seconds(self) -> int: ...
    def to_sas4gl_seconds(self) -> int: ...
    def to_datetime(self) -> datetime: ...

    # rendering
    def format(self, pattern: str) -> str: ...
    def pretty(self) -> str: ...
    def iso8601(self) -> str: ...
    def rfc3339(self) -> str: ...
    def tz_offset(self) -> str: ...

    # derivation
    def change_timezone(self, offset: str) -> Self: ...
    def add_seconds(self, seconds: int) -> Self: ...
    def add_minutes(self, minutes: int) -> Self: ...
    def add_hours(self, hours: int) -> Self: ...
    def add_days(self, days: int) -> Self: ...
    def add_weeks(self, weeks: int) -> Self: ...
    def add_duration(self, duration: timedelta) -> Self: ...

    # comparison
    def compare_relative(self, other: Time) -> RelativeTime: ...
    def difference_seconds(self, other: Time) -> int: ...
    def difference_milliseconds(self, other: Time) -> int: ...


def _strptime(text: str, fmt: str) -> datetime:
    """Parse *text* into an aware datetime.

    A format without ``%z`` is treated as UTC.  If the first attempt
    fails, the parse is retried once with ``" +0000"`` appended to the
    text and ``" %z"`` to the format, which tolerates inputs whose
    format was written expecting an explicit offset field.
    """
    try:
        parsed = datetime.strptime(text, fmt)
    except ValueError as exc:
        if "%z" in fmt:
            msg = f"Cannot parse {text!r} with format {fmt!r}: {exc}"
            raise TimeParseError(msg, text=text, fmt=fmt) from exc
        logger.debug("Retrying parse of %r with an explicit UTC offset", text)
        try:
            parsed = datetime.strptime(text + _UTC_SUFFIX, fmt + _UTC_SUFFIX_FORMAT)
        except ValueError as retry_exc:
            msg = f"Cannot parse {text!r} with format {fmt!r}: {retry_exc}"
            raise TimeParseError(msg, text=text, fmt=fmt) from retry_exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@total_ordering
class TimeOps(ABC):
    """Stateless implementation of the time capability set.

    Subclasses must be dataclasses declaring ``seconds_since_1601``,
    ``subsec_milliseconds``, ``utc_offset`` and ``provenance`` fields,
    and must implement the abstract ``now()`` classmethod.  Values are
    immutable: every operation that "changes" a value returns a new one
    of the same type.
    """

    __slots__ = ()

    seconds_since_1601: int
    subsec_milliseconds: int
    utc_offset: int
    provenance: str

    def __post_init__(self) -> None:
        if self.seconds_since_1601 < 0:
            msg = (
                "Dates before 1601-01-01 are not representable "
                f"(seconds_since_1601={self.seconds_since_1601!r})"
            )
            raise TimeRangeError(msg)
        if not 0 <= self.subsec_milliseconds < MILLIS_PER_SECOND:
            msg = f"subsec_milliseconds must be in [0, 999], got {self.subsec_milliseconds!r}"
            raise TimeRangeError(msg)
        check_offset(self.utc_offset)

    # -- identity ------------------------------------------------------------

    @property
    def raw(self) -> int:
        """Milliseconds since ``1601-01-01 00:00:00`` UTC."""
        return self.seconds_since_1601 * MILLIS_PER_SECOND + self.subsec_milliseconds

    def epoch(self) -> int:
        """Alias of :attr:`raw`, the library's native millisecond count."""
        return self.raw

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeOps):
            return NotImplemented
        return self.raw == other.raw

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TimeOps):
            return NotImplemented
        return self.raw < other.raw

    def __hash__(self) -> int:
        return hash(self.raw)

    def __str__(self) -> str:
        return self.pretty()

    # -- constructors --------------------------------------------------------

    @classmethod
    @abstractmethod
    def now(cls) -> Self:
        """Return a fresh reading from the source."""

    @classmethod
    def from_epoch_offset(
        cls,
        raw: int,
        offset: int,
        *,
        provenance: str = PROVENANCE_CONSTRUCTED,
    ) -> Self:
        """Build a value from milliseconds since 1601 and an offset.

        Raises:
            TimeRangeError: If *raw* is negative (before 1601) or the
                offset is not within ±24h.
        """
        if raw < 0:
            msg = f"Dates before 1601-01-01 are not representable (raw={raw!r} ms)"
            raise TimeRangeError(msg)
        seconds, millis = divmod(raw, MILLIS_PER_SECOND)
        return cls(  # type: ignore[call-arg]
            seconds_since_1601=seconds,
            subsec_milliseconds=millis,
            utc_offset=offset,
            provenance=provenance,
        )

    @classmethod
    def from_epoch(cls, raw: int) -> Self:
        """Build a UTC value from milliseconds since 1601."""
        return cls.from_epoch_offset(raw, 0)

    @classmethod
    def from_datetime(cls, value: datetime, *, provenance: str = PROVENANCE_CONSTRUCTED) -> Self:
        """Build a value from a :class:`~datetime.datetime`.

        Naive datetimes are taken to be UTC.  The datetime's offset is
        kept as the value's display offset.  Microseconds are truncated
        to milliseconds.
        """
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        delta = value.utcoffset()
        offset = int(delta.total_seconds()) if delta is not None else 0
        return cls.from_epoch_offset(
            (value - _EPOCH_1601) // _ONE_MILLI,
            offset,
            provenance=provenance,
        )

    @classmethod
    def parse(cls, text: str, fmt: str) -> Self:
        """Parse *text* with the ``strptime`` pattern *fmt*.

        If *fmt* has no ``%z`` field the input is read as UTC, retrying
        once with a ``" +0000"`` suffix when the first attempt fails.

        Raises:
            TimeParseError: If both attempts fail.
            TimeRangeError: If the parsed date precedes 1601.
        """
        return cls.from_datetime(_strptime(text, fmt), provenance=PROVENANCE_PARSED)

    @classmethod
    def strp_iso8601(cls, text: str) -> Self:
        """Parse ``YYYY-MM-DDTHH:MM:SS.fff``."""
        return cls.parse(text, ISO8601_PARSE_FORMAT)

    @classmethod
    def strp_rfc3339(cls, text: str) -> Self:
        """Parse ``YYYY-MM-DDTHH:MM:SS.fffZ``."""
        return cls.parse(text, RFC3339_PARSE_FORMAT)

    @classmethod
    def from_unix_seconds(cls, seconds: int) -> Self:
        return cls.from_epoch((seconds + OFFSET_1601) * MILLIS_PER_SECOND)

    @classmethod
    def from_unix_milliseconds(cls, millis: int) -> Self:
        return cls.from_epoch(millis + OFFSET_1601 * MILLIS_PER_SECOND)

    @classmethod
    def from_windows_ticks(cls, ticks: int) -> Self:
        """Build a value from 100ns ticks since 1601 (Windows FILETIME / LDAP)."""
        return cls.from_epoch(ticks // WINDOWS_TICKS_PER_MILLI)

    @classmethod
    def from_webkit_microseconds(cls, micros: int) -> Self:
        """Build a value from microseconds since 1601 (WebKit / Chromium)."""
        return cls.from_epoch(micros // WEBKIT_MICROS_PER_MILLI)

    @classmethod
    def from_mac_os_seconds(cls, seconds: int) -> Self:
        """Build a value from seconds since 1904-01-01 (classic Mac OS)."""
        return cls.from_unix_seconds(seconds - MAGIC_MAC_OS)

    @classmethod
    def from_mac_os_absolute_seconds(cls, seconds: int) -> Self:
        """Build a value from seconds since 2001-01-01 (Core Foundation)."""
        return cls.from_unix_seconds(seconds + MAGIC_MAC_OS_CFA)

    @classmethod
    def from_sas4gl_seconds(cls, seconds: int) -> Self:
        """Build a value from seconds since 1960-01-01 (SAS 4GL)."""
        return cls.from_unix_seconds(seconds - MAGIC_SAS_4GL)

    # -- conversions ---------------------------------------------------------

    def to_unix_seconds(self) -> int:
        return self.seconds_since_1601 - OFFSET_1601

    def to_unix_milliseconds(self) -> int:
        return self.raw - OFFSET_1601 * MILLIS_PER_SECOND

    def to_windows_ticks(self) -> int:
        """100ns ticks since 1601.  Shares the native epoch, no Unix detour."""
        return self.raw * WINDOWS_TICKS_PER_MILLI

    def to_webkit_microseconds(self) -> int:
        return self.raw * WEBKIT_MICROS_PER_MILLI

    def to_mac_os_seconds(self) -> int:
        return self.to_unix_seconds() + MAGIC_MAC_OS

    def to_mac_os_absolute_seconds(self) -> int:
        return self.to_unix_seconds() - MAGIC_MAC_OS_CFA

    def to_sas4gl_seconds(self) -> int:
        return self.to_unix_seconds() + MAGIC_SAS_4GL

    def to_datetime(self) -> datetime:
        """Return an aware datetime in the value's own UTC offset."""
        return self._wall_clock(self.utc_offset)

    # -- formatting ----------------------------------------------------------

    def _wall_clock(self, offset: int) -> datetime:
        try:
            instant = _EPOCH_1601 + timedelta(milliseconds=self.raw)
            return instant.astimezone(timezone(timedelta(seconds=offset)))
        except OverflowError as exc:
            msg = f"Value {self.raw!r} ms since 1601 is beyond year 9999"
            raise TimeRangeError(msg) from exc

    def format(self, pattern: str) -> str:
        """Render the wall-clock time in the value's offset with ``strftime``.

        ``%z`` renders the value's offset and ``%f`` carries the
        milliseconds (as microseconds).
        """
        return self.to_datetime().strftime(pattern)

    def pretty(self) -> str:
        return self.format(PRETTY_FORMAT)

    def iso8601(self) -> str:
        """Wall clock as ``YYYY-MM-DD HH:MM:SS.mmm``."""
        return f"{self.format('%Y-%m-%d %H:%M:%S.')}{self.subsec_milliseconds:03d}"

    def rfc3339(self) -> str:
        """UTC as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
        utc = self._wall_clock(0)
        return f"{utc.strftime('%Y-%m-%dT%H:%M:%S.')}{self.subsec_milliseconds:03d}Z"

    def tz_offset(self) -> str:
        """The display offset as ``±HH:MM``."""
        return format_offset(self.utc_offset)

    # -- derivation ----------------------------------------------------------

    def change_timezone(self, offset: str) -> Self:
        """Return the same instant expressed in the ``±HH:MM`` *offset*.

        The offset is relative to UTC, not to the current offset.

        Raises:
            OffsetParseError: If *offset* is malformed.
        """
        seconds = parse_offset(offset)
        # raw already holds the UTC instant; only the display offset moves.
        return self.from_epoch_offset(self.raw, seconds, provenance=self.provenance)

    def _shift(self, millis: int) -> Self:
        return self.from_epoch_offset(
            self.raw + millis,
            self.utc_offset,
            provenance=self.provenance,
        )

    def add_seconds(self, seconds: int) -> Self:
        return self._shift(seconds * MILLIS_PER_SECOND)

    def add_minutes(self, minutes: int) -> Self:
        return self.add_seconds(minutes * SECONDS_PER_MINUTE)

    def add_hours(self, hours: int) -> Self:
        return self.add_seconds(hours * SECONDS_PER_HOUR)

    def add_days(self, days: int) -> Self:
        return self.add_seconds(days * SECONDS_PER_DAY)

    def add_weeks(self, weeks: int) -> Self:
        return self.add_seconds(weeks * SECONDS_PER_WEEK)

    def add_duration(self, duration: timedelta) -> Self:
        """Shift by a :class:`~datetime.timedelta`, truncated to milliseconds."""
        return self._shift(duration // _ONE_MILLI)

    # -- comparison ----------------------------------------------------------

    def compare_relative(self, other: Time) -> RelativeTime:
        """Whether this value lies in the past, present or future of *other*."""
        if self.raw < other.raw:
            return RelativeTime.PAST
        if self.raw > other.raw:
            return RelativeTime.FUTURE
        return RelativeTime.PRESENT

    def difference_milliseconds(self, other: Time) -> int:
        return abs(self.raw - other.raw)

    def difference_seconds(self, other: Time) -> int:
        """Absolute difference in whole seconds (milliseconds truncated)."""
        return self.difference_milliseconds(other) // MILLIS_PER_SECOND


def format_duration(seconds: int) -> str:
    """Render a duration as ``"Xw Xd Xh Xm Xs"``.

    Weeks are the largest unit shown, since longer units vary in length.

    Example::

        >>> format_duration(3600)
        '0w 0d 1h 0m 0s'

    Raises:
        ValueError: If *seconds* is negative.
    """
    if seconds < 0:
        msg = f"Duration must be non-negative, got {seconds!r}"
        raise ValueError(msg)
    weeks, rest = divmod(seconds, SECONDS_PER_WEEK)
    days, rest = divmod(rest, SECONDS_PER_DAY)
    hours, rest = divmod(rest, SECONDS_PER_HOUR)
    minutes, secs = divmod(rest, SECONDS_PER_MINUTE)
    return f"{weeks}w {days}d {hours}h {minutes}m {secs}s"
