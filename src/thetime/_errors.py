"""Exception hierarchy for thetime.

All library errors derive from :class:`TimeError` so callers can catch
one type.  Parse and range errors also derive from :class:`ValueError`
because they are, at heart, bad input values.

Hierarchy::

    TimeError
    ├── TimeParseError (ValueError)
    │   └── OffsetParseError
    ├── TimeRangeError (ValueError)
    ├── ClockError
    └── NtpError

Only :class:`NtpError` is recoverable inside the library:
:meth:`thetime.Ntp.now` catches it and falls back to the system clock.
Every other error propagates to the caller.
"""

from __future__ import annotations


class TimeError(Exception):
    """Base class for every error raised by thetime."""


class TimeParseError(TimeError, ValueError):
    """A date/time string could not be parsed with the given format.

    Raised only after the automatic ``" +0000"`` retry has also failed.

    Attributes:
        text: The input that failed to parse.
        fmt: The ``strptime`` format used for the first attempt.
    """

    def __init__(self, message: str, *, text: str = "", fmt: str = "") -> None:
        super().__init__(message)
        self.text = text
        self.fmt = fmt


class OffsetParseError(TimeParseError):
    """A UTC offset string was not of the form ``±HH:MM``."""


class TimeRangeError(TimeError, ValueError):
    """A value falls outside the representable range.

    Dates before 1601-01-01 cannot be represented, and UTC offsets must
    stay strictly within ±24 hours.
    """


class ClockError(TimeError):
    """The platform wall clock could not be read."""


class NtpError(TimeError):
    """A single NTP request/response exchange failed.

    Attributes:
        server: Host name or address that was queried.
    """

    def __init__(self, message: str, *, server: str = "") -> None:
        super().__init__(message)
        self.server = server
