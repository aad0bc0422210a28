"""thetime.

System and NTP time sources behind one capability set, with conversions
between the Unix, Windows/WebKit (1601), Mac OS (1904), Mac OS Absolute
(2001) and SAS 4GL (1960) epochs.
"""

from importlib.metadata import PackageNotFoundError, version

from thetime._clock import ClockPort, MonotonicClock
from thetime._constants import (
    MAGIC_MAC_OS,
    MAGIC_MAC_OS_CFA,
    MAGIC_SAS_4GL,
    OFFSET_1601,
    REF_TIME_1970,
)
from thetime._errors import (
    ClockError,
    NtpError,
    OffsetParseError,
    TimeError,
    TimeParseError,
    TimeRangeError,
)
from thetime._logging import JsonFormatter, TextFormatter, configure_logging
from thetime._ntp import Ntp, NtpRecord, NtpTransport, UdpTransport, now
from thetime._settings import LoggingSettings, NtpSettings, Settings
from thetime._system import System
from thetime._time import RelativeTime, Time, TimeOps, format_duration
from thetime._timezones import Tz

try:
    __version__ = version("thetime")
except PackageNotFoundError:
    # Source checkout without installed metadata
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Time sources
    "Ntp",
    "NtpRecord",
    "System",
    "Time",
    "TimeOps",
    "RelativeTime",
    "format_duration",
    "now",
    # Constants
    "MAGIC_MAC_OS",
    "MAGIC_MAC_OS_CFA",
    "MAGIC_SAS_4GL",
    "OFFSET_1601",
    "REF_TIME_1970",
    # Timezones
    "Tz",
    # Ports
    "ClockPort",
    "MonotonicClock",
    "NtpTransport",
    "UdpTransport",
    # Errors
    "ClockError",
    "NtpError",
    "OffsetParseError",
    "TimeError",
    "TimeParseError",
    "TimeRangeError",
    # Logging
    "JsonFormatter",
    "TextFormatter",
    "configure_logging",
    # Settings
    "LoggingSettings",
    "NtpSettings",
    "Settings",
]
