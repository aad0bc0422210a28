"""Epoch offsets and fixed protocol constants.

Every conversion in the library is defined in terms of these numbers, so
they are part of the public contract.  The canonical internal epoch is
``1601-01-01 00:00:00`` UTC (the Windows FILETIME / WebKit epoch); the
other epochs are expressed relative to the Unix epoch.

Epoch layout on the time axis::

    1601 ──── 1900 ── 1904 ──── 1960 ── 1970 ──────── 2001
     │          │       │         │       │             │
     Windows    NTP     Mac OS    SAS     Unix          Mac OS Absolute
     WebKit
"""

from __future__ import annotations

# -------------------------------------------------------------------
# Epoch offsets (seconds)
# -------------------------------------------------------------------

OFFSET_1601 = 11_644_473_600
"""Seconds between 1601-01-01 and 1970-01-01."""

REF_TIME_1970 = 2_208_988_800
"""Seconds between 1900-01-01 (NTP era 0) and 1970-01-01."""

MAGIC_MAC_OS = 2_082_844_800
"""Seconds between 1904-01-01 and 1970-01-01 (Mac OS epoch precedes Unix)."""

MAGIC_MAC_OS_CFA = 978_307_200
"""Seconds between 1970-01-01 and 2001-01-01 (Mac OS Absolute follows Unix)."""

MAGIC_SAS_4GL = 315_619_200
"""Seconds between 1960-01-01 and 1970-01-01 (SAS 4GL epoch precedes Unix)."""

# -------------------------------------------------------------------
# Durations
# -------------------------------------------------------------------

MILLIS_PER_SECOND = 1_000
SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3_600
SECONDS_PER_DAY = 86_400
SECONDS_PER_WEEK = 604_800

WINDOWS_TICKS_PER_MILLI = 10_000
"""100-nanosecond intervals per millisecond."""

WEBKIT_MICROS_PER_MILLI = 1_000

# -------------------------------------------------------------------
# NTP wire constants
# -------------------------------------------------------------------

DEFAULT_NTP_SERVER = "pool.ntp.org"
NTP_PORT = 123
NTP_TIMEOUT = 5.0
NTP_PACKET_SIZE = 48
NTP_CLIENT_MODE = 0x1B  # LI=0, VN=3, Mode=3 (client)
NTP_TRANSMIT_OFFSET = 40
NTP_RECV_BUFFER = 1024
