"""Static table of common UTC offsets and their zone names.

Many zones share an offset, so names are combined (``"BST/CET"``).  A
name denotes a fixed offset only: there is no DST logic and no IANA
database.  Where abbreviations clash across regions the less common one
is lengthened (Atlantic Standard Time is ``ATST`` so that ``AST`` stays
Arabia Standard Time).
"""

from __future__ import annotations

from enum import IntEnum
from typing import TypeVar

from thetime._offsets import format_offset, parse_offset
from thetime._time import TimeOps

_T = TypeVar("_T", bound=TimeOps)

_ZONE_NAMES: dict[str, str] = {
    "UTC_WET": "UTC/WET",
    "BST_CET": "BST/CET",
    "CEST_EET": "CEST/EET",
    "EEST_AST": "EEST/AST",
    "IST": "IST",
    "ICT_WIB": "ICT/WIB",
    "CST_AWST_SST_HKT": "CST/AWST/SST/HKT",
    "JST_KST": "JST/KST",
    "ACST": "ACST",
    "AEST_CHST": "AEST/CHST",
    "LWST": "LWST",
    "NZST_FJT": "NZST/FJT",
    "SAST": "SAST",
    "HAST": "HAST",
    "ALST": "ALST",
    "PST": "PST",
    "MST": "MST",
    "CENST": "CENST",
    "EST": "EST",
    "ATST_CLT": "ATST/CLT",
    "NST": "NST",
    "BT_AT": "BT/AT",
}


class Tz(IntEnum):
    """A named fixed offset; the member value is seconds east of UTC."""

    UTC_WET = 0  # Coordinated Universal Time, Western European Time
    BST_CET = 3600  # British Summer Time, Central European Time
    CEST_EET = 7200  # Central European Summer Time, Eastern European Time
    EEST_AST = 10800  # Eastern European Summer Time, Arabia Standard Time
    IST = 19800  # Indian Standard Time
    ICT_WIB = 25200  # Indochina Time, Western Indonesian Time
    CST_AWST_SST_HKT = 28800  # China, Australian Western, Singapore, Hong Kong
    JST_KST = 32400  # Japan, Korea
    ACST = 34200  # Australian Central Standard Time
    AEST_CHST = 36000  # Australian Eastern, Chamorro
    LWST = 37800  # Lord Howe Standard Time
    NZST_FJT = 43200  # New Zealand, Fiji
    SAST = -39600  # Samoa Standard Time
    HAST = -36000  # Hawaii-Aleutian Standard Time
    ALST = -32400  # Alaska Standard Time
    PST = -28800  # Pacific Standard Time
    MST = -25200  # Mountain Standard Time
    CENST = -21600  # Central Standard Time (North America)
    EST = -18000  # Eastern Standard Time
    ATST_CLT = -14400  # Atlantic Standard Time, Chile Time
    NST = -12600  # Newfoundland Standard Time
    BT_AT = -10800  # Brazil, Argentina, Uruguay

    @classmethod
    def default(cls) -> Tz:
        return cls.UTC_WET

    @property
    def offset(self) -> int:
        """Offset east of UTC in seconds."""
        return int(self.value)

    @property
    def offset_str(self) -> str:
        """Offset as ``±HH:MM``."""
        return format_offset(self.value)

    @property
    def zone_name(self) -> str:
        """Display name, e.g. ``"CST/AWST/SST/HKT"``."""
        return _ZONE_NAMES[self.name]

    def __str__(self) -> str:
        return self.zone_name

    @classmethod
    def from_name(cls, name: str) -> Tz | None:
        """Look a zone up by its display name; ``None`` if unknown."""
        for zone in cls:
            if zone.zone_name == name:
                return zone
        return None

    @classmethod
    def from_offset(cls, offset: int) -> Tz | None:
        """Look a zone up by offset seconds; ``None`` if not in the table."""
        try:
            return cls(offset)
        except ValueError:
            return None

    @classmethod
    def from_offset_str(cls, offset: str) -> Tz | None:
        """Look a zone up by ``±HH:MM``; ``None`` if not in the table.

        Raises:
            OffsetParseError: If *offset* is malformed.
        """
        return cls.from_offset(parse_offset(offset))

    def apply(self, time: _T) -> _T:
        """Return *time* expressed in this zone's offset."""
        return time.change_timezone(self.offset_str)
