"""Unit tests for thetime._offsets — ``±HH:MM`` parsing and rendering.

Test Techniques Used:
    - Boundary Value Analysis: Hour and minute limits
    - Error Condition Testing: Malformed strings
"""

from __future__ import annotations

import pytest

from thetime import OffsetParseError, TimeRangeError
from thetime._offsets import check_offset, format_offset, parse_offset


class TestParseOffset:
    """Technique: Boundary Value Analysis."""

    @pytest.mark.parametrize(
        ("text", "seconds"),
        [
            ("+00:00", 0),
            ("-00:00", 0),
            ("+01:00", 3600),
            ("-03:30", -12600),
            ("+05:45", 20700),
            ("+23:59", 86340),
        ],
    )
    def test_valid(self, text: str, seconds: int) -> None:
        assert parse_offset(text) == seconds

    @pytest.mark.parametrize(
        "text",
        ["", "00:00", "+0000", "+1:00", "+01:0", "+24:00", "+12:60", "±01:00", "+ab:cd", "+01:00\n"],
    )
    def test_malformed(self, text: str) -> None:
        with pytest.raises(OffsetParseError):
            parse_offset(text)


class TestFormatOffset:
    """Technique: Specification-based Testing."""

    @pytest.mark.parametrize(
        ("seconds", "text"),
        [(0, "+00:00"), (19800, "+05:30"), (-12600, "-03:30"), (-39600, "-11:00")],
    )
    def test_rendering(self, seconds: int, text: str) -> None:
        assert format_offset(seconds) == text

    @pytest.mark.parametrize("seconds", [0, 3600, -12600, 86340, -86340])
    def test_round_trip(self, seconds: int) -> None:
        assert parse_offset(format_offset(seconds)) == seconds


class TestCheckOffset:
    """Technique: Boundary Value Analysis."""

    def test_just_under_a_day_is_valid(self) -> None:
        assert check_offset(86_399) == 86_399

    @pytest.mark.parametrize("seconds", [86_400, -86_400, 100_000])
    def test_a_day_or_more_rejected(self, seconds: int) -> None:
        with pytest.raises(TimeRangeError):
            check_offset(seconds)
