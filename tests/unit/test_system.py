"""Unit tests for thetime._system — the local wall-clock source.

Test Techniques Used:
    - Specification-based Testing: Reading, offset capture, provenance
    - Error Condition Testing: Platform clock failure surfaces as ClockError
"""

from __future__ import annotations

import time
from datetime import datetime

import pytest

from thetime import ClockError, System, Time
from thetime._system import read_local_clock


class TestSystemNow:
    """System.now() reads the platform clock.

    Technique: Specification-based Testing.
    """

    def test_returns_system_value(self) -> None:
        assert isinstance(System.now(), System)

    def test_satisfies_time_protocol(self) -> None:
        assert isinstance(System.now(), Time)

    def test_close_to_time_time(self) -> None:
        before = int(time.time())
        value = System.now()
        after = int(time.time())
        assert before <= value.to_unix_seconds() <= after

    def test_captures_local_offset(self) -> None:
        expected = datetime.now().astimezone().utcoffset()
        assert expected is not None
        assert System.now().utc_offset == int(expected.total_seconds())

    def test_provenance_is_system(self) -> None:
        assert System.now().provenance == "system"

    def test_successive_readings_do_not_go_back_far(self) -> None:
        first = System.now()
        second = System.now()
        assert second.difference_seconds(first) < 5

    def test_read_local_clock_is_aware(self) -> None:
        assert read_local_clock().tzinfo is not None


class _BrokenDatetime:
    """Stand-in for ``datetime`` whose clock read fails."""

    @staticmethod
    def now() -> datetime:
        raise OSError("clock unavailable")


class TestClockFailure:
    """Platform failures become ClockError.

    Technique: Error Condition Testing — ``datetime`` replaced in module.
    """

    def test_clock_error_raised(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("thetime._system.datetime", _BrokenDatetime)
        with pytest.raises(ClockError) as exc_info:
            System.now()
        assert isinstance(exc_info.value.__cause__, OSError)
