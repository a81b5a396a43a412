"""Tests for the business-day calculator and date parsing."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from leavedesk.exceptions import DateOrderError, InvalidDateError, LeaveValidationError
from leavedesk.services.business_days import count_business_days, parse_date

# 2025-01-06 is a Monday.
MONDAY = date(2025, 1, 6)
FRIDAY = MONDAY + timedelta(days=4)
SATURDAY = MONDAY + timedelta(days=5)
SUNDAY = MONDAY + timedelta(days=6)


def _brute_force(start: date, end: date) -> int:
    days = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            days += 1
        current += timedelta(days=1)
    return days


# ---------------------------------------------------------------------------
# count_business_days
# ---------------------------------------------------------------------------


def test_full_work_week() -> None:
    assert count_business_days(MONDAY, FRIDAY) == 5


def test_single_weekday() -> None:
    assert count_business_days(MONDAY, MONDAY) == 1


def test_weekend_only_is_zero() -> None:
    assert count_business_days(SATURDAY, SUNDAY) == 0


def test_friday_to_monday_spans_weekend() -> None:
    assert count_business_days(FRIDAY, MONDAY + timedelta(days=7)) == 2


def test_two_calendar_weeks() -> None:
    assert count_business_days(MONDAY, MONDAY + timedelta(days=13)) == 10


def test_midweek_to_midweek() -> None:
    # Wed to the following Tue
    assert count_business_days(date(2025, 1, 8), date(2025, 1, 14)) == 5


def test_year_boundary() -> None:
    # Mon 2024-12-30 to Fri 2025-01-03
    assert count_business_days(date(2024, 12, 30), date(2025, 1, 3)) == 5


def test_accepts_iso_strings() -> None:
    assert count_business_days("2025-01-06", "2025-01-10") == 5


def test_start_after_end_raises() -> None:
    with pytest.raises(DateOrderError) as exc_info:
        count_business_days(FRIDAY, MONDAY)
    assert exc_info.value.status_code == 400
    assert exc_info.value.context == {"start_date": "2025-01-10", "end_date": "2025-01-06"}


def test_malformed_date_raises() -> None:
    with pytest.raises(InvalidDateError):
        count_business_days("2025-01-06", "not-a-date")


def test_matches_day_by_day_count() -> None:
    """The arithmetic form agrees with walking every day, for every start weekday."""
    for start_offset in range(7):
        start = MONDAY + timedelta(days=start_offset)
        for length in range(40):
            end = start + timedelta(days=length)
            assert count_business_days(start, end) == _brute_force(start, end), (start, end)


# ---------------------------------------------------------------------------
# parse_date
# ---------------------------------------------------------------------------


def test_parse_date_passthrough() -> None:
    assert parse_date(MONDAY) is MONDAY


def test_parse_date_from_datetime() -> None:
    assert parse_date(datetime(2025, 1, 6, 14, 30)) == MONDAY


def test_parse_date_from_string() -> None:
    assert parse_date("2025-01-06") == MONDAY


@pytest.mark.parametrize("value", ["2025-13-01", "2025-02-30", "20250106", "06/01/2025", "", "2025-1-6"])
def test_parse_date_rejects_invalid_strings(value: str) -> None:
    with pytest.raises(InvalidDateError) as exc_info:
        parse_date(value)
    assert isinstance(exc_info.value, LeaveValidationError)
    assert exc_info.value.context == {"value": value}


def test_parse_date_rejects_non_string() -> None:
    with pytest.raises(InvalidDateError):
        parse_date(20250106)  # type: ignore[arg-type]
