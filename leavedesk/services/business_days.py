from __future__ import annotations

from datetime import date, datetime

from leavedesk.exceptions import DateOrderError, InvalidDateError

_WORKDAYS_PER_WEEK = 5
_SATURDAY = 5


def parse_date(value: date | str) -> date:
    """Return ``value`` as a ``date``, accepting ISO ``YYYY-MM-DD`` strings.

    Raises InvalidDateError for anything that is not a real calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(value)
    try:
        # fromisoformat also accepts YYYYMMDD and week dates; require the dashed form.
        if len(value) != 10 or value[4] != "-" or value[7] != "-":
            raise ValueError(value)
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidDateError(value) from None


def _weekdays_before(start: date, offset: int) -> int:
    """Count Mon-Fri days in the first ``offset`` days starting at ``start``."""
    count = 0
    weekday = start.weekday()
    for _ in range(offset):
        if weekday < _SATURDAY:
            count += 1
        weekday = (weekday + 1) % 7
    return count


def count_business_days(start: date | str, end: date | str) -> int:
    """Number of Monday-Friday days in the inclusive range ``[start, end]``.

    No holiday awareness. Raises InvalidDateError for malformed dates and
    DateOrderError when ``start`` is after ``end``.
    """
    start_date = parse_date(start)
    end_date = parse_date(end)
    if start_date > end_date:
        raise DateOrderError(start_date, end_date)

    total_days = (end_date - start_date).days + 1
    full_weeks, remainder = divmod(total_days, 7)
    return full_weeks * _WORKDAYS_PER_WEEK + _weekdays_before(start_date, remainder)
