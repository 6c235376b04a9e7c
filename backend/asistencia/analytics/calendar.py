"""
Working-day arithmetic.

Working days are Monday–Friday. There is no holiday calendar: every
weekday counts, every weekend day is excluded.
"""

from datetime import date, datetime, timedelta
from typing import Literal

from asistencia.analytics.errors import InvalidDateError

EXPECTED_HOURS_PER_DAY = 8

Period = Literal["today", "week", "month", "quarter"]


def to_date(value: date | str) -> date:
    """Coerce a ``date`` or ISO ``YYYY-MM-DD`` string; anything else is an error."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidDateError(f"Unparsable date: {value!r}") from exc
    raise InvalidDateError(f"Expected a date, got {type(value).__name__}")


def working_days(start_date: date | str, end_date: date | str) -> int:
    """
    Count Monday–Friday dates in ``[start_date, end_date]`` inclusive.

    A reversed range is an empty range and yields 0.
    """
    start = to_date(start_date)
    end = to_date(end_date)
    if start > end:
        return 0

    total_days = (end - start).days + 1
    full_weeks, remainder = divmod(total_days, 7)
    count = full_weeks * 5
    weekday = start.weekday()
    for offset in range(remainder):
        if (weekday + offset) % 7 < 5:
            count += 1
    return count


def expected_hours(days: int) -> int:
    return days * EXPECTED_HOURS_PER_DAY


def week_start(value: date | str) -> date:
    """Monday of the ISO week containing ``value``."""
    d = to_date(value)
    return d - timedelta(days=d.weekday())


def resolve_period(period: Period, today: date) -> tuple[date, date]:
    """Window for a named reporting period, always ending on ``today``."""
    if period == "today":
        return today, today
    if period == "week":
        return week_start(today), today
    if period == "month":
        return today.replace(day=1), today
    if period == "quarter":
        first_month = (today.month - 1) // 3 * 3 + 1
        return date(today.year, first_month, 1), today
    raise ValueError(f"Unknown period: {period!r}")
