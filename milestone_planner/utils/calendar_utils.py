"""
Calendar date utilities.

All scheduling math works on plain ``datetime.date`` values. Weekdays use the
source data convention of 0=Sunday ... 6=Saturday, which differs from
``date.weekday()`` (0=Monday).
"""

import calendar
from datetime import date, timedelta

DAY = timedelta(days=1)


def sunday_weekday(value: date) -> int:
    """
    Get the weekday of a date in the 0=Sunday convention.

    Example:
        >>> sunday_weekday(date(2024, 3, 4))  # Monday
        1
    """
    return (value.weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def first_weekday_of_month(year: int, month: int) -> int:
    """Weekday (0=Sunday) of the first day of the given month."""
    return (calendar.monthrange(year, month)[0] + 1) % 7


def add_months(year: int, month: int, months: int) -> tuple[int, int]:
    """
    Shift a (year, month) pair by a number of months.

    Returns:
        tuple[int, int]: The resulting (year, month)
    """
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def clamp_day(year: int, month: int, day: int) -> date:
    """
    Build a date, clamping the day to the last valid day of the month.

    Example:
        >>> clamp_day(2024, 2, 31)
        datetime.date(2024, 2, 29)
    """
    return date(year, month, min(day, days_in_month(year, month)))


def days_between(start: date, end: date) -> int:
    """Signed number of days from start to end."""
    return (end - start).days
