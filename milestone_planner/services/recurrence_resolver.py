"""
Recurrence pattern resolution.

Computes the first or next occurrence date of a RecurrenceConfig. All inputs
are calendar dates already normalized by the caller; no timezone handling
happens here.
"""

from __future__ import annotations

from datetime import date, timedelta

from milestone_planner.core.exceptions import InvalidRecurrenceError
from milestone_planner.models.enums import MonthlyPattern, RecurrenceType, WeekOfMonth
from milestone_planner.models.recurrence import RecurrenceConfig
from milestone_planner.utils.calendar_utils import (
    add_months,
    clamp_day,
    days_in_month,
    first_weekday_of_month,
    sunday_weekday,
)


def next_occurrence(config: RecurrenceConfig, from_date: date, is_first: bool) -> date:
    """
    Get the next date matching a recurrence pattern.

    Args:
        config: Recurrence configuration
        from_date: Project start date when ``is_first``, else the previous occurrence
        is_first: Whether the first occurrence of the sequence is requested

    Returns:
        date: The matching occurrence date

    Raises:
        InvalidRecurrenceError: If the configuration type is not recognized
    """
    if config.type == RecurrenceType.DAILY:
        if is_first:
            return from_date + timedelta(days=1)
        return from_date + timedelta(days=config.interval)

    if config.type == RecurrenceType.WEEKLY:
        if is_first:
            return align_to_weekday(from_date, config.weekly_day_of_week)
        return from_date + timedelta(days=7 * config.interval)

    if config.type == RecurrenceType.MONTHLY:
        return _next_monthly(config, from_date, is_first)

    raise InvalidRecurrenceError(
        f"Unsupported recurrence type: {config.type}", details={"config": config}
    )


def align_to_weekday(current: date, target_weekday: int) -> date:
    """Earliest date on or after ``current`` falling on the target weekday (0=Sunday)."""
    delta = (target_weekday - sunday_weekday(current)) % 7
    return current + timedelta(days=delta)


def weekday_occurrence_in_month(year: int, month: int, weekday: int, week: int) -> date:
    """
    Find a weekday occurrence inside a month.

    Args:
        year: Target year
        month: Target month
        weekday: Weekday to find (0=Sunday ... 6=Saturday)
        week: 1-4 for the nth occurrence, 5 for second-to-last, 6 for last

    Returns:
        date: The matching day of the month

    Example:
        >>> weekday_occurrence_in_month(2024, 4, 5, 6)  # last Friday of April 2024
        datetime.date(2024, 4, 26)
    """
    month_days = days_in_month(year, month)
    first_match = 1 + ((weekday - first_weekday_of_month(year, month) + 7) % 7)
    last_match = first_match + 7 * ((month_days - first_match) // 7)

    if week == WeekOfMonth.LAST:
        day = last_match
    elif week == WeekOfMonth.SECOND_TO_LAST:
        day = last_match - 7
        if day < 1:
            day = last_match
    else:
        day = first_match + 7 * (week - 1)
        # No such week in this month: use the nearest earlier occurrence
        while day > month_days:
            day -= 7

    return date(year, month, day)


def _resolve_in_month(config: RecurrenceConfig, year: int, month: int) -> date:
    if config.monthly_pattern == MonthlyPattern.DATE:
        return clamp_day(year, month, config.monthly_date)
    if config.monthly_pattern == MonthlyPattern.DAY_OF_WEEK:
        return weekday_occurrence_in_month(
            year, month, config.monthly_day_of_week, int(config.monthly_week_of_month)
        )
    raise InvalidRecurrenceError(
        f"Unsupported monthly pattern: {config.monthly_pattern}", details={"config": config}
    )


def _next_monthly(config: RecurrenceConfig, from_date: date, is_first: bool) -> date:
    if is_first:
        candidate = _resolve_in_month(config, from_date.year, from_date.month)
        if candidate >= from_date:
            return candidate
        year, month = add_months(from_date.year, from_date.month, 1)
        return _resolve_in_month(config, year, month)

    # Re-resolve against the configured day so a clamped month does not drift
    year, month = add_months(from_date.year, from_date.month, config.interval)
    return _resolve_in_month(config, year, month)
