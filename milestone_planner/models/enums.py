"""
Enum definitions for the application.

These enums are used across models and provide type-safe recurrence values.
"""

from enum import Enum


class RecurrenceType(str, Enum):
    """Recurrence frequency of a template milestone."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class MonthlyPattern(str, Enum):
    """How a monthly recurrence picks its day."""

    DATE = "date"  # Fixed day of month, clamped to month length
    DAY_OF_WEEK = "dayOfWeek"  # Nth (or last / second-to-last) weekday


class IntervalType(str, Enum):
    """Interval classification inferred from legacy occurrence spacing."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class WeekOfMonth(int, Enum):
    """Week selector for monthly day-of-week patterns."""

    FIRST = 1
    SECOND = 2
    THIRD = 3
    FOURTH = 4
    SECOND_TO_LAST = 5
    LAST = 6
