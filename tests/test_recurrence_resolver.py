"""
Tests for recurrence pattern resolution.
"""

from datetime import date

import pytest

from milestone_planner.models.enums import MonthlyPattern, RecurrenceType, WeekOfMonth
from milestone_planner.models.recurrence import RecurrenceConfig
from milestone_planner.services.recurrence_resolver import (
    align_to_weekday,
    next_occurrence,
    weekday_occurrence_in_month,
)
from milestone_planner.utils.calendar_utils import add_months, clamp_day, sunday_weekday


def _monthly_date(day: int, interval: int = 1) -> RecurrenceConfig:
    return RecurrenceConfig(
        type=RecurrenceType.MONTHLY,
        interval=interval,
        monthly_pattern=MonthlyPattern.DATE,
        monthly_date=day,
    )


def _monthly_weekday(week: int, weekday: int, interval: int = 1) -> RecurrenceConfig:
    return RecurrenceConfig(
        type=RecurrenceType.MONTHLY,
        interval=interval,
        monthly_pattern=MonthlyPattern.DAY_OF_WEEK,
        monthly_week_of_month=week,
        monthly_day_of_week=weekday,
    )


class TestCalendarHelpers:
    """Tests for the calendar helpers the resolver builds on."""

    def test_sunday_weekday_convention(self):
        assert sunday_weekday(date(2024, 3, 3)) == 0  # Sunday
        assert sunday_weekday(date(2024, 3, 4)) == 1  # Monday
        assert sunday_weekday(date(2024, 3, 9)) == 6  # Saturday

    def test_add_months_across_year(self):
        assert add_months(2024, 11, 3) == (2025, 2)
        assert add_months(2024, 1, -1) == (2023, 12)

    def test_clamp_day_leap_and_common_year(self):
        assert clamp_day(2024, 2, 31) == date(2024, 2, 29)
        assert clamp_day(2023, 2, 30) == date(2023, 2, 28)
        assert clamp_day(2024, 4, 31) == date(2024, 4, 30)

    def test_align_to_weekday_same_day(self):
        # 2024-03-04 is a Monday
        assert align_to_weekday(date(2024, 3, 4), 1) == date(2024, 3, 4)
        assert align_to_weekday(date(2024, 3, 5), 1) == date(2024, 3, 11)


class TestNextOccurrenceDaily:
    """Tests for daily recurrence."""

    def test_first_is_day_after_start(self):
        config = RecurrenceConfig(type=RecurrenceType.DAILY, interval=3)
        assert next_occurrence(config, date(2024, 1, 1), is_first=True) == date(2024, 1, 2)

    def test_subsequent_adds_interval(self):
        config = RecurrenceConfig(type=RecurrenceType.DAILY, interval=3)
        assert next_occurrence(config, date(2024, 1, 2), is_first=False) == date(2024, 1, 5)

    def test_year_boundary(self):
        config = RecurrenceConfig(type=RecurrenceType.DAILY)
        assert next_occurrence(config, date(2024, 12, 31), is_first=False) == date(2025, 1, 1)


class TestNextOccurrenceWeekly:
    """Tests for weekly recurrence."""

    def test_first_aligns_to_weekday(self):
        # 2024-03-01 is a Friday; the next Monday is 2024-03-04
        config = RecurrenceConfig(type=RecurrenceType.WEEKLY, weekly_day_of_week=1)
        assert next_occurrence(config, date(2024, 3, 1), is_first=True) == date(2024, 3, 4)

    def test_subsequent_adds_weeks(self):
        config = RecurrenceConfig(type=RecurrenceType.WEEKLY, interval=2, weekly_day_of_week=1)
        assert next_occurrence(config, date(2024, 3, 4), is_first=False) == date(2024, 3, 18)

    def test_first_on_matching_start_returns_start(self):
        config = RecurrenceConfig(type=RecurrenceType.WEEKLY, weekly_day_of_week=5)
        assert next_occurrence(config, date(2024, 3, 1), is_first=True) == date(2024, 3, 1)


class TestNextOccurrenceMonthlyDate:
    """Tests for monthly date recurrence."""

    def test_day_31_clamps_in_february(self):
        config = _monthly_date(31)
        first = next_occurrence(config, date(2024, 1, 1), is_first=True)
        second = next_occurrence(config, first, is_first=False)
        assert first == date(2024, 1, 31)
        assert second == date(2024, 2, 29)

    def test_clamped_month_does_not_drift(self):
        config = _monthly_date(31)
        assert next_occurrence(config, date(2024, 2, 29), is_first=False) == date(2024, 3, 31)

    def test_first_rolls_to_next_month_when_day_passed(self):
        config = _monthly_date(10)
        assert next_occurrence(config, date(2024, 3, 15), is_first=True) == date(2024, 4, 10)

    def test_interval_skips_months(self):
        config = _monthly_date(15, interval=3)
        assert next_occurrence(config, date(2024, 11, 15), is_first=False) == date(2025, 2, 15)


class TestNextOccurrenceMonthlyWeekday:
    """Tests for monthly day-of-week recurrence."""

    def test_last_friday_of_april(self):
        assert weekday_occurrence_in_month(2024, 4, 5, WeekOfMonth.LAST) == date(2024, 4, 26)

    def test_second_to_last_friday_of_april(self):
        assert weekday_occurrence_in_month(2024, 4, 5, WeekOfMonth.SECOND_TO_LAST) == date(2024, 4, 19)

    def test_nth_weekday(self):
        # April 2024 starts on a Monday
        assert weekday_occurrence_in_month(2024, 4, 1, WeekOfMonth.FIRST) == date(2024, 4, 1)
        assert weekday_occurrence_in_month(2024, 4, 2, WeekOfMonth.THIRD) == date(2024, 4, 16)
        assert weekday_occurrence_in_month(2024, 4, 1, WeekOfMonth.FOURTH) == date(2024, 4, 22)

    def test_first_occurrence_in_start_month(self):
        config = _monthly_weekday(WeekOfMonth.LAST, 5)
        assert next_occurrence(config, date(2024, 4, 1), is_first=True) == date(2024, 4, 26)

    def test_first_occurrence_rolls_over(self):
        config = _monthly_weekday(WeekOfMonth.FIRST, 1)
        # First Monday of April 2024 (the 1st) is before the start
        assert next_occurrence(config, date(2024, 4, 2), is_first=True) == date(2024, 5, 6)

    def test_subsequent_resolves_in_target_month(self):
        config = _monthly_weekday(WeekOfMonth.LAST, 5, interval=2)
        assert next_occurrence(config, date(2024, 4, 26), is_first=False) == date(2024, 6, 28)


class TestMonotonicity:
    """Successive occurrences always move forward."""

    @pytest.mark.parametrize(
        "config",
        [
            RecurrenceConfig(type=RecurrenceType.DAILY, interval=5),
            RecurrenceConfig(type=RecurrenceType.WEEKLY, weekly_day_of_week=3),
            _monthly_date(31),
            _monthly_weekday(WeekOfMonth.SECOND_TO_LAST, 0),
            _monthly_weekday(WeekOfMonth.FOURTH, 6),
        ],
    )
    def test_strictly_increasing(self, config):
        current = next_occurrence(config, date(2024, 1, 1), is_first=True)
        for _ in range(30):
            following = next_occurrence(config, current, is_first=False)
            assert following > current
            current = following
