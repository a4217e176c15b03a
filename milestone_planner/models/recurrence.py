"""
Recurrence configuration models.

A RecurrenceConfig lives on a template milestone and describes how its
occurrences repeat. Weekdays use 0=Sunday ... 6=Saturday.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from milestone_planner.models.enums import MonthlyPattern, RecurrenceType, WeekOfMonth

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
WEEK_NAMES = {
    WeekOfMonth.FIRST: "1st",
    WeekOfMonth.SECOND: "2nd",
    WeekOfMonth.THIRD: "3rd",
    WeekOfMonth.FOURTH: "4th",
    WeekOfMonth.SECOND_TO_LAST: "second-to-last",
    WeekOfMonth.LAST: "last",
}


class RecurrenceConfig(BaseModel):
    """Recurrence rule of a template milestone.

    The ``type`` tag decides which of the optional fields are required:

    - daily: nothing beyond ``interval``
    - weekly: ``weekly_day_of_week``
    - monthly/date: ``monthly_date``
    - monthly/dayOfWeek: ``monthly_week_of_month`` and ``monthly_day_of_week``
      (weeks 1-4 are the nth occurrence, 5 is second-to-last, 6 is last)
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        use_enum_values=False,
    )

    type: RecurrenceType
    interval: int = Field(1, ge=1, description="Repeat every N days/weeks/months")
    weekly_day_of_week: Optional[int] = Field(None, ge=0, le=6)
    monthly_pattern: Optional[MonthlyPattern] = None
    monthly_date: Optional[int] = Field(None, ge=1, le=31)
    monthly_week_of_month: Optional[WeekOfMonth] = None
    monthly_day_of_week: Optional[int] = Field(None, ge=0, le=6)

    @model_validator(mode="after")
    def _check_variant_fields(self) -> "RecurrenceConfig":
        if self.type == RecurrenceType.WEEKLY and self.weekly_day_of_week is None:
            raise ValueError("Weekly recurrence must specify day of week (0-6)")
        if self.type == RecurrenceType.MONTHLY:
            if self.monthly_pattern is None:
                raise ValueError("Monthly recurrence must specify pattern (date or dayOfWeek)")
            if self.monthly_pattern == MonthlyPattern.DATE and self.monthly_date is None:
                raise ValueError("Monthly date pattern must specify date (1-31)")
            if self.monthly_pattern == MonthlyPattern.DAY_OF_WEEK and (
                self.monthly_week_of_month is None or self.monthly_day_of_week is None
            ):
                raise ValueError(
                    "Monthly dayOfWeek pattern must specify week of month and day of week"
                )
        return self

    def to_json(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON stored with the template."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def describe(self) -> str:
        """
        Human-readable description of the pattern.

        Example:
            >>> RecurrenceConfig(type="weekly", interval=2, weekly_day_of_week=1).describe()
            'Every 2 weeks on Monday'
        """
        count = "" if self.interval == 1 else f"{self.interval} "
        plural = "s" if self.interval > 1 else ""

        if self.type == RecurrenceType.DAILY:
            return f"Every {count}day{plural}"

        if self.type == RecurrenceType.WEEKLY:
            return f"Every {count}week{plural} on {DAY_NAMES[self.weekly_day_of_week]}"

        if self.monthly_pattern == MonthlyPattern.DATE:
            return f"Every {count}month{plural} on the {_ordinal(self.monthly_date)}"

        week = WEEK_NAMES[WeekOfMonth(self.monthly_week_of_month)]
        day = DAY_NAMES[self.monthly_day_of_week]
        return f"Every {count}month{plural} on the {week} {day}"


class RecurrenceValidationResult(BaseModel):
    """Outcome of validating untrusted recurrence input."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)


def validate_recurrence_config(
    data: dict[str, Any],
    time_allocation: Optional[float] = None,
) -> RecurrenceValidationResult:
    """
    Validate raw recurrence input without raising.

    Args:
        data: Recurrence fields (snake_case or camelCase)
        time_allocation: Optional per-occurrence hours to check as well

    Returns:
        RecurrenceValidationResult with every problem found
    """
    errors: list[str] = []
    try:
        RecurrenceConfig.model_validate(data)
    except PydanticValidationError as exc:
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"])
            message = error["msg"].removeprefix("Value error, ")
            errors.append(f"{location}: {message}" if location else message)

    if time_allocation is not None and time_allocation <= 0:
        errors.append("Recurring milestone must have positive time allocation per occurrence")

    return RecurrenceValidationResult(is_valid=not errors, errors=errors)


def _ordinal(num: int) -> str:
    if num % 10 == 1 and num % 100 != 11:
        return f"{num}st"
    if num % 10 == 2 and num % 100 != 12:
        return f"{num}nd"
    if num % 10 == 3 and num % 100 != 13:
        return f"{num}rd"
    return f"{num}th"
