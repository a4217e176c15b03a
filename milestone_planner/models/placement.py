"""
Placement models for manually scheduled milestones.
"""

from datetime import date

from pydantic import BaseModel, Field


class PlacementWindow(BaseModel):
    """Inclusive range of dates a milestone may be placed on.

    ``min_date > max_date`` means no valid date exists.
    """

    min_date: date
    max_date: date

    @property
    def has_valid_date(self) -> bool:
        return self.min_date <= self.max_date

    def contains(self, value: date) -> bool:
        return self.min_date <= value <= self.max_date


class PlacementCheck(BaseModel):
    """Outcome of checking a candidate date for a milestone."""

    is_valid: bool
    window: PlacementWindow
    errors: list[str] = Field(default_factory=list)
