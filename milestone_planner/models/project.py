"""
Project window model definitions.

A project window is the read-only snapshot of a project that the engine
schedules against: its dates, whether it is open-ended, and its hour budget.
"""

from datetime import date, timedelta
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from milestone_planner.core.config import get_settings


class ProjectWindowBase(BaseModel):
    """Base project window fields."""

    name: str = Field("Project", min_length=1, max_length=200, description="Project name")
    start_date: date = Field(..., description="First day of the project")
    end_date: Optional[date] = Field(
        None, description="Last day of the project (synthetic for continuous projects)"
    )
    continuous: bool = Field(False, description="Open-ended project without a fixed end")
    estimated_hours: float = Field(0, ge=0, description="Total hour budget")

    @model_validator(mode="after")
    def _check_dates(self):
        if self.continuous:
            return self
        if self.end_date is None:
            raise ValueError("end_date is required for non-continuous projects")
        if self.start_date >= self.end_date:
            raise ValueError("start_date must be before end_date")
        return self


class ProjectWindowCreate(ProjectWindowBase):
    """Schema for registering a project window."""

    pass


class ProjectWindow(ProjectWindowBase):
    """Project window snapshot used by the scheduling engine."""

    id: Optional[UUID] = None

    class Config:
        from_attributes = True

    def effective_end_date(self, horizon_days: Optional[int] = None) -> date:
        """
        Get the end boundary used for scheduling.

        Continuous projects have no real end, so the boundary is a rolling
        lookahead from the start date.

        Args:
            horizon_days: Lookahead for continuous projects (None = settings)

        Returns:
            date: The exclusive end boundary
        """
        if not self.continuous:
            return self.end_date
        if horizon_days is None:
            horizon_days = get_settings().CONTINUOUS_HORIZON_DAYS
        return self.start_date + timedelta(days=horizon_days)

    def duration_days(self, horizon_days: Optional[int] = None) -> int:
        """Length of the scheduling window in days."""
        return (self.effective_end_date(horizon_days) - self.start_date).days
