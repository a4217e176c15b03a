"""
Milestone model definitions.

A milestone is either a standalone deadline, a recurring template (holding a
RecurrenceConfig) or one generated occurrence of a template.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from milestone_planner.models.recurrence import RecurrenceConfig


class MilestoneBase(BaseModel):
    """Base milestone fields."""

    name: str = Field(..., min_length=1, max_length=200, description="Milestone name")
    due_date: date = Field(..., description="Target due date")
    time_allocation: float = Field(0, ge=0, description="Allocated hours")
    order: int = Field(default=0, ge=0, description="Tie-break for same-day ordering")
    is_recurring: bool = Field(False, description="True only for template records")
    recurring_config: Optional[RecurrenceConfig] = Field(
        None, description="Recurrence rule, present only on templates"
    )
    template_id: Optional[UUID] = Field(
        None, description="Template that generated this occurrence"
    )

    @model_validator(mode="after")
    def _check_template_shape(self):
        if self.is_recurring and self.recurring_config is None:
            raise ValueError("Recurring template must have a recurrence configuration")
        if not self.is_recurring and self.recurring_config is not None:
            raise ValueError("Only template milestones carry a recurrence configuration")
        return self


class MilestoneCreate(MilestoneBase):
    """Schema for creating a milestone."""

    project_id: UUID = Field(..., description="Project ID")


class MilestoneUpdate(BaseModel):
    """Schema for updating a milestone."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    due_date: Optional[date] = None
    time_allocation: Optional[float] = Field(None, ge=0)
    order: Optional[int] = Field(None, ge=0)
    recurring_config: Optional[RecurrenceConfig] = None
    template_id: Optional[UUID] = None


class Milestone(MilestoneBase):
    """Complete milestone model.

    ``id`` is assigned by the persistence layer and is None for instances
    that have not been saved yet.
    """

    id: Optional[UUID] = None
    project_id: Optional[UUID] = None

    class Config:
        from_attributes = True

    def sort_key(self) -> tuple[date, int]:
        return (self.due_date, self.order)

    def to_create(self, project_id: Optional[UUID] = None) -> MilestoneCreate:
        """Build the create payload for the persistence collaborator."""
        return MilestoneCreate(
            project_id=project_id or self.project_id,
            **{field: getattr(self, field) for field in MilestoneBase.model_fields},
        )
