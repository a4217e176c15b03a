"""
Template reconciliation models.

Used when grouping loaded occurrences under their recurring template and when
deleting a template together with its occurrences.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from milestone_planner.models.enums import IntervalType
from milestone_planner.models.milestone import Milestone


class IntervalClassification(BaseModel):
    """Interval inferred from the spacing of two occurrences."""

    type: IntervalType
    interval: int = Field(..., ge=1)


class InferredTemplate(BaseModel):
    """Template reconstructed from existing occurrences."""

    template: Milestone
    occurrence_ids: list[UUID] = Field(default_factory=list)
    from_name_heuristic: bool = Field(
        False, description="Group membership was guessed from 'name N' naming"
    )


class DeletionPlan(BaseModel):
    """Milestones to delete when a recurring template is removed."""

    template_id: Optional[UUID] = None
    milestone_ids: list[UUID] = Field(default_factory=list)
    used_name_heuristic: bool = False


class LegacyMigrationPlan(BaseModel):
    """One-time migration of numbered legacy milestones to a template."""

    template: Milestone
    occurrence_ids: list[UUID] = Field(default_factory=list)
