"""
Schedule operation result models.

Inconvenient outcomes (over budget, no free date) are reported through these
results instead of exceptions so callers can refuse the action and show why.
"""

from typing import Optional

from pydantic import BaseModel, Field

from milestone_planner.models.budget import BudgetAnalysis
from milestone_planner.models.milestone import Milestone


class ScheduleResult(BaseModel):
    """Outcome of a compute-then-persist schedule operation."""

    success: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    template: Optional[Milestone] = None
    milestone: Optional[Milestone] = None
    created: list[Milestone] = Field(default_factory=list)
    deleted_count: int = Field(0, ge=0)
    ceiling_reached: bool = False
    budget: Optional[BudgetAnalysis] = None

    @classmethod
    def failure(cls, *errors: str, budget: Optional[BudgetAnalysis] = None) -> "ScheduleResult":
        return cls(success=False, errors=list(errors), budget=budget)
