"""
Budget models.

Budget figures are derived from the current milestone set on every call and
never stored.
"""

from typing import Optional

from pydantic import BaseModel, Field


class BudgetAnalysis(BaseModel):
    """Allocation of a project's milestones against its hour budget."""

    estimated_hours: float = Field(..., ge=0)
    total_allocated: float = Field(..., ge=0)
    remaining_budget: float = Field(..., description="Negative when over budget")
    overage: float = Field(0, ge=0)
    is_over_budget: bool = False
    utilization_percent: float = Field(0, ge=0)
    suggested_budget: Optional[int] = Field(
        None, description="Offered new budget when over budget; never applied automatically"
    )


class AllocationCheck(BaseModel):
    """Validation of a single milestone allocation against the budget."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
