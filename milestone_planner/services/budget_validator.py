"""
Budget allocation validator.

Aggregates milestone time allocations against a project's estimated hours.

Template records are never counted: a template's ``time_allocation`` is the
per-occurrence value, already present on each generated occurrence.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional
from uuid import UUID

from milestone_planner.core.config import get_settings
from milestone_planner.models.budget import AllocationCheck, BudgetAnalysis
from milestone_planner.models.milestone import Milestone


class BudgetAllocationValidator:
    """Validator for milestone hour budgets."""

    def __init__(self, warning_ratio: Optional[float] = None):
        """
        Initialize validator.

        Args:
            warning_ratio: Share of the budget a single milestone may take before
                a warning is reported (None = settings)
        """
        if warning_ratio is None:
            warning_ratio = get_settings().ALLOCATION_WARNING_RATIO
        self.warning_ratio = warning_ratio

    @staticmethod
    def total_allocated(milestones: Iterable[Milestone]) -> float:
        """Sum of allocations over every non-template milestone."""
        return sum(m.time_allocation for m in milestones if not m.is_recurring)

    @staticmethod
    def suggested_budget(total_allocated: float) -> int:
        """Budget to offer when allocations exceed the estimate."""
        return math.ceil(total_allocated)

    def analyze(
        self,
        milestones: list[Milestone],
        estimated_hours: float,
        continuous: bool = False,
    ) -> BudgetAnalysis:
        """
        Analyze allocations against the budget.

        Continuous projects report their allocation but are never over budget.

        Args:
            milestones: Current milestone set (templates are ignored)
            estimated_hours: Project hour budget
            continuous: Whether the project is open-ended

        Returns:
            BudgetAnalysis computed from the given milestones
        """
        total = self.total_allocated(milestones)
        is_over = not continuous and total > estimated_hours
        utilization = (total / estimated_hours) * 100 if estimated_hours > 0 else 0.0

        return BudgetAnalysis(
            estimated_hours=estimated_hours,
            total_allocated=total,
            remaining_budget=estimated_hours - total,
            overage=max(0.0, total - estimated_hours) if not continuous else 0.0,
            is_over_budget=is_over,
            utilization_percent=utilization,
            suggested_budget=self.suggested_budget(total) if is_over else None,
        )

    def would_exceed(
        self,
        milestones: list[Milestone],
        target_id: Optional[UUID],
        new_allocation: float,
        estimated_hours: float,
        continuous: bool = False,
    ) -> bool:
        """
        Check whether changing one allocation would exceed the budget.

        The named milestone's allocation is replaced by ``new_allocation``; if
        no milestone has that id (or the id is None), it is added as a new
        milestone. When the id names a template, every occurrence linked to it
        takes the new per-occurrence value.

        Args:
            milestones: Current milestone set
            target_id: Milestone whose allocation changes
            new_allocation: Proposed hours
            estimated_hours: Project hour budget
            continuous: Whether the project is open-ended (never exceeds)

        Returns:
            bool: True if the resulting total is above the budget
        """
        if continuous:
            return False

        total = 0.0
        found = False
        for milestone in milestones:
            if target_id is not None and milestone.id == target_id:
                found = True
                if not milestone.is_recurring:
                    total += new_allocation
                continue
            if milestone.is_recurring:
                continue
            if target_id is not None and milestone.template_id == target_id:
                total += new_allocation
                continue
            total += milestone.time_allocation

        if not found:
            total += new_allocation

        return total > estimated_hours

    def would_schedule_exceed(
        self,
        milestones: list[Milestone],
        additional: list[Milestone],
        estimated_hours: float,
        continuous: bool = False,
    ) -> bool:
        """Check whether adding a batch of milestones would exceed the budget."""
        if continuous:
            return False
        total = self.total_allocated(milestones) + self.total_allocated(additional)
        return total > estimated_hours

    def check_allocation(self, time_allocation: float, estimated_hours: float) -> AllocationCheck:
        """
        Validate a single milestone allocation.

        Args:
            time_allocation: Hours for the milestone
            estimated_hours: Project hour budget

        Returns:
            AllocationCheck with errors and warnings
        """
        errors: list[str] = []
        warnings: list[str] = []

        if time_allocation <= 0:
            errors.append("Milestone time allocation must be greater than 0")

        if time_allocation > estimated_hours:
            errors.append(
                f"Milestone allocation ({time_allocation}h) exceeds project budget ({estimated_hours}h)"
            )
        elif time_allocation > estimated_hours * self.warning_ratio:
            warnings.append(
                f"Milestone allocation is over {int(self.warning_ratio * 100)}% of project budget"
            )

        return AllocationCheck(is_valid=not errors, errors=errors, warnings=warnings)
