"""Pydantic models (schemas) for the application."""

from milestone_planner.models.budget import AllocationCheck, BudgetAnalysis
from milestone_planner.models.enums import (
    IntervalType,
    MonthlyPattern,
    RecurrenceType,
    WeekOfMonth,
)
from milestone_planner.models.generation import GenerationResult
from milestone_planner.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate
from milestone_planner.models.placement import PlacementCheck, PlacementWindow
from milestone_planner.models.project import ProjectWindow, ProjectWindowCreate
from milestone_planner.models.reconciliation import (
    DeletionPlan,
    InferredTemplate,
    IntervalClassification,
    LegacyMigrationPlan,
)
from milestone_planner.models.recurrence import (
    RecurrenceConfig,
    RecurrenceValidationResult,
    validate_recurrence_config,
)
from milestone_planner.models.schedule import ScheduleResult

__all__ = [
    # Enums
    "RecurrenceType",
    "MonthlyPattern",
    "IntervalType",
    "WeekOfMonth",
    # Recurrence
    "RecurrenceConfig",
    "RecurrenceValidationResult",
    "validate_recurrence_config",
    # Project
    "ProjectWindow",
    "ProjectWindowCreate",
    # Milestone
    "Milestone",
    "MilestoneCreate",
    "MilestoneUpdate",
    # Engine outputs
    "GenerationResult",
    "BudgetAnalysis",
    "AllocationCheck",
    "PlacementWindow",
    "PlacementCheck",
    "IntervalClassification",
    "InferredTemplate",
    "DeletionPlan",
    "LegacyMigrationPlan",
    "ScheduleResult",
]
