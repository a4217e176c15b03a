"""Abstract interfaces for infrastructure abstraction."""

from milestone_planner.interfaces.milestone_repository import IMilestoneRepository
from milestone_planner.interfaces.project_repository import IProjectRepository

__all__ = [
    "IMilestoneRepository",
    "IProjectRepository",
]
