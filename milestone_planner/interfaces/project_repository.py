"""
Project repository interface.

Supplies read-only project window snapshots to the scheduling engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from milestone_planner.models.project import ProjectWindow, ProjectWindowCreate


class IProjectRepository(ABC):
    """Abstract interface for project persistence."""

    @abstractmethod
    async def create(self, project: ProjectWindowCreate) -> ProjectWindow:
        """
        Create a new project.

        Args:
            project: Project creation data

        Returns:
            Created project window
        """
        pass

    @abstractmethod
    async def get(self, project_id: UUID) -> Optional[ProjectWindow]:
        """
        Get a project window by ID.

        Args:
            project_id: Project ID

        Returns:
            ProjectWindow if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_estimated_hours(self, project_id: UUID, estimated_hours: float) -> ProjectWindow:
        """
        Change a project's hour budget.

        Args:
            project_id: Project ID
            estimated_hours: New budget

        Returns:
            Updated project window
        """
        pass
