"""
Milestone repository interface.

Defines the contract for milestone data operations.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from milestone_planner.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate


class IMilestoneRepository(ABC):
    """Interface for milestone repository operations."""

    @abstractmethod
    async def create(self, milestone: MilestoneCreate) -> Milestone:
        """Create a new milestone."""
        pass

    @abstractmethod
    async def create_many(self, milestones: list[MilestoneCreate]) -> list[Milestone]:
        """Create several milestones in one transaction."""
        pass

    @abstractmethod
    async def get(self, milestone_id: UUID) -> Milestone | None:
        """Get a milestone by ID."""
        pass

    @abstractmethod
    async def list_by_project(self, project_id: UUID) -> list[Milestone]:
        """List milestones for a project, ordered by due date then order."""
        pass

    @abstractmethod
    async def list_by_template(self, template_id: UUID) -> list[Milestone]:
        """List occurrences generated from a template, ordered by order."""
        pass

    @abstractmethod
    async def update(self, milestone_id: UUID, update: MilestoneUpdate) -> Milestone:
        """Update a milestone. Raises NotFoundError if it does not exist."""
        pass

    @abstractmethod
    async def delete(self, milestone_id: UUID) -> bool:
        """Delete a milestone and its linked occurrences. Returns True if deleted, False if not found."""
        pass

    @abstractmethod
    async def delete_many(self, milestone_ids: list[UUID]) -> int:
        """Delete milestones by ID. Returns the number of rows deleted."""
        pass
