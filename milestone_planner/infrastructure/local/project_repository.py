"""
SQLite implementation of Project repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select

from milestone_planner.core.exceptions import NotFoundError
from milestone_planner.infrastructure.local.database import ProjectORM, get_session_factory
from milestone_planner.interfaces.project_repository import IProjectRepository
from milestone_planner.models.project import ProjectWindow, ProjectWindowCreate


class SqliteProjectRepository(IProjectRepository):
    """SQLite implementation of project repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: ProjectORM) -> ProjectWindow:
        """Convert ORM object to Pydantic model."""
        return ProjectWindow(
            id=UUID(orm.id),
            name=orm.name,
            start_date=orm.start_date,
            end_date=orm.end_date,
            continuous=bool(orm.continuous),
            estimated_hours=orm.estimated_hours or 0.0,
        )

    async def create(self, project: ProjectWindowCreate) -> ProjectWindow:
        """Create a new project."""
        async with self._session_factory() as session:
            orm = ProjectORM(
                id=str(uuid4()),
                name=project.name,
                start_date=project.start_date,
                end_date=project.end_date,
                continuous=project.continuous,
                estimated_hours=project.estimated_hours,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def get(self, project_id: UUID) -> Optional[ProjectWindow]:
        """Get a project window by ID."""
        async with self._session_factory() as session:
            result = await session.execute(select(ProjectORM).where(ProjectORM.id == str(project_id)))
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def update_estimated_hours(self, project_id: UUID, estimated_hours: float) -> ProjectWindow:
        """Change a project's hour budget."""
        async with self._session_factory() as session:
            result = await session.execute(select(ProjectORM).where(ProjectORM.id == str(project_id)))
            orm = result.scalar_one_or_none()
            if not orm:
                raise NotFoundError(f"Project {project_id} not found")
            orm.estimated_hours = estimated_hours
            orm.updated_at = datetime.utcnow()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)
