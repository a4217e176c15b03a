"""
SQLite implementation of Milestone repository.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError

from milestone_planner.core.exceptions import InfrastructureError, NotFoundError
from milestone_planner.infrastructure.local.database import MilestoneORM, get_session_factory
from milestone_planner.interfaces.milestone_repository import IMilestoneRepository
from milestone_planner.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate
from milestone_planner.models.recurrence import RecurrenceConfig


class SqliteMilestoneRepository(IMilestoneRepository):
    """SQLite implementation of milestone repository."""

    def __init__(self, session_factory=None):
        """
        Initialize repository.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: MilestoneORM) -> Milestone:
        """Convert ORM object to Pydantic model."""
        return Milestone(
            id=UUID(orm.id),
            project_id=UUID(orm.project_id),
            name=orm.name,
            due_date=orm.due_date,
            time_allocation=orm.time_allocation or 0.0,
            order=orm.order or 0,
            is_recurring=bool(orm.is_recurring),
            recurring_config=(
                RecurrenceConfig.model_validate(orm.recurring_config)
                if orm.recurring_config
                else None
            ),
            template_id=UUID(orm.template_id) if orm.template_id else None,
        )

    @staticmethod
    def _model_to_orm(milestone: MilestoneCreate) -> MilestoneORM:
        return MilestoneORM(
            id=str(uuid4()),
            project_id=str(milestone.project_id),
            name=milestone.name,
            due_date=milestone.due_date,
            time_allocation=milestone.time_allocation,
            order=milestone.order,
            is_recurring=milestone.is_recurring,
            recurring_config=milestone.recurring_config.to_json() if milestone.recurring_config else None,
            template_id=str(milestone.template_id) if milestone.template_id else None,
        )

    async def create(self, milestone: MilestoneCreate) -> Milestone:
        """Create a new milestone."""
        async with self._session_factory() as session:
            orm = self._model_to_orm(milestone)
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def create_many(self, milestones: list[MilestoneCreate]) -> list[Milestone]:
        """Create several milestones in one transaction."""
        if not milestones:
            return []
        async with self._session_factory() as session:
            orms = [self._model_to_orm(m) for m in milestones]
            session.add_all(orms)
            try:
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise InfrastructureError(
                    f"Failed to save {len(orms)} milestones: {e}",
                    details={"count": len(orms)},
                ) from e
            for orm in orms:
                await session.refresh(orm)
            return [self._orm_to_model(orm) for orm in orms]

    async def get(self, milestone_id: UUID) -> Milestone | None:
        """Get a milestone by ID."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MilestoneORM).where(MilestoneORM.id == str(milestone_id))
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def list_by_project(self, project_id: UUID) -> list[Milestone]:
        """List milestones for a project."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MilestoneORM)
                .where(MilestoneORM.project_id == str(project_id))
                .order_by(MilestoneORM.due_date, MilestoneORM.order)
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def list_by_template(self, template_id: UUID) -> list[Milestone]:
        """List occurrences generated from a template."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MilestoneORM)
                .where(MilestoneORM.template_id == str(template_id))
                .order_by(MilestoneORM.order)
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def update(self, milestone_id: UUID, update: MilestoneUpdate) -> Milestone:
        """Update a milestone."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MilestoneORM).where(MilestoneORM.id == str(milestone_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                raise NotFoundError(f"Milestone {milestone_id} not found")

            for field in update.model_fields_set:
                value = getattr(update, field)
                if value is None:
                    continue
                if field == "recurring_config":
                    value = value.to_json()
                elif field == "template_id":
                    value = str(value)
                setattr(orm, field, value)

            orm.updated_at = datetime.utcnow()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, milestone_id: UUID) -> bool:
        """Delete a milestone. Occurrences linked to it are deleted as well."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MilestoneORM).where(MilestoneORM.id == str(milestone_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return False

            # SQLite only enforces ON DELETE CASCADE with the foreign_keys pragma
            await session.execute(
                delete(MilestoneORM).where(MilestoneORM.template_id == str(milestone_id))
            )
            await session.delete(orm)
            await session.commit()
            return True

    async def delete_many(self, milestone_ids: list[UUID]) -> int:
        """Delete milestones by ID, including occurrences of deleted templates."""
        if not milestone_ids:
            return 0
        ids = [str(milestone_id) for milestone_id in milestone_ids]
        async with self._session_factory() as session:
            result = await session.execute(
                delete(MilestoneORM).where(
                    or_(MilestoneORM.id.in_(ids), MilestoneORM.template_id.in_(ids))
                )
            )
            await session.commit()
            return result.rowcount or 0
