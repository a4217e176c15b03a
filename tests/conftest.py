"""
Shared fixtures.
"""

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from milestone_planner.infrastructure.local.database import Base
from milestone_planner.infrastructure.local.milestone_repository import SqliteMilestoneRepository
from milestone_planner.infrastructure.local.project_repository import SqliteProjectRepository
from milestone_planner.models.project import ProjectWindowCreate


@pytest.fixture
async def session_factory():
    """Create an in-memory database and its session factory."""
    # Use in-memory SQLite
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def milestone_repo(session_factory):
    return SqliteMilestoneRepository(session_factory)


@pytest.fixture
def project_repo(session_factory):
    return SqliteProjectRepository(session_factory)


@pytest.fixture
async def bounded_project(project_repo):
    """Project from 2024-03-01 to 2024-06-01 with a 40 hour budget."""
    return await project_repo.create(
        ProjectWindowCreate(
            name="Website relaunch",
            start_date=date(2024, 3, 1),
            end_date=date(2024, 6, 1),
            estimated_hours=40,
        )
    )


@pytest.fixture
async def continuous_project(project_repo):
    """Open-ended project starting 2024-01-01."""
    return await project_repo.create(
        ProjectWindowCreate(name="Operations", start_date=date(2024, 1, 1), continuous=True)
    )
