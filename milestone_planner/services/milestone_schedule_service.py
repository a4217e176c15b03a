"""
Milestone schedule service.

Runs the one-directional pipeline config -> generate -> validate -> persist
for recurring schedules and manually placed milestones. The engine functions
it calls are pure; this service is the only place that talks to storage.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from datetime import date
from typing import Optional
from uuid import UUID

from milestone_planner.core.exceptions import NotFoundError, ValidationError
from milestone_planner.core.logger import setup_logger
from milestone_planner.interfaces.milestone_repository import IMilestoneRepository
from milestone_planner.interfaces.project_repository import IProjectRepository
from milestone_planner.models.budget import BudgetAnalysis
from milestone_planner.models.milestone import Milestone, MilestoneUpdate
from milestone_planner.models.project import ProjectWindow
from milestone_planner.models.reconciliation import InferredTemplate
from milestone_planner.models.recurrence import RecurrenceConfig
from milestone_planner.models.schedule import ScheduleResult
from milestone_planner.services.budget_validator import BudgetAllocationValidator
from milestone_planner.services.occurrence_generator import OccurrenceGenerator
from milestone_planner.services.placement_resolver import validate_placement
from milestone_planner.services.template_reconciliation import (
    plan_legacy_migration,
    plan_template_deletion,
    reconstruct_template,
)

logger = setup_logger(__name__)


class MilestoneScheduleService:
    """Service for creating, topping up and removing milestone schedules."""

    def __init__(
        self,
        milestone_repo: IMilestoneRepository,
        project_repo: IProjectRepository,
        generator: Optional[OccurrenceGenerator] = None,
        budget_validator: Optional[BudgetAllocationValidator] = None,
    ):
        self.milestone_repo = milestone_repo
        self.project_repo = project_repo
        self.generator = generator or OccurrenceGenerator()
        self.budget_validator = budget_validator or BudgetAllocationValidator()
        # One in-flight generation per template
        self._template_locks: defaultdict[UUID, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def _get_project(self, project_id: UUID) -> ProjectWindow:
        project = await self.project_repo.get(project_id)
        if project is None:
            raise NotFoundError(f"Project {project_id} not found")
        return project

    def _budget_error(self, analysis: BudgetAnalysis) -> str:
        return (
            f"Total allocation ({analysis.total_allocated:g}h) would exceed the project budget "
            f"({analysis.estimated_hours:g}h). Suggested budget: {analysis.suggested_budget}h"
        )

    # ===========================================
    # Recurring schedules
    # ===========================================

    async def create_recurring_schedule(
        self,
        project_id: UUID,
        name: str,
        time_allocation: float,
        config: RecurrenceConfig,
    ) -> ScheduleResult:
        """
        Create a recurring template and its first occurrences.

        Bounded projects get every occurrence up to the lifetime ceiling;
        continuous projects get one batch and are topped up later. Nothing is
        written if the occurrences would exceed a bounded project's budget.

        Args:
            project_id: Project ID
            name: Template name (occurrences are named "<name> <n>")
            time_allocation: Hours per occurrence
            config: Recurrence configuration

        Returns:
            ScheduleResult with the saved template and occurrences
        """
        project = await self._get_project(project_id)
        existing = await self.milestone_repo.list_by_project(project_id)

        if any(m.is_recurring for m in existing):
            return ScheduleResult.failure("Project already has a recurring milestone")
        if time_allocation <= 0:
            return ScheduleResult.failure(
                "Recurring milestone must have positive time allocation per occurrence"
            )

        template = Milestone(
            project_id=project_id,
            name=name,
            due_date=project.start_date,
            time_allocation=time_allocation,
            is_recurring=True,
            recurring_config=config,
        )
        preview = self.generator.generate(template, project)
        if not preview.occurrences:
            return ScheduleResult.failure("Recurrence produces no occurrences inside the project window")

        if self.budget_validator.would_schedule_exceed(
            existing, preview.occurrences, project.estimated_hours, project.continuous
        ):
            analysis = self.budget_validator.analyze(
                existing + preview.occurrences, project.estimated_hours, project.continuous
            )
            return ScheduleResult.failure(self._budget_error(analysis), budget=analysis)

        warnings = []
        if self.generator.has_excessive_occurrences(config, project):
            warnings.append(f"{config.describe()} generates a large number of milestones")

        saved_template = await self.milestone_repo.create(template.to_create(project_id))
        # Generation is deterministic, so regenerating with the saved id yields the preview dates
        batch = self.generator.generate(saved_template, project)
        created = await self.milestone_repo.create_many(
            [occurrence.to_create(project_id) for occurrence in batch.occurrences]
        )

        logger.info(
            "Created recurring milestone '%s' (%s) with %d occurrences for project %s",
            name,
            config.describe(),
            len(created),
            project_id,
        )
        return ScheduleResult(
            success=True,
            warnings=warnings,
            template=saved_template,
            created=created,
            ceiling_reached=batch.ceiling_reached,
        )

    async def top_up_occurrences(
        self,
        project_id: UUID,
        template_id: UUID,
        until: Optional[date] = None,
        batch_size: Optional[int] = None,
    ) -> ScheduleResult:
        """
        Generate the next occurrences of a template.

        The resume cursor is taken from the persisted occurrences, so a batch
        that was only partly written is continued rather than duplicated.
        Calls for the same template are serialized.

        Args:
            project_id: Project ID
            template_id: Template to extend
            until: Keep generating batches until an occurrence on or after this date
            batch_size: Occurrences per batch (None = generator default)

        Returns:
            ScheduleResult with the newly created occurrences

        Raises:
            NotFoundError: If the project or template does not exist
        """
        async with self._template_locks[template_id]:
            project = await self._get_project(project_id)
            template = await self.milestone_repo.get(template_id)
            if template is None or not template.is_recurring:
                raise NotFoundError(f"Recurring template {template_id} not found")

            persisted = await self.milestone_repo.list_by_template(template_id)
            start_index = max((m.order for m in persisted), default=-1) + 1

            created: list[Milestone] = []
            ceiling_reached = False
            while True:
                batch = self.generator.generate(template, project, start_index, batch_size)
                if batch.occurrences:
                    created.extend(
                        await self.milestone_repo.create_many(
                            [occurrence.to_create(project_id) for occurrence in batch.occurrences]
                        )
                    )
                start_index = batch.next_index
                ceiling_reached = batch.ceiling_reached
                if batch.exhausted or batch.ceiling_reached or until is None:
                    break
                if batch.occurrences and batch.occurrences[-1].due_date >= until:
                    break

            logger.info(
                "Topped up template %s with %d occurrences (next index %d)",
                template_id,
                len(created),
                start_index,
            )
            return ScheduleResult(
                success=True, template=template, created=created, ceiling_reached=ceiling_reached
            )

    async def delete_recurring_schedule(
        self, project_id: UUID, template_id: Optional[UUID] = None
    ) -> ScheduleResult:
        """
        Delete a recurring template together with its occurrences.

        Args:
            project_id: Project ID
            template_id: Template to delete (None = the project's template)

        Returns:
            ScheduleResult with the number of deleted milestones
        """
        milestones = await self.milestone_repo.list_by_project(project_id)
        plan = plan_template_deletion(milestones, template_id)
        if plan.template_id is not None:
            # Waits for an in-flight top-up; its occurrences go with the template
            async with self._template_locks[plan.template_id]:
                deleted = await self.milestone_repo.delete_many(plan.milestone_ids)
        else:
            deleted = await self.milestone_repo.delete_many(plan.milestone_ids)

        warnings = []
        if plan.used_name_heuristic:
            warnings.append(
                f"Deleted {deleted} milestones matched by their numbered names; "
                "manually named milestones like 'Phase 2' may have been included"
            )
        return ScheduleResult(success=True, warnings=warnings, deleted_count=deleted)

    async def load_recurring_template(self, project_id: UUID) -> Optional[InferredTemplate]:
        """Recover the project's recurring template from its saved milestones."""
        project = await self._get_project(project_id)
        milestones = await self.milestone_repo.list_by_project(project_id)
        return reconstruct_template(milestones, project)

    async def migrate_legacy_occurrences(self, project_id: UUID) -> ScheduleResult:
        """
        Convert numbered legacy milestones into a template with linked occurrences.

        Returns:
            ScheduleResult with the created template; success with no template
            when there is nothing to migrate
        """
        project = await self._get_project(project_id)
        milestones = await self.milestone_repo.list_by_project(project_id)
        plan = plan_legacy_migration(milestones, project)
        if plan is None:
            return ScheduleResult(success=True)

        template = await self.milestone_repo.create(plan.template.to_create(project_id))
        for order, occurrence_id in enumerate(plan.occurrence_ids):
            await self.milestone_repo.update(
                occurrence_id, MilestoneUpdate(template_id=template.id, order=order)
            )

        logger.warning(
            "Migrated %d legacy milestones of project %s to template '%s'",
            len(plan.occurrence_ids),
            project_id,
            template.name,
        )
        return ScheduleResult(success=True, template=template)

    # ===========================================
    # Standalone milestones
    # ===========================================

    async def add_milestone(
        self,
        project_id: UUID,
        name: str,
        due_date: date,
        time_allocation: float,
    ) -> ScheduleResult:
        """
        Add a standalone milestone after checking placement and budget.

        Returns:
            ScheduleResult with the saved milestone, or the reasons it was refused
        """
        project = await self._get_project(project_id)
        siblings = await self.milestone_repo.list_by_project(project_id)
        target = Milestone(
            project_id=project_id,
            name=name,
            due_date=due_date,
            time_allocation=time_allocation,
        )

        placement = validate_placement(project, siblings, target, due_date)
        errors = list(placement.errors)
        budget = None
        if self.budget_validator.would_exceed(
            siblings, None, time_allocation, project.estimated_hours, project.continuous
        ):
            budget = self.budget_validator.analyze(
                siblings + [target], project.estimated_hours, project.continuous
            )
            errors.append(self._budget_error(budget))
        if errors:
            return ScheduleResult.failure(*errors, budget=budget)

        warnings = []
        if project.estimated_hours > 0:
            warnings = self.budget_validator.check_allocation(
                time_allocation, project.estimated_hours
            ).warnings

        saved = await self.milestone_repo.create(target.to_create(project_id))
        return ScheduleResult(success=True, warnings=warnings, milestone=saved)

    async def move_milestone(
        self, project_id: UUID, milestone_id: UUID, new_date: date
    ) -> ScheduleResult:
        """
        Move a standalone milestone to a new date inside its placement window.

        Raises:
            NotFoundError: If the milestone does not exist
            ValidationError: If the milestone is a recurring template
        """
        project = await self._get_project(project_id)
        siblings = await self.milestone_repo.list_by_project(project_id)
        target = next((m for m in siblings if m.id == milestone_id), None)
        if target is None:
            raise NotFoundError(f"Milestone {milestone_id} not found")
        if target.is_recurring:
            raise ValidationError("Recurring templates are not placed on the calendar")

        placement = validate_placement(project, siblings, target, new_date)
        if not placement.is_valid:
            return ScheduleResult.failure(*placement.errors)

        saved = await self.milestone_repo.update(milestone_id, MilestoneUpdate(due_date=new_date))
        return ScheduleResult(success=True, milestone=saved)

    async def update_milestone_allocation(
        self, project_id: UUID, milestone_id: UUID, new_allocation: float
    ) -> ScheduleResult:
        """
        Change a milestone's hours if the budget allows it.

        Changing a template's hours changes every linked occurrence.

        Raises:
            NotFoundError: If the milestone does not exist
        """
        project = await self._get_project(project_id)
        milestones = await self.milestone_repo.list_by_project(project_id)
        target = next((m for m in milestones if m.id == milestone_id), None)
        if target is None:
            raise NotFoundError(f"Milestone {milestone_id} not found")

        if self.budget_validator.would_exceed(
            milestones, milestone_id, new_allocation, project.estimated_hours, project.continuous
        ):
            projected = [
                m.model_copy(update={"time_allocation": new_allocation})
                if m.id == milestone_id or m.template_id == milestone_id
                else m
                for m in milestones
            ]
            analysis = self.budget_validator.analyze(projected, project.estimated_hours)
            return ScheduleResult.failure(self._budget_error(analysis), budget=analysis)

        update = MilestoneUpdate(time_allocation=new_allocation)
        saved = await self.milestone_repo.update(milestone_id, update)
        if target.is_recurring:
            for occurrence in milestones:
                if occurrence.template_id == milestone_id:
                    await self.milestone_repo.update(occurrence.id, update)

        return ScheduleResult(success=True, milestone=saved)

    async def get_budget_analysis(self, project_id: UUID) -> BudgetAnalysis:
        """Analyze the project's current allocations."""
        project = await self._get_project(project_id)
        milestones = await self.milestone_repo.list_by_project(project_id)
        return self.budget_validator.analyze(
            milestones, project.estimated_hours, project.continuous
        )
