"""
Occurrence generator.

Expands a recurring template milestone into dated occurrences inside a
project window. Generation is resumable: a batch starts at ``start_index``
and reports the cursor to continue from, so continuous projects can be topped
up incrementally instead of materializing a whole year at once.
"""

from __future__ import annotations

from datetime import date
from typing import Iterator, Optional

from milestone_planner.core.config import get_settings
from milestone_planner.core.exceptions import InvalidRecurrenceError, ValidationError
from milestone_planner.core.logger import setup_logger
from milestone_planner.models.enums import RecurrenceType
from milestone_planner.models.generation import GenerationResult
from milestone_planner.models.milestone import Milestone
from milestone_planner.models.project import ProjectWindow
from milestone_planner.models.recurrence import RecurrenceConfig
from milestone_planner.services.recurrence_resolver import next_occurrence
from milestone_planner.utils.calendar_utils import DAY

logger = setup_logger(__name__)


class OccurrenceGenerator:
    """Generates occurrences of recurring templates."""

    def __init__(
        self,
        horizon_days: Optional[int] = None,
        max_occurrences: Optional[int] = None,
        batch_size: Optional[int] = None,
        excessive_threshold: Optional[int] = None,
    ):
        """
        Initialize generator.

        Args:
            horizon_days: Lookahead for continuous projects
            max_occurrences: Lifetime ceiling of occurrences per template
            batch_size: Default batch size for continuous projects
            excessive_threshold: Count at which a schedule is reported as excessive
        """
        settings = get_settings()
        if horizon_days is None:
            horizon_days = settings.CONTINUOUS_HORIZON_DAYS
        if max_occurrences is None:
            max_occurrences = settings.MAX_OCCURRENCES
        if batch_size is None:
            batch_size = settings.CONTINUOUS_BATCH_SIZE
        if excessive_threshold is None:
            excessive_threshold = settings.EXCESSIVE_OCCURRENCE_THRESHOLD
        self.horizon_days = horizon_days
        self.max_occurrences = max_occurrences
        self.batch_size = batch_size
        self.excessive_threshold = excessive_threshold

    def horizon(self, project: ProjectWindow) -> date:
        """Last date an occurrence may fall on (the day before the effective end)."""
        return project.effective_end_date(self.horizon_days) - DAY

    def generate(
        self,
        template: Milestone,
        project: ProjectWindow,
        start_index: int = 0,
        max_count: Optional[int] = None,
    ) -> GenerationResult:
        """
        Generate a batch of occurrences for a template.

        Args:
            template: Template milestone carrying the recurrence configuration
            project: Project window to generate inside
            start_index: Number of occurrences already generated (skipped)
            max_count: Maximum new occurrences (None = batch size for continuous
                projects, everything up to the ceiling for bounded ones)

        Returns:
            GenerationResult with the new occurrences and the resume cursor

        Raises:
            InvalidRecurrenceError: If the template has no recurrence configuration
            ValidationError: If start_index or max_count is out of range
        """
        if template.recurring_config is None:
            raise InvalidRecurrenceError(
                f"Milestone '{template.name}' has no recurrence configuration"
            )
        if start_index < 0:
            raise ValidationError("start_index must not be negative", details={"start_index": start_index})
        if max_count is None:
            max_count = self.batch_size if project.continuous else self.max_occurrences
        if max_count < 1:
            raise ValidationError("max_count must be at least 1", details={"max_count": max_count})

        horizon = self.horizon(project)
        occurrences: list[Milestone] = []
        index = start_index
        ceiling_reached = False
        exhausted = True

        for order, occurrence_date in self._iter_dates(template.recurring_config, project, horizon):
            if order < start_index:
                continue
            if order >= self.max_occurrences:
                ceiling_reached = True
                exhausted = False
                break
            if len(occurrences) >= max_count:
                exhausted = False
                break
            occurrences.append(self._build_occurrence(template, occurrence_date, order))
            index = order + 1

        if ceiling_reached:
            logger.warning(
                "Occurrence ceiling (%d) reached for template '%s'",
                self.max_occurrences,
                template.name,
            )
        logger.debug(
            "Generated %d occurrences for '%s' (start_index=%d, next_index=%d)",
            len(occurrences),
            template.name,
            start_index,
            index,
        )

        return GenerationResult(
            occurrences=occurrences,
            next_index=index,
            horizon=horizon,
            ceiling_reached=ceiling_reached,
            exhausted=exhausted,
        )

    def occurrence_dates(self, config: RecurrenceConfig, project: ProjectWindow) -> list[date]:
        """All occurrence dates over the full horizon, capped by the ceiling."""
        dates = []
        for order, occurrence_date in self._iter_dates(config, project, self.horizon(project)):
            if order >= self.max_occurrences:
                break
            dates.append(occurrence_date)
        return dates

    def count_occurrences(self, config: RecurrenceConfig, project: ProjectWindow) -> int:
        """Number of occurrences the pattern produces inside the project window."""
        return len(self.occurrence_dates(config, project))

    def projected_allocation(self, template: Milestone, project: ProjectWindow) -> float:
        """Total hours the template's occurrences will allocate."""
        if template.recurring_config is None:
            return 0.0
        return self.count_occurrences(template.recurring_config, project) * template.time_allocation

    def has_excessive_occurrences(
        self,
        config: RecurrenceConfig,
        project: ProjectWindow,
        threshold: Optional[int] = None,
    ) -> bool:
        """Check whether a pattern would produce an unusually large number of occurrences."""
        if threshold is None:
            threshold = self.excessive_threshold
        return self.count_occurrences(config, project) >= threshold

    @staticmethod
    def estimate_occurrence_count(config: RecurrenceConfig, duration_days: int) -> int:
        """
        Quick occurrence estimate without walking the calendar.

        Months are approximated as 30 days.
        """
        if config.type == RecurrenceType.DAILY:
            return duration_days // config.interval
        if config.type == RecurrenceType.WEEKLY:
            return duration_days // (7 * config.interval)
        return duration_days // (30 * config.interval)

    def _iter_dates(
        self,
        config: RecurrenceConfig,
        project: ProjectWindow,
        horizon: date,
    ) -> Iterator[tuple[int, date]]:
        """Yield (order, date) pairs strictly after the project start up to the horizon."""
        current = next_occurrence(config, project.start_date, is_first=True)
        order = 0
        while current <= horizon:
            # A pattern may match the start date itself; the boundary is exclusive
            if current > project.start_date:
                yield order, current
                order += 1
            current = next_occurrence(config, current, is_first=False)

    @staticmethod
    def _build_occurrence(template: Milestone, occurrence_date: date, order: int) -> Milestone:
        return Milestone(
            name=f"{template.name} {order + 1}",
            due_date=occurrence_date,
            time_allocation=template.time_allocation,
            order=order,
            is_recurring=False,
            template_id=template.id,
            project_id=template.project_id,
        )
