"""
Template reconciliation.

Groups generated occurrences under their recurring template. Occurrences link
to their template through ``template_id``. Data saved before that link
existed only marks occurrences by name ("Review 1", "Review 2", ...); the name
heuristic here is a best-effort, logged migration path for such data and can
misclassify names like "Phase 2".
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional
from uuid import UUID

from milestone_planner.core.logger import setup_logger
from milestone_planner.models.enums import IntervalType, MonthlyPattern, RecurrenceType
from milestone_planner.models.milestone import Milestone
from milestone_planner.models.project import ProjectWindow
from milestone_planner.models.reconciliation import (
    DeletionPlan,
    InferredTemplate,
    IntervalClassification,
    LegacyMigrationPlan,
)
from milestone_planner.models.recurrence import RecurrenceConfig
from milestone_planner.utils.calendar_utils import days_between, sunday_weekday

logger = setup_logger(__name__)

NUMBER_SUFFIX = re.compile(r"\s\d+$")
DEFAULT_TEMPLATE_NAME = "Recurring Milestone"


def is_numbered_name(name: str) -> bool:
    """Check whether a name ends in a space followed by an integer."""
    return bool(name) and NUMBER_SUFFIX.search(name) is not None


def strip_number_suffix(name: str) -> str:
    """Remove a trailing ' N' from a name."""
    return NUMBER_SUFFIX.sub("", name) or DEFAULT_TEMPLATE_NAME


def classify_interval(delta_days: int) -> IntervalClassification:
    """
    Classify the spacing between two occurrences.

    Args:
        delta_days: Days between the two earliest occurrences

    Returns:
        IntervalClassification; custom spacings keep their literal day count
    """
    if delta_days == 1:
        return IntervalClassification(type=IntervalType.DAILY, interval=1)
    if delta_days == 7:
        return IntervalClassification(type=IntervalType.WEEKLY, interval=1)
    if 28 <= delta_days <= 31:
        return IntervalClassification(type=IntervalType.MONTHLY, interval=1)
    if delta_days > 0 and delta_days % 7 == 0:
        return IntervalClassification(type=IntervalType.WEEKLY, interval=delta_days // 7)
    if delta_days > 0:
        return IntervalClassification(type=IntervalType.CUSTOM, interval=delta_days)
    # Same-day occurrences carry no spacing information
    return IntervalClassification(type=IntervalType.WEEKLY, interval=1)


def config_from_classification(
    classification: IntervalClassification, first_date: date
) -> RecurrenceConfig:
    """Build a recurrence config anchored on the first occurrence's date."""
    if classification.type in (IntervalType.DAILY, IntervalType.CUSTOM):
        return RecurrenceConfig(type=RecurrenceType.DAILY, interval=classification.interval)
    if classification.type == IntervalType.WEEKLY:
        return RecurrenceConfig(
            type=RecurrenceType.WEEKLY,
            interval=classification.interval,
            weekly_day_of_week=sunday_weekday(first_date),
        )
    return RecurrenceConfig(
        type=RecurrenceType.MONTHLY,
        interval=classification.interval,
        monthly_pattern=MonthlyPattern.DATE,
        monthly_date=first_date.day,
    )


def infer_template(
    occurrences: list[Milestone],
    project: ProjectWindow,
    template_id: Optional[UUID] = None,
) -> Milestone:
    """
    Rebuild a template from its occurrences.

    The pattern comes from the spacing of the two earliest occurrences; a
    single occurrence is treated as weekly.

    Args:
        occurrences: Occurrences of one template (at least one)
        project: Project window the occurrences belong to
        template_id: Identity to give the rebuilt template

    Returns:
        Milestone: Template record (not persisted)
    """
    ordered = sorted(occurrences, key=Milestone.sort_key)
    first = ordered[0]

    if len(ordered) > 1:
        classification = classify_interval(days_between(first.due_date, ordered[1].due_date))
    else:
        classification = IntervalClassification(type=IntervalType.WEEKLY, interval=1)

    return Milestone(
        id=template_id,
        project_id=first.project_id or project.id,
        name=strip_number_suffix(first.name),
        due_date=project.start_date,
        time_allocation=first.time_allocation,
        order=0,
        is_recurring=True,
        recurring_config=config_from_classification(classification, first.due_date),
    )


def legacy_occurrences(milestones: list[Milestone]) -> list[Milestone]:
    """Unlinked, non-template milestones whose names look like numbered occurrences."""
    return [
        m
        for m in milestones
        if not m.is_recurring and m.template_id is None and is_numbered_name(m.name)
    ]


def detect_legacy_template(
    milestones: list[Milestone], project: ProjectWindow
) -> Optional[InferredTemplate]:
    """
    Infer a template from numbered legacy milestones.

    Only applies when the set holds no explicit template.

    Args:
        milestones: Milestones of one project
        project: Project window

    Returns:
        InferredTemplate, or None if there is nothing to infer
    """
    if any(m.is_recurring for m in milestones):
        return None

    candidates = sorted(legacy_occurrences(milestones), key=Milestone.sort_key)
    if not candidates:
        return None

    template = infer_template(candidates, project)
    logger.warning(
        "Inferred recurring template '%s' (%s) from %d numbered milestones by name",
        template.name,
        template.recurring_config.describe(),
        len(candidates),
    )
    return InferredTemplate(
        template=template,
        occurrence_ids=[m.id for m in candidates if m.id is not None],
        from_name_heuristic=True,
    )


def reconstruct_template(
    milestones: list[Milestone], project: ProjectWindow
) -> Optional[InferredTemplate]:
    """
    Recover the recurring template of a loaded milestone set.

    Resolution order: an explicit template record; occurrences linked to a
    template that is not in the set (rebuilt under the same id); numbered
    legacy milestones (name heuristic). Calling this repeatedly on the same
    set yields the same template.

    Args:
        milestones: Milestones of one project
        project: Project window

    Returns:
        InferredTemplate, or None if the set has no recurring group
    """
    template = next((m for m in milestones if m.is_recurring), None)
    if template is not None:
        linked = [m.id for m in milestones if m.template_id is not None and m.template_id == template.id]
        return InferredTemplate(template=template, occurrence_ids=[i for i in linked if i is not None])

    linked = sorted(
        (m for m in milestones if not m.is_recurring and m.template_id is not None),
        key=Milestone.sort_key,
    )
    if linked:
        template_id = linked[0].template_id
        group = [m for m in linked if m.template_id == template_id]
        logger.info(
            "Rebuilt missing template %s from %d linked occurrences", template_id, len(group)
        )
        return InferredTemplate(
            template=infer_template(group, project, template_id=template_id),
            occurrence_ids=[m.id for m in group if m.id is not None],
        )

    return detect_legacy_template(milestones, project)


def plan_template_deletion(
    milestones: list[Milestone], template_id: Optional[UUID] = None
) -> DeletionPlan:
    """
    Work out which milestones to delete with a recurring template.

    Deleting a template removes every occurrence linked to it. Without a
    saved template, linked orphans are removed. Only for legacy data (no
    template record and no requested id) is every unlinked milestone named
    like a numbered occurrence removed (name heuristic).
    Unsaved milestones are skipped.

    Args:
        milestones: Milestones of one project
        template_id: Template to delete (None = the project's template)

    Returns:
        DeletionPlan listing the ids to delete
    """
    templates = [m for m in milestones if m.is_recurring and m.id is not None]
    if template_id is not None:
        templates = [m for m in templates if m.id == template_id]

    if templates:
        template = templates[0]
        linked = [m.id for m in milestones if m.template_id == template.id and m.id is not None]
        return DeletionPlan(template_id=template.id, milestone_ids=[template.id, *linked])

    orphans = [
        m
        for m in milestones
        if not m.is_recurring
        and m.template_id is not None
        and m.id is not None
        and (template_id is None or m.template_id == template_id)
    ]
    if orphans:
        return DeletionPlan(
            template_id=template_id or orphans[0].template_id,
            milestone_ids=[m.id for m in orphans],
        )

    # Unknown ids and projects that already use templates never fall back to names
    if template_id is not None or any(m.is_recurring for m in milestones):
        return DeletionPlan()

    numbered = [m.id for m in legacy_occurrences(milestones) if m.id is not None]
    if numbered:
        logger.warning(
            "No recurring template found; deleting %d milestones matched by name", len(numbered)
        )
    return DeletionPlan(milestone_ids=numbered, used_name_heuristic=bool(numbered))


def plan_legacy_migration(
    milestones: list[Milestone], project: ProjectWindow
) -> Optional[LegacyMigrationPlan]:
    """
    Plan the one-time conversion of numbered legacy milestones to a template.

    Returns:
        LegacyMigrationPlan, or None if no legacy group exists
    """
    inferred = detect_legacy_template(milestones, project)
    if inferred is None or not inferred.occurrence_ids:
        return None
    return LegacyMigrationPlan(template=inferred.template, occurrence_ids=inferred.occurrence_ids)
