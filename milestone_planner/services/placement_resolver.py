"""
Placement constraint resolver.

Computes the dates a manually placed milestone may move to. Milestones keep a
strict chronological order with no two on the same day, and never land on the
project's own start or end date.
"""

from __future__ import annotations

from bisect import bisect_right
from datetime import date
from typing import Optional

from milestone_planner.models.milestone import Milestone
from milestone_planner.models.placement import PlacementCheck, PlacementWindow
from milestone_planner.models.project import ProjectWindow
from milestone_planner.utils.calendar_utils import DAY


def valid_range(
    project: ProjectWindow,
    siblings: list[Milestone],
    target: Milestone,
    horizon_days: Optional[int] = None,
) -> PlacementWindow:
    """
    Compute the placement window for a milestone.

    Starts from the open interval between the project bounds and narrows it to
    the days strictly between the target's neighbours in sorted order. A saved
    target keeps its current position; a new one (no id, or an id not among
    the siblings) goes after every sibling due on or before its date.

    Args:
        project: Project window
        siblings: Other milestones of the project (templates are ignored)
        target: Milestone being placed
        horizon_days: Lookahead for continuous projects (None = settings)

    Returns:
        PlacementWindow; ``min_date > max_date`` when no valid day exists
    """
    min_date = project.start_date + DAY
    max_date = project.effective_end_date(horizon_days) - DAY

    others = sorted(
        (m for m in siblings if not m.is_recurring and not _is_same(m, target)),
        key=Milestone.sort_key,
    )
    current = None
    if target.id is not None:
        current = next((m for m in siblings if m.id == target.id), None)

    if current is not None:
        position = bisect_right([m.sort_key() for m in others], current.sort_key())
    else:
        position = bisect_right([m.due_date for m in others], target.due_date)

    if position > 0:
        min_date = max(min_date, others[position - 1].due_date + DAY)
    if position < len(others):
        max_date = min(max_date, others[position].due_date - DAY)

    return PlacementWindow(min_date=min_date, max_date=max_date)


def validate_placement(
    project: ProjectWindow,
    siblings: list[Milestone],
    target: Milestone,
    candidate: date,
    horizon_days: Optional[int] = None,
) -> PlacementCheck:
    """
    Check a candidate date for a milestone.

    Args:
        project: Project window
        siblings: Other milestones of the project
        target: Milestone being placed (its current date decides its position)
        candidate: Proposed due date

    Returns:
        PlacementCheck with the window and any errors
    """
    window = valid_range(project, siblings, target, horizon_days)
    errors: list[str] = []

    if not window.has_valid_date:
        errors.append("No free day is available between the neighbouring milestones")
    elif candidate <= project.start_date:
        errors.append("Milestone date must be after the project start date")
    elif candidate >= project.effective_end_date(horizon_days):
        errors.append("Milestone date must be before the project end date")
    elif not window.contains(candidate):
        errors.append(
            f"Milestone date must be between {window.min_date.isoformat()} "
            f"and {window.max_date.isoformat()}"
        )

    return PlacementCheck(is_valid=not errors, window=window, errors=errors)


def _is_same(milestone: Milestone, target: Milestone) -> bool:
    if target.id is not None:
        return milestone.id == target.id
    return milestone is target
