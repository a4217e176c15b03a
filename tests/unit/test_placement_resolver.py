"""
Unit tests for the placement constraint resolver.
"""

from datetime import date
from uuid import uuid4

from milestone_planner.models.milestone import Milestone
from milestone_planner.models.project import ProjectWindow
from milestone_planner.models.recurrence import RecurrenceConfig
from milestone_planner.services.placement_resolver import valid_range, validate_placement

PROJECT = ProjectWindow(start_date=date(2024, 3, 1), end_date=date(2024, 6, 1), estimated_hours=40)


def _milestone(name: str, due: date, order: int = 0) -> Milestone:
    return Milestone(id=uuid4(), name=name, due_date=due, order=order, time_allocation=1)


class TestValidRange:
    """Tests for placement windows."""

    def test_no_siblings_uses_project_bounds(self):
        target = _milestone("Launch", date(2024, 4, 1))
        window = valid_range(PROJECT, [target], target)

        assert window.min_date == date(2024, 3, 2)
        assert window.max_date == date(2024, 5, 31)

    def test_between_neighbours(self):
        before = _milestone("Design", date(2024, 3, 10))
        target = _milestone("Build", date(2024, 4, 1))
        after = _milestone("Test", date(2024, 4, 20))

        window = valid_range(PROJECT, [after, target, before], target)

        assert window.min_date == date(2024, 3, 11)
        assert window.max_date == date(2024, 4, 19)

    def test_adjacent_neighbours_leave_no_day(self):
        before = _milestone("Design", date(2024, 3, 10))
        target = _milestone("Build", date(2024, 3, 11))
        after = _milestone("Test", date(2024, 3, 12))

        window = valid_range(PROJECT, [before, target, after], target)

        assert window.min_date > window.max_date
        assert window.has_valid_date is False

    def test_new_milestone_positioned_by_date(self):
        first = _milestone("Design", date(2024, 3, 10))
        second = _milestone("Test", date(2024, 4, 20))
        new = Milestone(name="Build", due_date=date(2024, 4, 1))

        window = valid_range(PROJECT, [first, second], new)

        assert window.min_date == date(2024, 3, 11)
        assert window.max_date == date(2024, 4, 19)

    def test_same_day_siblings_ordered_by_order(self):
        early = _milestone("Kickoff", date(2024, 3, 10), order=0)
        target = _milestone("Sync", date(2024, 3, 10), order=1)
        later = _milestone("Review", date(2024, 3, 20))

        window = valid_range(PROJECT, [later, target, early], target)

        assert window.min_date == date(2024, 3, 11)
        assert window.max_date == date(2024, 3, 19)

    def test_saved_target_keeps_stored_position(self):
        before = _milestone("Design", date(2024, 3, 10))
        stored = _milestone("Build", date(2024, 4, 1))
        after = _milestone("Test", date(2024, 4, 20))
        # Dragged copy with a date past its neighbour
        dragged = stored.model_copy(update={"due_date": date(2024, 5, 1)})

        window = valid_range(PROJECT, [before, stored, after], dragged)

        assert window.max_date == date(2024, 4, 19)

    def test_templates_ignored(self):
        template = Milestone(
            id=uuid4(),
            name="Review",
            due_date=date(2024, 3, 1),
            is_recurring=True,
            recurring_config=RecurrenceConfig(type="weekly", weekly_day_of_week=1),
        )
        target = _milestone("Launch", date(2024, 4, 1))

        window = valid_range(PROJECT, [template, target], target)

        assert window.min_date == date(2024, 3, 2)

    def test_continuous_project_uses_horizon(self):
        project = ProjectWindow(start_date=date(2024, 1, 1), continuous=True)
        target = _milestone("Launch", date(2024, 2, 1))

        window = valid_range(project, [target], target, horizon_days=30)

        assert window.max_date == date(2024, 1, 30)


class TestValidatePlacement:
    """Tests for candidate date checks."""

    def test_valid_candidate(self):
        target = _milestone("Launch", date(2024, 4, 1))
        check = validate_placement(PROJECT, [target], target, date(2024, 4, 15))

        assert check.is_valid is True
        assert check.errors == []

    def test_start_date_rejected(self):
        target = _milestone("Launch", date(2024, 4, 1))
        check = validate_placement(PROJECT, [target], target, date(2024, 3, 1))

        assert check.is_valid is False
        assert check.errors == ["Milestone date must be after the project start date"]

    def test_end_date_rejected(self):
        target = _milestone("Launch", date(2024, 4, 1))
        check = validate_placement(PROJECT, [target], target, date(2024, 6, 1))

        assert check.errors == ["Milestone date must be before the project end date"]

    def test_outside_neighbours_rejected(self):
        before = _milestone("Design", date(2024, 3, 10))
        target = _milestone("Build", date(2024, 4, 1))
        check = validate_placement(PROJECT, [before, target], target, date(2024, 3, 5))

        assert check.is_valid is False
        assert check.errors == ["Milestone date must be between 2024-03-11 and 2024-05-31"]

    def test_no_free_day(self):
        before = _milestone("Design", date(2024, 3, 10))
        target = _milestone("Build", date(2024, 3, 11))
        after = _milestone("Test", date(2024, 3, 12))
        check = validate_placement(PROJECT, [before, target, after], target, date(2024, 3, 11))

        assert check.is_valid is False
        assert check.window.has_valid_date is False
