"""
Unit tests for BudgetAllocationValidator.
"""

from datetime import date
from uuid import uuid4

import pytest

from milestone_planner.models.milestone import Milestone
from milestone_planner.models.recurrence import RecurrenceConfig
from milestone_planner.services.budget_validator import BudgetAllocationValidator


def _milestone(hours: float, **kwargs) -> Milestone:
    return Milestone(
        id=kwargs.pop("id", uuid4()),
        name=kwargs.pop("name", "Milestone"),
        due_date=kwargs.pop("due_date", date(2024, 3, 10)),
        time_allocation=hours,
        **kwargs,
    )


def _template(hours: float) -> Milestone:
    return _milestone(
        hours,
        name="Review",
        is_recurring=True,
        recurring_config=RecurrenceConfig(type="weekly", weekly_day_of_week=1),
    )


@pytest.fixture
def validator():
    return BudgetAllocationValidator(warning_ratio=0.5)


class TestAnalyze:
    """Tests for budget analysis."""

    def test_over_budget(self, validator):
        milestones = [_milestone(10), _milestone(10), _milestone(25)]
        analysis = validator.analyze(milestones, 40)

        assert analysis.total_allocated == 45
        assert analysis.is_over_budget is True
        assert analysis.overage == 5
        assert analysis.remaining_budget == -5
        assert analysis.suggested_budget == 45
        assert analysis.utilization_percent == pytest.approx(112.5)

    def test_within_budget(self, validator):
        analysis = validator.analyze([_milestone(10), _milestone(20)], 40)

        assert analysis.is_over_budget is False
        assert analysis.remaining_budget == 10
        assert analysis.overage == 0
        assert analysis.suggested_budget is None
        assert analysis.utilization_percent == pytest.approx(75.0)

    def test_exact_budget_is_not_over(self, validator):
        analysis = validator.analyze([_milestone(20), _milestone(20)], 40)
        assert analysis.is_over_budget is False

    def test_suggested_budget_rounds_up(self, validator):
        analysis = validator.analyze([_milestone(20.5), _milestone(20)], 40)
        assert analysis.suggested_budget == 41

    def test_templates_not_counted(self, validator):
        template = _template(8)
        occurrence = _milestone(8, name="Review 1", template_id=template.id)
        analysis = validator.analyze([template, occurrence], 40)

        assert analysis.total_allocated == 8

    def test_zero_budget_utilization(self, validator):
        analysis = validator.analyze([_milestone(5)], 0)
        assert analysis.utilization_percent == 0
        assert analysis.is_over_budget is True

    def test_repeated_analysis_is_identical(self, validator):
        milestones = [_milestone(10), _milestone(10), _milestone(25)]
        first = validator.analyze(milestones, 40)
        assert validator.analyze(milestones, 40) == first
        assert [m.time_allocation for m in milestones] == [10, 10, 25]

    def test_continuous_never_over(self, validator):
        analysis = validator.analyze([_milestone(500)], 40, continuous=True)

        assert analysis.total_allocated == 500
        assert analysis.is_over_budget is False
        assert analysis.overage == 0
        assert analysis.suggested_budget is None


class TestWouldExceed:
    """Tests for pre-write budget checks."""

    def test_new_milestone_pushes_over(self, validator):
        milestones = [_milestone(10), _milestone(10)]
        assert validator.would_exceed(milestones, None, 25, 40) is True
        assert validator.would_exceed(milestones, None, 20, 40) is False

    def test_existing_milestone_replaced(self, validator):
        target = _milestone(10)
        milestones = [target, _milestone(10), _milestone(10)]

        assert validator.would_exceed(milestones, target.id, 20, 40) is False
        assert validator.would_exceed(milestones, target.id, 21, 40) is True

    def test_unknown_id_is_added(self, validator):
        assert validator.would_exceed([_milestone(30)], uuid4(), 15, 40) is True

    def test_template_change_applies_to_occurrences(self, validator):
        template = _template(5)
        occurrences = [
            _milestone(5, name=f"Review {n}", template_id=template.id) for n in range(1, 5)
        ]
        milestones = [template, *occurrences, _milestone(10)]

        # 4 x 7 + 10 = 38
        assert validator.would_exceed(milestones, template.id, 7, 40) is False
        # 4 x 8 + 10 = 42
        assert validator.would_exceed(milestones, template.id, 8, 40) is True

    def test_continuous_never_exceeds(self, validator):
        assert validator.would_exceed([_milestone(100)], None, 100, 40, continuous=True) is False

    def test_schedule_batch(self, validator):
        batch = [_milestone(5) for _ in range(6)]
        assert validator.would_schedule_exceed([_milestone(10)], batch, 40) is False
        assert validator.would_schedule_exceed([_milestone(11)], batch, 40) is True
        assert validator.would_schedule_exceed([_milestone(11)], batch, 40, continuous=True) is False


class TestCheckAllocation:
    """Tests for single-allocation checks."""

    def test_valid(self, validator):
        check = validator.check_allocation(10, 40)
        assert check.is_valid is True
        assert check.warnings == []

    def test_non_positive(self, validator):
        check = validator.check_allocation(0, 40)
        assert check.is_valid is False
        assert "Milestone time allocation must be greater than 0" in check.errors

    def test_exceeds_budget(self, validator):
        check = validator.check_allocation(50, 40)
        assert check.is_valid is False

    def test_large_share_warns(self, validator):
        check = validator.check_allocation(25, 40)
        assert check.is_valid is True
        assert check.warnings == ["Milestone allocation is over 50% of project budget"]
