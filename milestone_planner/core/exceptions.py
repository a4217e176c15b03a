"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class PlannerError(Exception):
    """Base exception for milestone_planner."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(PlannerError):
    """Resource not found."""

    pass


class ValidationError(PlannerError):
    """Validation error."""

    pass


class InvalidRecurrenceError(ValidationError):
    """Recurrence configuration cannot be used for generation."""

    pass


class InfrastructureError(PlannerError):
    """Infrastructure-related error (DB, external services, etc.)."""

    pass

