"""Recurring milestone scheduling and budget allocation engine."""

__version__ = "0.1.0"
