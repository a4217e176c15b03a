"""
Occurrence generation models.
"""

from datetime import date

from pydantic import BaseModel, Field

from milestone_planner.models.milestone import Milestone


class GenerationResult(BaseModel):
    """One batch of generated occurrences."""

    occurrences: list[Milestone] = Field(default_factory=list)
    next_index: int = Field(0, ge=0, description="Cursor to resume the sequence from")
    horizon: date = Field(..., description="Last date occurrences may fall on")
    ceiling_reached: bool = Field(False, description="Lifetime occurrence ceiling was hit")
    exhausted: bool = Field(False, description="No further occurrence exists before the horizon")

    @property
    def count(self) -> int:
        return len(self.occurrences)
