"""Contribution activity models."""

import datetime

from pydantic import BaseModel, Field, field_validator


class ActivityDay(BaseModel):
    """A single day of the contribution calendar."""

    model_config = {"frozen": True}

    date: datetime.date
    level: int = Field(ge=0, le=4)


class WeeklyActivity(BaseModel):
    """Activity levels grouped into weeks of up to seven days."""

    model_config = {"frozen": True}

    weeks: list[list[int]] = []

    @field_validator("weeks")
    @classmethod
    def _check_weeks(cls, weeks: list[list[int]]) -> list[list[int]]:
        for i, week in enumerate(weeks):
            if len(week) > 7:
                raise ValueError(f"week {i} has {len(week)} days")
            if len(week) < 7 and i != len(weeks) - 1:
                raise ValueError(f"only the last week may be partial (week {i})")
            if any(level < 0 or level > 4 for level in week):
                raise ValueError(f"week {i} has a level outside 0-4")
        return weeks

    def flatten(self) -> list[int]:
        """All levels in chronological order."""
        return [level for week in self.weeks for level in week]
