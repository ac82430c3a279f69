"""Pydantic models for ghcard."""

from ghcard.models.profile import ProfileRecord
from ghcard.models.activity import ActivityDay, WeeklyActivity
from ghcard.models.theme import Theme
from ghcard.models.result import ImageResult, IMAGE_WIDTH, IMAGE_HEIGHT

__all__ = [
    "ProfileRecord",
    "ActivityDay",
    "WeeklyActivity",
    "Theme",
    "ImageResult",
    "IMAGE_WIDTH",
    "IMAGE_HEIGHT",
]
