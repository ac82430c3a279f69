"""Profile data model."""

from datetime import datetime

from pydantic import BaseModel


class ProfileRecord(BaseModel):
    """Public GitHub account metadata used on the card."""

    model_config = {"frozen": True}

    login: str
    display_name: str | None = None
    avatar_url: str
    bio: str | None = None
    created_at: datetime
    followers: int = 0
    following: int = 0
    company: str | None = None
    location: str | None = None
    twitter_username: str | None = None
