"""Data transformation and normalization for fetched data."""

import re
from datetime import date

from pydantic import ValidationError

from ghcard.core.parser import parse_activity
from ghcard.models.activity import ActivityDay, WeeklyActivity
from ghcard.models.profile import ProfileRecord


DAYS_PER_WEEK = 7

# Dingbats, private use area, the 1F000-1F7FF and 1F910-1F9FF emoji blocks,
# and general punctuation through miscellaneous symbols
PICTOGRAPH_RE = re.compile(
    "["
    "\u2011-\u26ff"
    "\u2700-\u27bf"
    "\ue000-\uf8ff"
    "\U0001f000-\U0001f7ff"
    "\U0001f910-\U0001f9ff"
    "]"
)


def strip_pictographs(text: str | None) -> str:
    """
    Remove emoji and pictographic characters, then trim.

    Only the matched characters are removed; whitespace between words is
    left as is.

    Examples:
        "Hello 👋 World" -> "Hello  World"
        " 🚀 ship it " -> "ship it"
    """
    if not text:
        return ""
    return PICTOGRAPH_RE.sub("", text).strip()


def transform_profile(data: dict) -> ProfileRecord:
    """
    Build a ProfileRecord from a GitHub ``/users/{username}`` response body.

    Raises:
        pydantic.ValidationError: If required fields are missing or malformed
    """
    return ProfileRecord(
        login=data.get("login"),
        display_name=data.get("name"),
        avatar_url=data.get("avatar_url"),
        bio=data.get("bio"),
        created_at=data.get("created_at"),
        followers=data.get("followers") or 0,
        following=data.get("following") or 0,
        company=data.get("company"),
        location=data.get("location"),
        twitter_username=data.get("twitter_username"),
    )


def _parse_level(level_raw: str | None) -> int | None:
    if level_raw is None:
        return None
    level_raw = level_raw.strip()
    if not level_raw.isdigit():
        return None
    return int(level_raw)


def transform_activity(days_data: list[dict]) -> list[ActivityDay]:
    """
    Validate raw day records and order them chronologically.

    Records with an unparseable date or a level outside 0-4 are dropped.
    """
    days = []
    for raw in days_data:
        try:
            day = ActivityDay(
                date=date.fromisoformat((raw.get("date_raw") or "").strip()),
                level=_parse_level(raw.get("level_raw")),
            )
        except (ValueError, ValidationError):
            continue
        days.append(day)

    return sorted(days, key=lambda d: d.date)


def chunk_weeks(levels: list[int], size: int = DAYS_PER_WEEK) -> list[list[int]]:
    """
    Partition a flat sequence into consecutive chunks of ``size``.

    The last chunk may be shorter. An empty sequence gives no chunks.

    Examples:
        [0, 1, 2, 3, 4, 0, 1, 2] -> [[0, 1, 2, 3, 4, 0, 1], [2]]
        [] -> []
    """
    if size < 1:
        raise ValueError("size must be positive")
    return [list(levels[i:i + size]) for i in range(0, len(levels), size)]


def extract_weekly_activity(html: str) -> WeeklyActivity:
    """Parse a profile page into weekly activity levels."""
    days = transform_activity(parse_activity(html))
    return WeeklyActivity(weeks=chunk_weeks([d.level for d in days]))
