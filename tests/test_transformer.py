"""Unit tests for data normalization."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from ghcard.core.transformer import chunk_weeks, strip_pictographs, transform_profile
from ghcard.models.activity import WeeklyActivity


class TestStripPictographs:
    """Test emoji/pictograph removal from bios."""

    def test_removes_emoji_keeps_inner_whitespace(self):
        assert strip_pictographs("Hello 👋 World") == "Hello  World"

    def test_trims_outer_whitespace(self):
        assert strip_pictographs("  🚀 ship it ✨ ") == "ship it"

    @pytest.mark.parametrize("char", ["☕", "✅", "\ue000", "🤓", "🧑", "🀄", "🟢"])
    def test_pictograph_ranges(self, char: str):
        assert strip_pictographs(f"a{char}b") == "ab"

    def test_plain_text_untouched(self):
        assert strip_pictographs("Builds things at Acme") == "Builds things at Acme"

    @pytest.mark.parametrize("value", [None, "", "   ", "👋"])
    def test_empty_results(self, value):
        assert strip_pictographs(value) == ""

    def test_no_whitespace_normalization(self):
        assert strip_pictographs("a\n\nb") == "a\n\nb"


class TestTransformProfile:
    """Test GitHub JSON -> ProfileRecord."""

    def test_maps_fields(self, profile_data):
        profile = transform_profile(profile_data)
        assert profile.login == "octocat"
        assert profile.display_name == "The Octocat"
        assert profile.avatar_url.startswith("https://avatars.githubusercontent.com/")
        assert profile.followers == 12345
        assert profile.following == 9
        assert profile.company == "@github"
        assert profile.location == "San Francisco"
        assert profile.twitter_username == "octocat"

    def test_parses_created_at(self, profile_data):
        profile = transform_profile(profile_data)
        assert profile.created_at == datetime(2011, 1, 25, 18, 44, 36, tzinfo=timezone.utc)

    def test_bio_is_kept_verbatim(self, profile_data):
        profile = transform_profile(profile_data)
        assert profile.bio == "Hello 👋 World"

    def test_null_optional_fields(self, profile_data):
        profile_data.update(name=None, bio=None, company=None, location=None, twitter_username=None)
        profile = transform_profile(profile_data)
        assert profile.display_name is None
        assert profile.bio is None
        assert profile.company is None

    def test_null_counts_default_to_zero(self, profile_data):
        profile_data.update(followers=None, following=None)
        profile = transform_profile(profile_data)
        assert profile.followers == 0
        assert profile.following == 0

    def test_missing_login_raises(self, profile_data):
        del profile_data["login"]
        with pytest.raises(ValidationError):
            transform_profile(profile_data)

    def test_record_is_immutable(self, profile_data):
        profile = transform_profile(profile_data)
        with pytest.raises(ValidationError):
            profile.login = "someone-else"


class TestChunkWeeks:
    """Test the 7-wide weekly bucketing."""

    def test_exact_weeks(self):
        levels = list(range(5)) + [0, 1] + [2, 3, 4, 0, 1, 2, 3]
        assert chunk_weeks(levels) == [[0, 1, 2, 3, 4, 0, 1], [2, 3, 4, 0, 1, 2, 3]]

    def test_exact_multiple_has_no_trailing_empty_week(self):
        assert chunk_weeks([1] * 14) == [[1] * 7, [1] * 7]

    def test_partial_last_week(self):
        assert chunk_weeks([0, 1, 2, 3, 4, 0, 1, 2]) == [[0, 1, 2, 3, 4, 0, 1], [2]]

    def test_empty(self):
        assert chunk_weeks([]) == []

    def test_shorter_than_a_week(self):
        assert chunk_weeks([4, 4]) == [[4, 4]]

    @pytest.mark.parametrize("count", [0, 1, 6, 7, 8, 13, 14, 15, 364, 371])
    def test_regrouping_preserves_order(self, count: int):
        levels = [i % 5 for i in range(count)]
        weeks = chunk_weeks(levels)
        assert [level for week in weeks for level in week] == levels
        assert all(len(week) == 7 for week in weeks[:-1])
        assert len(weeks) == -(-count // 7)

    def test_custom_size(self):
        assert chunk_weeks([1, 2, 3], size=2) == [[1, 2], [3]]

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            chunk_weeks([1], size=0)


class TestWeeklyActivityModel:
    """Test WeeklyActivity invariants."""

    def test_flatten(self):
        activity = WeeklyActivity(weeks=[[0, 1, 2, 3, 4, 0, 1], [2]])
        assert activity.flatten() == [0, 1, 2, 3, 4, 0, 1, 2]

    def test_rejects_long_week(self):
        with pytest.raises(ValidationError):
            WeeklyActivity(weeks=[[0] * 8])

    def test_rejects_partial_middle_week(self):
        with pytest.raises(ValidationError):
            WeeklyActivity(weeks=[[0, 1], [0] * 7])

    def test_rejects_out_of_range_level(self):
        with pytest.raises(ValidationError):
            WeeklyActivity(weeks=[[5]])
