"""Card color theme."""

from enum import Enum


class Theme(str, Enum):
    """Palette applied uniformly to a rendered card."""
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_flag(cls, dark: bool) -> "Theme":
        return cls.DARK if dark else cls.LIGHT
