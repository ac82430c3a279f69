"""Color tokens for the light and dark card themes (Tailwind palette)."""

from dataclasses import dataclass

from ghcard.models.theme import Theme


@dataclass(frozen=True)
class Palette:
    """Every color a themed card uses."""

    canvas: str
    background: str
    border: str
    text: str
    muted: str
    handle: str
    handle_prefix: str
    qr_background: str
    qr_foreground: str
    # indexed by activity level 0-4
    activity: tuple[str, str, str, str, str]


PALETTES: dict[Theme, Palette] = {
    Theme.LIGHT: Palette(
        canvas="#f8fafc",          # slate-50
        background="#ffffff",
        border="#e2e8f0",          # slate-200
        text="#000000",
        muted="#64748b",           # slate-500
        handle="#94a3b8",          # slate-400
        handle_prefix="#cbd5e1",   # slate-300
        qr_background="#ffffff",
        qr_foreground="#64748b",
        activity=(
            "#f1f5f9",  # slate-100
            "#dcfce7",  # green-100
            "#bbf7d0",  # green-200
            "#86efac",  # green-300
            "#4ade80",  # green-400
        ),
    ),
    Theme.DARK: Palette(
        canvas="#020617",          # slate-950
        background="#0f172a",      # slate-900
        border="#334155",          # slate-700
        text="#e2e8f0",            # slate-200
        muted="#cbd5e1",           # slate-300
        handle="#cbd5e1",
        handle_prefix="#64748b",   # slate-500
        qr_background="#0f172a",
        qr_foreground="#cbd5e1",
        activity=(
            "#334155",  # slate-700
            "#14532d",  # green-900
            "#166534",  # green-800
            "#15803d",  # green-700
            "#16a34a",  # green-600
        ),
    ),
}


# Error cards are always light
ERROR_CANVAS = "#ffffff"
ERROR_ACCENT = "#dc2626"      # red-600
ERROR_HEADER_TEXT = "#ffffff"
ERROR_BODY_BACKGROUND = "#ffffff"
ERROR_BODY_TEXT = "#000000"


def get_palette(theme: Theme) -> Palette:
    return PALETTES[theme]


def activity_color(level: int, theme: Theme) -> str:
    """
    Cell color for an activity level.

    Level 0 is the neutral tone; 1-4 are increasingly saturated greens.

    Raises:
        ValueError: If level is outside 0-4
    """
    if not 0 <= level <= 4:
        raise ValueError(f"Activity level out of range: {level}")
    return PALETTES[theme].activity[level]
