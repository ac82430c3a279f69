"""Card layout - turns profile data into a visual tree."""

import textwrap
from datetime import timezone
from urllib.parse import urlencode

from ghcard.config import CardConfig
from ghcard.core.transformer import strip_pictographs
from ghcard.models.activity import WeeklyActivity
from ghcard.models.profile import ProfileRecord
from ghcard.models.result import IMAGE_HEIGHT, IMAGE_WIDTH
from ghcard.models.theme import Theme
from ghcard.render import theme as tokens
from ghcard.render.tree import Node, Style, TextRun, box, image, text


# Font size -> line height (Tailwind text-xl .. text-6xl)
LINE_HEIGHTS = {20: 28, 24: 32, 30: 36, 60: 60}

# Rough advance width of one character as a fraction of the font size
CHAR_WIDTH_RATIO = 0.5

CARD_INSET = 32
CARD_BORDER = 4

AVATAR_SIZE = 256
BIO_MAX_LINES = 4

CELL_SIZE = 8
CELL_MARGIN = 2
CELL_PITCH = CELL_SIZE + 2 * CELL_MARGIN
FOOTER_PADDING = 8
FOOTER_HEIGHT = 7 * CELL_PITCH + 2 * FOOTER_PADDING
# the footer overlaps the upper section by this much
FOOTER_OVERLAP = 96
QR_SIZE = 84

ERROR_MIN_WIDTH = IMAGE_WIDTH // 2
ERROR_HEADER_SIZE = 30
ERROR_BODY_SIZE = 20
ERROR_PADDING = 16
ERROR_RADIUS = 12


def estimate_width(value: str, font_size: int) -> int:
    return int(len(value) * font_size * CHAR_WIDTH_RATIO)


def chars_per_line(width: int, font_size: int) -> int:
    return max(1, int(width / (font_size * CHAR_WIDTH_RATIO)))


def truncate(value: str, max_chars: int) -> str:
    if len(value) <= max_chars:
        return value
    return value[:max_chars - 1].rstrip() + "…"


def format_joined_date(profile: ProfileRecord) -> str:
    """``"Since January 2011"`` from the account creation time (UTC)."""
    created = profile.created_at
    if created.tzinfo is not None:
        created = created.astimezone(timezone.utc)
    return f"Since {created.strftime('%B %Y')}"


def format_followers(count: int) -> str:
    if count == 1:
        return "1 follower"
    return f"{count:,} followers"


def format_following(count: int) -> str:
    return f"{count:,} following"


def format_stats(profile: ProfileRecord) -> str:
    return f"{format_followers(profile.followers)} · {format_following(profile.following)}"


def qr_code_url(profile: ProfileRecord, theme: Theme, config: CardConfig) -> str:
    """QR service URL encoding the profile's canonical address."""
    palette = tokens.get_palette(theme)
    params = {
        "size": f"{QR_SIZE}x{QR_SIZE}",
        "bgcolor": palette.qr_background.lstrip("#"),
        "color": palette.qr_foreground.lstrip("#"),
        "data": f"{config.web_base_url.rstrip('/')}/{profile.login}",
    }
    return f"{config.qr_service_url}?{urlencode(params)}"


def _line_height(font_size: int) -> int:
    return LINE_HEIGHTS.get(font_size, int(font_size * 1.25))


def _left_column(profile: ProfileRecord, palette: tokens.Palette,
                 x: int, top: int, height: int) -> list[Node]:
    label_size = 20
    label_height = _line_height(label_size)
    column_height = AVATAR_SIZE + 16 + label_height + 48
    y = top + (height - column_height) // 2

    label = format_joined_date(profile)
    label_width = max(AVATAR_SIZE, estimate_width(label, label_size))
    return [
        image(
            x, y, AVATAR_SIZE, AVATAR_SIZE,
            src=profile.avatar_url,
            style=Style(radius=AVATAR_SIZE // 2),
            name="avatar",
        ),
        text(
            x + (AVATAR_SIZE - label_width) // 2, y + AVATAR_SIZE + 16,
            label_width, label_height,
            runs=[TextRun(text=label)],
            style=Style(color=palette.muted, font_size=label_size),
            name="joined",
        ),
    ]


def _badges(profile: ProfileRecord) -> list[tuple[str, str]]:
    badges = []
    if profile.company:
        badges.append(("🏢", profile.company))
    if profile.location:
        badges.append(("📍", profile.location))
    if profile.twitter_username:
        badges.append(("🕊", f"@{profile.twitter_username}"))
    return badges


def _right_column(profile: ProfileRecord, palette: tokens.Palette, config: CardConfig,
                  x: int, top: int, width: int, height: int) -> list[Node]:
    name_size, handle_size, body_size = 60, 30, 24
    body_line = _line_height(body_size)

    name = profile.display_name or profile.login
    name = truncate(name, chars_per_line(width, name_size))

    bio = strip_pictographs(profile.bio)
    bio_lines = textwrap.wrap(
        bio,
        width=chars_per_line(width, body_size),
        max_lines=BIO_MAX_LINES,
        placeholder=" …",
    ) if bio else []

    # Lay out badge rows, wrapping when a row is full
    badge_rows: list[list[tuple[int, str, str]]] = []
    row: list[tuple[int, str, str]] = []
    cursor = 0
    # icon, space and padding take about four characters
    max_label = max(1, chars_per_line(width, body_size) - 4)
    for icon, label in _badges(profile):
        label = truncate(label, max_label)
        badge_width = estimate_width(f"{icon} {label}", body_size) + body_size
        if row and cursor + badge_width > width:
            badge_rows.append(row)
            row, cursor = [], 0
        row.append((cursor, icon, label))
        cursor += badge_width + 16
    if row:
        badge_rows.append(row)

    column_height = (
        _line_height(name_size)
        + _line_height(handle_size) + 8
        + len(bio_lines) * body_line
        + 32 + body_line + 8
        + len(badge_rows) * (body_line + 8)
    )
    y = top + (height - column_height) // 2

    nodes = [
        text(
            x, y, width, _line_height(name_size),
            runs=[TextRun(text=name)],
            style=Style(color=palette.text, font_size=name_size),
            name="name",
        ),
    ]
    y += _line_height(name_size)

    nodes.append(text(
        x, y, width, _line_height(handle_size),
        runs=[
            TextRun(text=f"{config.web_host}/", color=palette.handle_prefix),
            TextRun(text=profile.login),
        ],
        style=Style(color=palette.handle, font_size=handle_size),
        name="handle",
    ))
    y += _line_height(handle_size) + 8

    if bio_lines:
        lines = []
        for i, line in enumerate(bio_lines):
            lines.append(text(
                x, y + i * body_line, width, body_line,
                runs=[TextRun(text=line)],
                style=Style(color=palette.text, font_size=body_size),
            ))
        nodes.append(box(x, y, width, len(bio_lines) * body_line, children=lines, name="bio"))
        y += len(bio_lines) * body_line

    y += 32
    nodes.append(text(
        x, y, width, body_line,
        runs=[
            TextRun(text="👥", emoji=True),
            TextRun(text=f" {format_stats(profile)}"),
        ],
        style=Style(color=palette.text, font_size=body_size),
        name="stats",
    ))
    y += body_line + 8

    if badge_rows:
        badges = []
        for row_index, badge_row in enumerate(badge_rows):
            row_y = y + row_index * (body_line + 8)
            for offset, icon, label in badge_row:
                badges.append(text(
                    x + offset, row_y,
                    estimate_width(f"{icon} {label}", body_size) + body_size, body_line,
                    runs=[TextRun(text=icon, emoji=True), TextRun(text=f" {label}")],
                    style=Style(color=palette.text, font_size=body_size),
                ))
        nodes.append(box(
            x, y, width, len(badge_rows) * (body_line + 8),
            children=badges,
            name="badges",
        ))

    return nodes


def _activity_grid(activity: WeeklyActivity, theme: Theme,
                   x: int, y: int, max_width: int) -> Node:
    weeks = activity.weeks
    max_weeks = max_width // CELL_PITCH
    if len(weeks) > max_weeks:
        weeks = weeks[-max_weeks:]

    columns = []
    for w, week in enumerate(weeks):
        column_x = x + w * CELL_PITCH
        cells = [
            box(
                column_x + CELL_MARGIN, y + d * CELL_PITCH + CELL_MARGIN,
                CELL_SIZE, CELL_SIZE,
                style=Style(background=tokens.activity_color(level, theme)),
            )
            for d, level in enumerate(week)
        ]
        columns.append(box(column_x, y, CELL_PITCH, 7 * CELL_PITCH, children=cells))

    return box(x, y, len(weeks) * CELL_PITCH, 7 * CELL_PITCH, children=columns, name="activity")


def build_profile_card(
    profile: ProfileRecord,
    activity: WeeklyActivity,
    theme: Theme,
    config: CardConfig | None = None,
) -> Node:
    """
    Compose the 1200x628 profile card.

    Args:
        profile: Account metadata
        activity: Weekly contribution levels
        theme: Light or dark palette
        config: CardConfig for URLs, uses defaults if None

    Returns:
        Root node of the visual tree
    """
    config = config or CardConfig()
    palette = tokens.get_palette(theme)

    card_x = card_y = CARD_INSET
    card_width = IMAGE_WIDTH - 2 * CARD_INSET
    card_height = IMAGE_HEIGHT - 2 * CARD_INSET
    inner_x = card_x + CARD_BORDER
    inner_y = card_y + CARD_BORDER
    inner_width = card_width - 2 * CARD_BORDER
    inner_bottom = card_y + card_height - CARD_BORDER

    footer_y = inner_bottom - FOOTER_HEIGHT
    upper_height = footer_y + FOOTER_OVERLAP - inner_y

    left_width = inner_width // 3
    right_x = inner_x + left_width + 48
    right_width = inner_x + inner_width - 64 - right_x

    upper = box(
        inner_x, inner_y, inner_width, upper_height,
        children=[
            box(
                inner_x, inner_y, left_width, upper_height,
                children=_left_column(
                    profile, palette,
                    inner_x + left_width - AVATAR_SIZE, inner_y, upper_height,
                ),
                name="left",
            ),
            box(
                right_x, inner_y, right_width, upper_height,
                children=_right_column(
                    profile, palette, config,
                    right_x, inner_y, right_width, upper_height,
                ),
                name="right",
            ),
        ],
    )

    qr_x = inner_x + inner_width - FOOTER_PADDING - QR_SIZE
    grid_x = inner_x + FOOTER_PADDING
    footer = box(
        inner_x, footer_y, inner_width, FOOTER_HEIGHT,
        children=[
            _activity_grid(activity, theme, grid_x, footer_y + FOOTER_PADDING,
                           qr_x - FOOTER_PADDING - grid_x),
            image(
                qr_x, footer_y + FOOTER_PADDING, QR_SIZE, QR_SIZE,
                src=qr_code_url(profile, theme, config),
                name="qr",
            ),
        ],
        name="footer",
    )

    card = box(
        card_x, card_y, card_width, card_height,
        style=Style(
            background=palette.background,
            border_color=palette.border,
            border_width=CARD_BORDER,
        ),
        children=[upper, footer],
        name="card",
    )
    return box(
        0, 0, IMAGE_WIDTH, IMAGE_HEIGHT,
        style=Style(background=palette.canvas),
        children=[card],
        name="canvas",
    )


def build_error_card(message: str) -> Node:
    """
    Compose the 1200x628 error card.

    A centered card with a red "Error" header and the message below it.
    Always uses the light palette.
    """
    max_width = IMAGE_WIDTH - 2 * CARD_INSET
    width = min(
        max_width,
        max(ERROR_MIN_WIDTH, estimate_width(message, ERROR_BODY_SIZE) + 2 * ERROR_PADDING),
    )
    header_height = _line_height(ERROR_HEADER_SIZE) + 16
    body_line = _line_height(ERROR_BODY_SIZE)
    # the whole card stays inside the canvas inset
    max_lines = (IMAGE_HEIGHT - 2 * CARD_INSET - header_height - 2 * ERROR_PADDING) // body_line
    lines = textwrap.wrap(
        message,
        width=chars_per_line(width - 2 * ERROR_PADDING, ERROR_BODY_SIZE),
        max_lines=max_lines,
        placeholder=" …",
    ) or [""]
    body_height = len(lines) * body_line + 2 * ERROR_PADDING
    height = header_height + body_height

    x = (IMAGE_WIDTH - width) // 2
    y = (IMAGE_HEIGHT - height) // 2

    header = box(
        x, y, width, header_height,
        style=Style(
            background=tokens.ERROR_ACCENT,
            radius=ERROR_RADIUS,
            rounded_corners=(True, True, False, False),
        ),
        children=[text(
            x + ERROR_PADDING, y + 8, width - 2 * ERROR_PADDING, _line_height(ERROR_HEADER_SIZE),
            runs=[TextRun(text="Error")],
            style=Style(color=tokens.ERROR_HEADER_TEXT, font_size=ERROR_HEADER_SIZE),
            name="error-title",
        )],
        name="error-header",
    )

    body_y = y + header_height
    body = box(
        x, body_y, width, body_height,
        style=Style(
            background=tokens.ERROR_BODY_BACKGROUND,
            border_color=tokens.ERROR_ACCENT,
            border_width=1,
            radius=ERROR_RADIUS,
            rounded_corners=(False, False, True, True),
        ),
        children=[
            text(
                x + ERROR_PADDING, body_y + ERROR_PADDING + i * body_line,
                width - 2 * ERROR_PADDING, body_line,
                runs=[TextRun(text=line)],
                style=Style(color=tokens.ERROR_BODY_TEXT, font_size=ERROR_BODY_SIZE),
            )
            for i, line in enumerate(lines)
        ],
        name="error-body",
    )

    return box(
        0, 0, IMAGE_WIDTH, IMAGE_HEIGHT,
        style=Style(background=tokens.ERROR_CANVAS),
        children=[header, body],
        name="canvas",
    )
