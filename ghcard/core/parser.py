"""BeautifulSoup-based HTML parser for GitHub contribution calendars."""

from bs4 import BeautifulSoup


# Attributes carried by every day cell of the contribution calendar
DATE_ATTR = "data-date"
LEVEL_ATTR = "data-level"


def parse_activity(html: str) -> list[dict]:
    """
    Extract raw day records from a profile page.

    Any element carrying both a date and a level attribute counts as a day
    cell, so both the legacy SVG calendar (``<rect>``) and the current table
    calendar (``<td>``) are picked up.

    Args:
        html: Raw HTML content of the profile page

    Returns:
        List of ``{"date_raw", "level_raw"}`` dicts in document order
    """
    if not html:
        return []

    soup = BeautifulSoup(html, "lxml")
    days = []
    for cell in soup.find_all(attrs={DATE_ATTR: True, LEVEL_ATTR: True}):
        days.append({
            "date_raw": cell.get(DATE_ATTR),
            "level_raw": cell.get(LEVEL_ATTR),
        })
    return days
