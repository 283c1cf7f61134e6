# appcatalog/utils/date_utils.py

"""Helpers for the store release-date strings kept on database entries.

The Steam store reports release dates as display strings whose shape depends
on the store language ("21 Aug, 2012", "Aug 21, 2012", "21.08.2012", ...).
Only the year is needed for filtering.
"""

from __future__ import annotations

from datetime import datetime, timezone

__all__ = ["parse_release_year"]

# Tried in order; the first one that parses wins.
_RELEASE_DATE_FORMATS: list[str] = [
    "%d %b, %Y",
    "%b %d, %Y",
    "%d %B, %Y",
    "%B %d, %Y",
    "%d.%m.%Y",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%b %Y",
    "%B %Y",
]


def parse_release_year(date_str: str | None) -> int:
    """Extracts the year from a store release-date string.

    Accepted input:
        - Any of ``_RELEASE_DATE_FORMATS`` (English month names)
        - A bare year ("2004")
        - A raw Unix timestamp (numeric, > 9999)

    Args:
        date_str: The stored release date.

    Returns:
        The release year, or 0 when the string is empty or unparseable
        ("Coming soon", "Q4 2025", ...).
    """
    if not date_str or not date_str.strip():
        return 0

    date_str = date_str.strip()

    if date_str.isdigit():
        value = int(date_str)
        if value <= 9999:
            return value
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc).year
        except (OSError, OverflowError, ValueError):
            return 0

    for fmt in _RELEASE_DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).year
        except ValueError:
            continue

    return 0
