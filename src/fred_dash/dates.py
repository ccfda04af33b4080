"""Calendar date helpers that never touch timezones."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from .errors import ParseError

API_DATE_FORMAT = "%Y-%m-%d"
_API_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def today() -> date:
    """Return the local calendar date (patched in tests)."""
    return date.today()


def parse_local_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a naive calendar date."""
    if not isinstance(value, str) or not _API_DATE_PATTERN.fullmatch(value.strip()):
        raise ParseError(f"Invalid date {value!r}; expected YYYY-MM-DD.")
    try:
        return datetime.strptime(value.strip(), API_DATE_FORMAT).date()
    except ValueError as exc:
        raise ParseError(f"Invalid date {value!r}; expected YYYY-MM-DD.") from exc


def format_date_for_api(value: date) -> str:
    """Render a date the way the FRED query parameters expect it."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def format_display_date(value: date) -> str:
    """Render a date as ``MM/DD/YYYY`` for cards and headers."""
    return f"{value.month:02d}/{value.day:02d}/{value.year:04d}"


def lookback_start(end: date, days: int) -> date:
    """Return the first day of a window that ends at ``end`` and spans ``days``."""
    return end - timedelta(days=days)


def one_year_prior(value: date) -> date:
    """Return the same calendar day one year earlier.

    February 29 has no counterpart in the previous year and overflows to
    March 1, which keeps the anchor on or after the anniversary.
    """
    try:
        return value.replace(year=value.year - 1)
    except ValueError:
        return date(value.year - 1, 3, 1)


__all__ = [
    "API_DATE_FORMAT",
    "format_date_for_api",
    "format_display_date",
    "lookback_start",
    "one_year_prior",
    "parse_local_date",
    "today",
]
