"""
Date helpers for calendar keys and Czech display formats.

Events store their dates as local ``YYYY-MM-DD`` keys. Keys are always built
from the local calendar fields of a date, never through a UTC conversion, so
a date picked late in the evening does not slide to the next day.
"""

from datetime import date, datetime
from typing import Optional, Union

MONTH_NAMES = [
    "Leden", "Únor", "Březen", "Duben", "Květen", "Červen",
    "Červenec", "Srpen", "Září", "Říjen", "Listopad", "Prosinec",
]

DateLike = Union[date, datetime]


def to_local_date_key(value: Optional[DateLike]) -> str:
    """Return ``YYYY-MM-DD`` built from the local year, month and day of ``value``"""
    if value is None:
        return ""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_local_date_key(key: str) -> date:
    """Parse a ``YYYY-MM-DD`` key into a date. Raises ValueError on malformed input."""
    year, month, day = key.split("-")
    return date(int(year), int(month), int(day))


def is_valid_date_key(key: Optional[str]) -> bool:
    if not key:
        return False
    try:
        parse_local_date_key(key)
    except ValueError:
        return False
    return True


def format_display_date(key: Optional[str]) -> str:
    """Render ``2025-01-05`` as ``05. 01. 2025``"""
    if not key:
        return ""

    parts = key.split("-")
    if len(parts) != 3:
        return key

    year, month, day = parts
    return f"{day}. {month}. {year}"


def format_date_range(start_key: Optional[str], end_key: Optional[str] = None) -> str:
    if not end_key or end_key == start_key:
        return format_display_date(start_key)
    return f"{format_display_date(start_key)} - {format_display_date(end_key)}"


def month_year_key(value: Union[DateLike, str]) -> str:
    """Return the ``YYYY-MM`` grouping key of a date or date key"""
    if isinstance(value, str):
        return value[:7]
    return f"{value.year:04d}-{value.month:02d}"


def format_month_heading(month_key: str, reference_year: Optional[int] = None) -> str:
    """Month name for the current year, month name and year otherwise"""
    if reference_year is None:
        reference_year = date.today().year

    year, month = month_key.split("-")[:2]
    name = MONTH_NAMES[int(month) - 1]

    if int(year) == reference_year:
        return name
    return f"{name} {year}"


def month_number(value: Union[int, str]) -> Optional[int]:
    """Resolve a month filter value, either 1-12 or a Czech month name, to a month number"""
    if isinstance(value, int):
        return value if 1 <= value <= 12 else None

    text = value.strip()
    if text.isdigit():
        return month_number(int(text))

    lowered = [name.lower() for name in MONTH_NAMES]
    if text.lower() in lowered:
        return lowered.index(text.lower()) + 1
    return None
