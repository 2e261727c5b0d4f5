"""Parser for collection dates of varying precision."""

import logging
import re
from datetime import datetime
from typing import Optional

from dateutil import parser as dateutil_parser

from igsn_import.models import DateRange


logger = logging.getLogger(__name__)


# Canonical precision levels, passed through unchanged
CANONICAL_DATE_PATTERNS = [
    re.compile(r'^\d{4}$'),              # YYYY
    re.compile(r'^\d{4}-\d{2}$'),        # YYYY-MM
    re.compile(r'^\d{4}-\d{2}-\d{2}$'),  # YYYY-MM-DD
]

# Two fillers differing in year, month and day. A free-text value that
# parses differently under them lacks one of these parts.
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def is_canonical_date(value: str) -> bool:
    """Return True if value is YYYY, YYYY-MM or YYYY-MM-DD."""
    return any(pattern.match(value) for pattern in CANONICAL_DATE_PATTERNS)


def normalize_date(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a single date value.

    Canonical partial dates are kept with their precision. Any other value is
    parsed as a free-text date (e.g. "January 15, 2024") and returned as
    YYYY-MM-DD. Free text must name year, month and day; "March 5" or
    "10:30" are rejected instead of being completed with made-up parts.

    Args:
        raw: Date string from the CSV cell

    Returns:
        Canonical date string, or None if the value is empty or not a date
    """
    if raw is None:
        return None

    value = raw.strip()
    if not value:
        return None

    if is_canonical_date(value):
        return value

    try:
        first, second = (dateutil_parser.parse(value, default=default) for default in _PARSE_DEFAULTS)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Could not parse date '{value}': {e}")
        return None

    if first.date() != second.date():
        logger.debug(f"Date '{value}' is incomplete")
        return None

    return f"{first.year:04d}-{first.month:02d}-{first.day:02d}"


def parse_collection_dates(start_raw: Optional[str], end_raw: Optional[str]) -> DateRange:
    """
    Parse a collection date range.

    Both sides are normalized independently, so mixed precision
    ("2024" / "2024-06-30") and open ranges (one side empty) are kept.

    Args:
        start_raw: Raw collection start date
        end_raw: Raw collection end date

    Returns:
        DateRange with normalized start and end
    """
    return DateRange(start=normalize_date(start_raw), end=normalize_date(end_raw))
