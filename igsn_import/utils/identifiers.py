"""Normalization and validation of persistent identifiers (ORCID, ROR, funder IDs)."""

import logging
import re
from typing import Optional


logger = logging.getLogger(__name__)


ORCID_BASE_URL = "https://orcid.org/"

# Bare ORCID iD: four groups of four characters, checksum may be X
BARE_ORCID_PATTERN = re.compile(r'^\d{4}-\d{4}-\d{4}-\d{3}[\dX]$', re.IGNORECASE)

# ORCID iD with optional URL prefix (must start with 0000)
ORCID_PATTERN = re.compile(
    r'^(?:https?://orcid\.org/)?'  # Optional URL prefix
    r'(0000-\d{4}-\d{4}-\d{3}[0-9X])$',  # ORCID format (must start with 0000)
    re.IGNORECASE
)

# Funder identifier types as used by DataCite, checked in order
FUNDER_IDENTIFIER_PATTERNS = [
    ("Crossref Funder ID", re.compile(r'^(?:https?://(?:dx\.)?doi\.org/)?10\.13039/\S+$', re.IGNORECASE)),
    ("ROR", re.compile(r'^https?://ror\.org/\S+$', re.IGNORECASE)),
    ("GRID", re.compile(r'^(?:https?://(?:www\.)?grid\.ac/institutes/)?grid\.\d+\.\w+$', re.IGNORECASE)),
    ("ISNI", re.compile(r'^(?:https?://(?:www\.)?isni\.org/isni/)?\d{15}[\dX]$', re.IGNORECASE)),
]


def _is_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


def normalize_orcid(raw: Optional[str]) -> Optional[str]:
    """
    Normalize an ORCID iD to its full URL form.

    Examples:
    - 0000-0001-2345-6789 -> https://orcid.org/0000-0001-2345-6789
    - https://orcid.org/0000-0001-2345-6789 -> unchanged

    Args:
        raw: ORCID as found in the CSV cell

    Returns:
        The ORCID URL, or None if the cell is empty
    """
    if raw is None:
        return None

    value = raw.strip()
    if not value:
        return None

    if _is_url(value):
        return value

    return f"{ORCID_BASE_URL}{value}"


def normalize_ror(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a ROR identifier.

    ROR values in the sample exports already arrive as full URLs, so only
    surrounding whitespace is removed.
    """
    if raw is None:
        return None

    value = raw.strip()
    return value or None


def normalize_identifier(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a generic identifier (URL, ORCID, ROR, DOI, IGSN).

    Full URLs are kept as they are. A bare ORCID iD is expanded to its URL,
    every other value is returned trimmed.

    Args:
        raw: Identifier as found in the CSV cell

    Returns:
        Normalized identifier, or None if the cell is empty
    """
    if raw is None:
        return None

    value = raw.strip()
    if not value:
        return None

    if _is_url(value):
        return value

    if BARE_ORCID_PATTERN.match(value):
        return f"{ORCID_BASE_URL}{value}"

    return value


def validate_orcid_format(orcid: Optional[str]) -> bool:
    """
    Validate ORCID format.

    A valid ORCID is a 16-character identifier (15 digits plus a checksum digit
    which can be 0-9 or X) separated by hyphens in groups of 4.
    Format: XXXX-XXXX-XXXX-XXXX or full URL: https://orcid.org/XXXX-XXXX-XXXX-XXXX

    Examples:
    - Valid: 0000-0001-5000-0007
    - Valid: https://orcid.org/0000-0001-5000-0007
    - Invalid: 0000-0001-5000 (too short)

    Args:
        orcid: ORCID string to validate

    Returns:
        True if ORCID format is valid, False otherwise
    """
    if not orcid:
        return False

    return bool(ORCID_PATTERN.match(orcid.strip()))


def detect_funder_identifier_type(identifier: Optional[str]) -> Optional[str]:
    """
    Detect the DataCite funderIdentifierType of a funder identifier.

    Args:
        identifier: Normalized funder identifier

    Returns:
        "Crossref Funder ID", "ROR", "GRID", "ISNI" or "Other";
        None if no identifier is given
    """
    if not identifier:
        return None

    for identifier_type, pattern in FUNDER_IDENTIFIER_PATTERNS:
        if pattern.match(identifier):
            return identifier_type

    logger.debug(f"Unknown funder identifier scheme: {identifier}")
    return "Other"
