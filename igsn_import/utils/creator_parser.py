"""
Extraction of the sample collector (IGSN creator) from a CSV row.

The collector name may be given in two shapes:
1. Separate 'givenName'/'familyName' columns (curated, preferred)
2. A free-text 'collector' column, either "FamilyName, GivenName" or
   "GivenName FamilyName"

Each shape is handled by a small strategy function. The strategies are tried
in the order of NAME_STRATEGIES; the first one returning a result wins.
"""

import logging
from typing import Callable, List, Mapping, Optional, Tuple

from igsn_import.models import Creator, RowWarning
from igsn_import.utils.identifiers import normalize_orcid, normalize_ror, validate_orcid_format
from igsn_import.utils.multi_value import first_non_empty


logger = logging.getLogger(__name__)


# (given_name, family_name)
NameParts = Tuple[Optional[str], Optional[str]]


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def from_name_columns(fields: Mapping[str, str]) -> Optional[NameParts]:
    """Use the dedicated givenName/familyName columns if either is filled."""
    given_name = first_non_empty(fields, 'givenName')
    family_name = first_non_empty(fields, 'familyName')

    if given_name is None and family_name is None:
        return None

    return given_name, family_name


def split_comma_name(collector: str) -> Optional[NameParts]:
    """
    Parse "FamilyName, GivenName".

    Only the first comma separates the parts, so "Doe, John, Jr." yields
    given name "John, Jr.".
    """
    if ',' not in collector:
        return None

    family_name, given_name = collector.split(',', 1)
    return _clean(given_name), _clean(family_name)


def split_last_word_name(collector: str) -> Optional[NameParts]:
    """Parse "GivenName(s) FamilyName": the last word is the family name."""
    parts = collector.split()
    if len(parts) < 2:
        return None

    return ' '.join(parts[:-1]), parts[-1]


def single_token_name(collector: str) -> Optional[NameParts]:
    """A single word is taken as family name."""
    collector = collector.strip()
    if not collector:
        return None

    return None, collector


# Free-text strategies, tried in order
COLLECTOR_STRATEGIES: List[Callable[[str], Optional[NameParts]]] = [
    split_comma_name,
    split_last_word_name,
    single_token_name,
]


def parse_collector_name(collector: Optional[str]) -> NameParts:
    """
    Split a free-text collector name into given and family name.

    Examples:
    - "Doe, John" -> ("John", "Doe")
    - "John Paul Smith" -> ("John Paul", "Smith")
    - "Darwin" -> (None, "Darwin")
    - "" -> (None, None)

    Args:
        collector: Content of the 'collector' column

    Returns:
        Tuple of (given_name, family_name)
    """
    collector = _clean(collector)
    if collector is None:
        return None, None

    for strategy in COLLECTOR_STRATEGIES:
        result = strategy(collector)
        if result is not None:
            return result

    return None, None


def resolve_name(fields: Mapping[str, str]) -> NameParts:
    """Resolve the creator name from the structured columns or the collector column."""
    explicit = from_name_columns(fields)
    if explicit is not None:
        return explicit

    return parse_collector_name(first_non_empty(fields, 'collector'))


def extract_creator(fields: Mapping[str, str], row_number: int = 0) -> Tuple[Creator, List[RowWarning]]:
    """
    Build the creator of a row.

    Identifiers and affiliation do not depend on where the name came from:
    'orcid' is preferred over 'collector_identifier', 'ror' over
    'collector_affiliation_identifier' and 'affiliation' over
    'collector_affiliation'.

    Args:
        fields: Raw row fields (header -> cell)
        row_number: Row number used in warnings

    Returns:
        Tuple of (Creator, warnings)
    """
    warnings = []
    given_name, family_name = resolve_name(fields)

    raw_orcid = first_non_empty(fields, 'orcid', 'collector_identifier')
    orcid = normalize_orcid(raw_orcid)
    if orcid and not validate_orcid_format(orcid):
        logger.warning(f"Row {row_number}: Invalid ORCID format: {raw_orcid}")
        warnings.append(RowWarning(
            row=row_number,
            field='orcid',
            message=f"ORCID-Format möglicherweise ungültig: {raw_orcid}"
        ))

    creator = Creator(
        given_name=_clean(given_name),
        family_name=_clean(family_name),
        orcid=orcid,
        affiliation=first_non_empty(fields, 'affiliation', 'collector_affiliation'),
        ror=normalize_ror(first_non_empty(fields, 'ror', 'collector_affiliation_identifier')),
    )

    return creator, warnings
