"""Extractors for the structured sub-entities of an IGSN CSV row."""

import logging
import math
import re
from typing import Dict, List, Mapping, Optional, Tuple

from igsn_import.models import (
    Contributor,
    FundingReference,
    GeoLocation,
    RelatedIdentifier,
    RowWarning,
    Size,
)
from igsn_import.utils.identifiers import detect_funder_identifier_type, normalize_identifier
from igsn_import.utils.multi_value import first_non_empty, transpose_columns


logger = logging.getLogger(__name__)


# Row-wide parallel lists: record key -> column name (matched ignoring case).
# The anchor key decides how many records a row yields.
ROW_WIDE_SCHEMAS: Dict[str, Dict[str, object]] = {
    'contributors': {
        'anchor': 'name',
        'columns': {
            'name': 'contributor',
            'type': 'contributorType',
            'identifier': 'identifier',
            'identifier_type': 'identifierType',
        },
    },
    'related_identifiers': {
        'anchor': 'identifier',
        'columns': {
            'identifier': 'relatedIdentifier',
            'type': 'relatedIdentifierType',
            'relation_type': 'relationtype',
        },
    },
    'funding_references': {
        'anchor': 'name',
        'columns': {
            'name': 'funderName',
            'identifier': 'funderIdentifier',
        },
    },
    'sizes': {
        'anchor': 'value',
        'columns': {
            'value': 'size',
            'unit': 'size_unit',
        },
    },
}

DEFAULT_CONTRIBUTOR_TYPE = "Other"
DEFAULT_RELATED_IDENTIFIER_TYPE = "DOI"
DEFAULT_RELATION_TYPE = "IsRelatedTo"

# "Drilled Length [m]" -> type "Drilled Length", unit "m"
UNIT_PATTERN = re.compile(r'^(.+?)\s*\[([^\]]+)\]$')

# Columns joined into the place description, after the primary location name
PLACE_DETAIL_COLUMNS = ('city', 'province', 'country', 'location_description')


def _transpose(
    entity: str,
    fields: Mapping[str, str],
    row_number: int,
    warnings: List[RowWarning]
) -> List[Dict[str, Optional[str]]]:
    """Transpose the columns of a ROW_WIDE_SCHEMAS entry and record length mismatches."""
    schema = ROW_WIDE_SCHEMAS[entity]
    columns: Mapping[str, str] = schema['columns']
    anchor_key: str = schema['anchor']

    records, overflow = transpose_columns(fields, columns, anchor_key)

    anchor_column = columns[anchor_key]
    for key in overflow:
        column = columns[key]
        logger.warning(f"Row {row_number}: '{column}' has more values than '{anchor_column}'")
        warnings.append(RowWarning(
            row=row_number,
            field=column,
            message=(
                f"Spalte '{column}' enthält mehr Werte als '{anchor_column}'. "
                "Überzählige Werte werden ignoriert."
            )
        ))

    return records


def extract_contributors(
    fields: Mapping[str, str],
    row_number: int = 0
) -> Tuple[List[Contributor], List[RowWarning]]:
    """
    Build contributors from the contributor/contributorType/identifier/identifierType lists.

    A missing type defaults to "Other"; identifiers are normalized.
    """
    warnings = []
    contributors = []

    for record in _transpose('contributors', fields, row_number, warnings):
        contributors.append(Contributor(
            name=record['name'],
            type=record['type'] or DEFAULT_CONTRIBUTOR_TYPE,
            identifier=normalize_identifier(record['identifier']),
            identifier_type=record['identifier_type'],
        ))

    return contributors, warnings


def extract_related_identifiers(
    fields: Mapping[str, str],
    row_number: int = 0
) -> Tuple[List[RelatedIdentifier], List[RowWarning]]:
    """
    Build related identifiers.

    A filled 'parent_igsn' column becomes the first related identifier
    (type IGSN, relation IsPartOf). Missing types default to DOI and
    IsRelatedTo.
    """
    warnings = []
    related = []

    parent_igsn = first_non_empty(fields, 'parent_igsn')
    if parent_igsn:
        related.append(RelatedIdentifier(identifier=parent_igsn, type="IGSN", relation_type="IsPartOf"))

    for record in _transpose('related_identifiers', fields, row_number, warnings):
        related.append(RelatedIdentifier(
            identifier=normalize_identifier(record['identifier']),
            type=record['type'] or DEFAULT_RELATED_IDENTIFIER_TYPE,
            relation_type=record['relation_type'] or DEFAULT_RELATION_TYPE,
        ))

    return related, warnings


def extract_funding_references(
    fields: Mapping[str, str],
    row_number: int = 0
) -> Tuple[List[FundingReference], List[RowWarning]]:
    """Build funding references; the identifier type is detected from the identifier."""
    warnings = []
    funders = []

    for record in _transpose('funding_references', fields, row_number, warnings):
        identifier = normalize_identifier(record['identifier'])
        funders.append(FundingReference(
            name=record['name'],
            identifier=identifier,
            identifier_type=detect_funder_identifier_type(identifier),
        ))

    return funders, warnings


def parse_unit_string(unit_string: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a size unit like "Drilled Length [m]" into type and unit.

    Returns:
        Tuple of (type, unit); without brackets the whole string is the type
    """
    if not unit_string or not unit_string.strip():
        return None, None

    unit_string = unit_string.strip()
    match = UNIT_PATTERN.match(unit_string)
    if match:
        return match.group(1).strip(), match.group(2).strip()

    return unit_string, None


def extract_sizes(
    fields: Mapping[str, str],
    row_number: int = 0
) -> Tuple[List[Size], List[RowWarning]]:
    """Build size specifications from the 'size' and 'size_unit' lists."""
    warnings = []
    sizes = []

    for record in _transpose('sizes', fields, row_number, warnings):
        size_type, unit = parse_unit_string(record['unit'])
        sizes.append(Size(numeric_value=record['value'], unit=unit, type=size_type))

    return sizes, warnings


def parse_float(value: Optional[str]) -> Optional[float]:
    """
    Parse a decimal number.

    Returns:
        The number, or None if the value is empty, not numeric or not finite
    """
    if value is None:
        return None

    value = value.strip()
    if not value or '_' in value:
        return None

    try:
        number = float(value)
    except ValueError:
        return None

    if not math.isfinite(number):
        return None

    return number


def _invalid_number_warning(row_number: int, column: str, value: str) -> RowWarning:
    logger.warning(f"Row {row_number}: '{column}' is not a number: {value}")
    return RowWarning(
        row=row_number,
        field=column,
        message=f"Wert '{value}' in Spalte '{column}' ist keine gültige Zahl."
    )


def build_place(fields: Mapping[str, str]) -> Optional[str]:
    """Combine locality (or location name) with the optional place detail columns."""
    parts = [first_non_empty(fields, 'locality', 'location_name', 'primary_location_name')]
    parts.extend(first_non_empty(fields, column) for column in PLACE_DETAIL_COLUMNS)

    parts = [part for part in parts if part]
    return ', '.join(parts) if parts else None


def extract_geo_location(
    fields: Mapping[str, str],
    row_number: int = 0
) -> Tuple[Optional[GeoLocation], List[RowWarning]]:
    """
    Build the geo location of a row.

    Latitude and longitude are both required. If either is missing or not a
    number, no GeoLocation is built; a value that is not a number is
    recorded as warning. An invalid elevation only drops the elevation.

    Args:
        fields: Raw row fields (header -> cell)
        row_number: Row number used in warnings

    Returns:
        Tuple of (GeoLocation or None, warnings)
    """
    warnings = []
    raw_latitude = first_non_empty(fields, 'latitude')
    raw_longitude = first_non_empty(fields, 'longitude')

    if raw_latitude is None and raw_longitude is None:
        return None, warnings

    latitude = parse_float(raw_latitude)
    longitude = parse_float(raw_longitude)

    # Empty coordinates are already reported as missing recommended fields
    for column, raw, number in (('latitude', raw_latitude, latitude), ('longitude', raw_longitude, longitude)):
        if raw is not None and number is None:
            warnings.append(_invalid_number_warning(row_number, column, raw))

    if latitude is None or longitude is None:
        return None, warnings

    raw_elevation = first_non_empty(fields, 'elevation')
    elevation = parse_float(raw_elevation)
    if raw_elevation is not None and elevation is None:
        warnings.append(_invalid_number_warning(row_number, 'elevation', raw_elevation))

    geo_location = GeoLocation(
        latitude=latitude,
        longitude=longitude,
        elevation=elevation,
        elevation_unit=first_non_empty(fields, 'elevationUnit', 'elevation_unit'),
        place=build_place(fields),
    )

    return geo_location, warnings
