"""Splitting of multi-value cells and transposition of row-wide parallel lists."""

from typing import Dict, List, Mapping, Optional, Tuple


# Delimiters of single-cell multi-value fields
MULTI_VALUE_DELIMITERS: Dict[str, str] = {
    'sample_other_names': ';',
    'geological_age': ',',
    'geological_unit': ',',
}

# Delimiter of row-wide parallel lists (contributors, related identifiers, funders, sizes)
LIST_DELIMITER = ';'


def split_multi_value(value: Optional[str], delimiter: str) -> Tuple[str, ...]:
    """
    Split a delimited cell into its values.

    Each value is trimmed and empty values are dropped; order is preserved.

    Args:
        value: Raw cell value (may be None)
        delimiter: Sub-delimiter, e.g. ';' or ','

    Returns:
        Tuple of non-empty values (empty tuple for an empty cell)
    """
    if not value or not delimiter:
        return ()

    return tuple(part.strip() for part in value.split(delimiter) if part.strip())


def split_field(field_name: str, value: Optional[str]) -> Tuple[str, ...]:
    """
    Split a multi-value field using the delimiter declared for it.

    Raises:
        KeyError: If field_name is not a declared multi-value field
    """
    return split_multi_value(value, MULTI_VALUE_DELIMITERS[field_name])


def lookup_field(fields: Mapping[str, str], *names: str) -> Optional[str]:
    """
    Find the first column of names that exists in fields.

    Column names are compared case-insensitively, an exact match wins.

    Returns:
        The cell value, or None if none of the columns exists
    """
    lowered = None
    for name in names:
        if name in fields:
            return fields[name]
        if lowered is None:
            lowered = {header.lower(): header for header in reversed(list(fields))}
        header = lowered.get(name.lower())
        if header is not None:
            return fields[header]
    return None


def first_non_empty(fields: Mapping[str, str], *names: str) -> Optional[str]:
    """Return the first non-empty (trimmed) value among the given columns."""
    for name in names:
        value = lookup_field(fields, name)
        if value is not None and value.strip():
            return value.strip()
    return None


def split_positional(value: Optional[str], delimiter: str) -> Tuple[Optional[str], ...]:
    """
    Split a delimited cell keeping the position of every value.

    Empty positions become None so that parallel lists stay aligned;
    trailing empty positions are dropped.

    Example:
        "; 0000-0001-2345-6789" -> (None, '0000-0001-2345-6789')
    """
    if not value:
        return ()

    parts = [part.strip() or None for part in value.split(delimiter)]
    while parts and parts[-1] is None:
        parts.pop()
    return tuple(parts)


def transpose_columns(
    fields: Mapping[str, str],
    columns: Mapping[str, str],
    anchor: str
) -> Tuple[List[Dict[str, Optional[str]]], List[str]]:
    """
    Zip parallel semicolon lists into one record per list position.

    Each declared column is split on ';' keeping empty positions. Record i
    takes value i of every column, or None if the column is missing, its
    list is shorter or its value at i is empty. The anchor column determines
    how many records are built; positions with an empty anchor are skipped.

    Example:
        contributor="A; B", contributorType="; Editor"
        -> [{'name': 'A', 'type': None}, {'name': 'B', 'type': 'Editor'}]

    Args:
        fields: Raw row fields (header -> cell)
        columns: Record key -> column name
        anchor: Record key whose list decides the record count

    Returns:
        Tuple of (records, keys of columns holding more values than the anchor)
    """
    lists = {
        key: split_positional(lookup_field(fields, column), LIST_DELIMITER)
        for key, column in columns.items()
    }

    count = len(lists[anchor])
    records = [
        {key: (values[i] if i < len(values) else None) for key, values in lists.items()}
        for i in range(count)
        if lists[anchor][i] is not None
    ]
    overflow = [key for key, values in lists.items() if key != anchor and len(values) > count]

    return records, overflow
