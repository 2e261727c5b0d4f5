"""Parser for pipe-delimited IGSN sample metadata CSV files."""

import csv
import logging
from types import MappingProxyType
from typing import Callable, Dict, List, Optional, Tuple

from igsn_import.models import BatchError, DateRange, ImportBatch, ParsedRow, RowWarning
from igsn_import.utils.creator_parser import extract_creator
from igsn_import.utils.date_parser import parse_collection_dates
from igsn_import.utils.multi_value import MULTI_VALUE_DELIMITERS, first_non_empty, lookup_field, split_field
from igsn_import.utils.row_extractors import (
    extract_contributors,
    extract_funding_references,
    extract_geo_location,
    extract_related_identifiers,
    extract_sizes,
)


logger = logging.getLogger(__name__)


class CSVLineError(Exception):
    """Raised when a single CSV line cannot be tokenized."""
    pass


class IgsnCsvParser:
    """
    Parser for IGSN sample metadata exports.

    The file is pipe-delimited (|), the first line holds the column names and
    every further non-blank line describes one sample. The parser never
    raises on bad content: batch-level problems are returned as
    BatchError records (and no rows), row-level problems as RowWarning
    records next to the rows.
    """

    DELIMITER = '|'

    # Columns that must exist in the header and should be filled in every row
    REQUIRED_FIELDS = ['igsn', 'title', 'name']

    # Columns that should be filled - warnings issued if empty
    RECOMMENDED_FIELDS = ['latitude', 'longitude', 'collector', 'collection_start_date']

    @staticmethod
    def split_lines(csv_text: str) -> List[str]:
        """Split text into lines, accepting \\r\\n, \\r and \\n line endings."""
        return csv_text.replace('\r\n', '\n').replace('\r', '\n').split('\n')

    @staticmethod
    def tokenize_line(line: str) -> List[str]:
        """
        Split one line into trimmed cells.

        Cells may be enclosed in double quotes to contain the delimiter.

        Raises:
            CSVLineError: If the line is not valid CSV
        """
        try:
            cells = next(csv.reader([line], delimiter=IgsnCsvParser.DELIMITER, quotechar='"'), [])
        except csv.Error as e:
            raise CSVLineError(str(e)) from e

        return [cell.strip() for cell in cells]

    @staticmethod
    def get_missing_required_headers(headers: List[str]) -> List[str]:
        """Return the required columns not present in headers (case-insensitive)."""
        normalized_headers = {header.lower() for header in headers}
        return [
            field for field in IgsnCsvParser.REQUIRED_FIELDS
            if field.lower() not in normalized_headers
        ]

    @staticmethod
    def validate_headers(lines: List[str]) -> Tuple[List[str], Optional[BatchError]]:
        """
        Parse and validate the header line.

        Args:
            lines: All lines of the file

        Returns:
            Tuple of (headers, error); error is None if rows can be parsed
        """
        if not lines or not any(line.strip() for line in lines):
            return [], BatchError(message="CSV-Datei ist leer.", row=0)

        header_line = lines[0].lstrip('\ufeff')
        try:
            headers = IgsnCsvParser.tokenize_line(header_line)
        except CSVLineError as e:
            return [], BatchError(message=f"Header-Zeile konnte nicht gelesen werden: {e}", row=1)

        if not any(line.strip() for line in lines[1:]):
            return headers, BatchError(
                message=(
                    "CSV-Datei muss eine Header-Zeile und mindestens eine Datenzeile enthalten. "
                    f"Pflichtspalten: {', '.join(IgsnCsvParser.REQUIRED_FIELDS)}"
                ),
                row=0
            )

        missing_headers = IgsnCsvParser.get_missing_required_headers(headers)
        if missing_headers:
            return headers, BatchError(
                message=(
                    f"Fehlende Pflichtspalten: {', '.join(missing_headers)}. "
                    f"Gefunden: {', '.join(h for h in headers if h)}"
                ),
                row=1
            )

        return headers, None

    @staticmethod
    def build_fields(headers: List[str], cells: List[str]) -> Dict[str, str]:
        """
        Map header names to cells by position.

        Missing cells become empty strings, surplus cells are ignored.
        """
        fields = {}
        for index, header in enumerate(headers):
            if not header:
                continue
            fields[header] = cells[index] if index < len(cells) else ''
        return fields

    @staticmethod
    def _check_fields(fields: Dict[str, str], row_number: int) -> List[RowWarning]:
        """Warn about empty required and recommended fields."""
        warnings = []

        for field in IgsnCsvParser.REQUIRED_FIELDS:
            if not first_non_empty(fields, field):
                warnings.append(RowWarning(
                    row=row_number,
                    field=field,
                    message=f"Pflichtfeld '{field}' ist leer."
                ))

        for field in IgsnCsvParser.RECOMMENDED_FIELDS:
            if not first_non_empty(fields, field):
                warnings.append(RowWarning(
                    row=row_number,
                    field=field,
                    message=f"Empfohlenes Feld '{field}' ist leer."
                ))

        return warnings

    @staticmethod
    def _parse_dates(fields: Dict[str, str], row_number: int) -> Tuple[DateRange, List[RowWarning]]:
        """Parse collection_start_date/collection_end_date, warning about values that are no dates."""
        warnings = []
        raw_start = first_non_empty(fields, 'collection_start_date')
        raw_end = first_non_empty(fields, 'collection_end_date')
        date_range = parse_collection_dates(raw_start, raw_end)

        for column, raw, value in (
            ('collection_start_date', raw_start, date_range.start),
            ('collection_end_date', raw_end, date_range.end),
        ):
            if raw is not None and value is None:
                logger.warning(f"Row {row_number}: Unrecognized date in '{column}': {raw}")
                warnings.append(RowWarning(
                    row=row_number,
                    field=column,
                    message=f"Datum '{raw}' in Spalte '{column}' wurde nicht erkannt."
                ))

        return date_range, warnings

    @staticmethod
    def parse_row(line: str, headers: List[str], row_number: int) -> Tuple[ParsedRow, List[RowWarning]]:
        """
        Parse a single data line.

        Args:
            line: Raw data line
            headers: Column names from the header line
            row_number: Line number in the file (header is row 1)

        Returns:
            Tuple of (ParsedRow, warnings)

        Raises:
            CSVLineError: If the line is not valid CSV
        """
        cells = IgsnCsvParser.tokenize_line(line)
        if len(cells) > len(headers):
            logger.debug(f"Row {row_number}: ignoring {len(cells) - len(headers)} surplus cell(s)")

        fields = IgsnCsvParser.build_fields(headers, cells)
        warnings = IgsnCsvParser._check_fields(fields, row_number)

        multi_value_fields = {
            field: split_field(field, lookup_field(fields, field))
            for field in MULTI_VALUE_DELIMITERS
        }

        contributors, contributor_warnings = extract_contributors(fields, row_number)
        related_identifiers, related_warnings = extract_related_identifiers(fields, row_number)
        funding_references, funding_warnings = extract_funding_references(fields, row_number)
        sizes, size_warnings = extract_sizes(fields, row_number)
        creator, creator_warnings = extract_creator(fields, row_number)
        geo_location, geo_warnings = extract_geo_location(fields, row_number)
        collection_dates, date_warnings = IgsnCsvParser._parse_dates(fields, row_number)

        for extra in (contributor_warnings, related_warnings, funding_warnings, size_warnings,
                      creator_warnings, geo_warnings, date_warnings):
            warnings.extend(extra)

        row = ParsedRow(
            row_number=row_number,
            fields=MappingProxyType(fields),
            multi_value_fields=MappingProxyType(multi_value_fields),
            contributors=tuple(contributors),
            creator=creator,
            geo_location=geo_location,
            related_identifiers=tuple(related_identifiers),
            funding_references=tuple(funding_references),
            collection_dates=collection_dates,
            sizes=tuple(sizes),
        )

        logger.debug(f"Parsed row {row_number}: {row.igsn}")
        return row, warnings

    @staticmethod
    def parse(
        csv_text: str,
        progress_callback: Optional[Callable[[int, int], None]] = None,
        should_stop: Optional[Callable[[], bool]] = None
    ) -> ImportBatch:
        """
        Parse the content of an IGSN CSV file.

        Expected format:
        - Header row: igsn|title|name|... (further columns optional)
        - Data rows: one sample per line, cells separated by |

        Args:
            csv_text: Already-read file content
            progress_callback: Optional callback(current, total) called after each data line
            should_stop: Optional callable; parsing ends early when it returns True

        Returns:
            ImportBatch with headers, rows, errors and warnings. If errors is
            non-empty, rows is empty.

        Raises:
            TypeError: If csv_text is not a string
        """
        if not isinstance(csv_text, str):
            raise TypeError(f"csv_text must be str, got {type(csv_text).__name__}")

        lines = IgsnCsvParser.split_lines(csv_text)
        headers, error = IgsnCsvParser.validate_headers(lines)

        if error is not None:
            logger.warning(f"IGSN CSV rejected: {error.message}")
            return ImportBatch(headers=tuple(headers), errors=(error,))

        rows = []
        warnings = []
        total = len(lines) - 1

        # Data rows start at line 2 (line 1 is the header)
        for row_number, line in enumerate(lines[1:], start=2):
            if should_stop is not None and should_stop():
                logger.info(f"IGSN CSV parsing stopped at row {row_number}")
                break

            if line.strip():
                try:
                    row, row_warnings = IgsnCsvParser.parse_row(line, headers, row_number)
                except CSVLineError as e:
                    logger.warning(f"Row {row_number}: unreadable line skipped: {e}")
                    warnings.append(RowWarning(
                        row=row_number,
                        message=f"Zeile {row_number} konnte nicht gelesen werden und wird übersprungen: {e}"
                    ))
                else:
                    rows.append(row)
                    warnings.extend(row_warnings)

            if progress_callback:
                progress_callback(row_number - 1, total)

        logger.info(
            f"Successfully parsed {len(rows)} IGSN rows with "
            f"{len(warnings)} warnings from CSV"
        )

        return ImportBatch(
            headers=tuple(headers),
            rows=tuple(rows),
            warnings=tuple(warnings),
        )


def parse(csv_text: str) -> ImportBatch:
    """Parse IGSN CSV text, see IgsnCsvParser.parse."""
    return IgsnCsvParser.parse(csv_text)
