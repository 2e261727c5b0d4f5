"""Data model for parsed IGSN CSV imports.

All records are frozen dataclasses. Sequences are stored as tuples and the raw
row fields as read-only mappings, so that a returned ImportBatch cannot be
modified by its consumers and two batches built from the same input compare
equal.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class Contributor:
    """A contributor taken from the row-wide contributor columns."""
    name: str
    type: str
    identifier: Optional[str] = None
    identifier_type: Optional[str] = None


@dataclass(frozen=True)
class Creator:
    """The collector of a sample, used as the creator of the IGSN."""
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    orcid: Optional[str] = None
    affiliation: Optional[str] = None
    ror: Optional[str] = None

    @property
    def has_name(self) -> bool:
        """Return True if at least one name part is set."""
        return bool(self.given_name or self.family_name)


@dataclass(frozen=True)
class GeoLocation:
    """Sampling location of a specimen."""
    latitude: float
    longitude: float
    elevation: Optional[float] = None
    elevation_unit: Optional[str] = None
    place: Optional[str] = None


@dataclass(frozen=True)
class RelatedIdentifier:
    """Relation of the sample to another identified resource."""
    identifier: str
    type: str
    relation_type: str


@dataclass(frozen=True)
class FundingReference:
    """Funder of the sampling campaign."""
    name: str
    identifier: Optional[str] = None
    identifier_type: Optional[str] = None


@dataclass(frozen=True)
class Size:
    """
    Size specification of a sample.

    Built from the 'size' and 'size_unit' columns, e.g. size "0.9" with
    unit "Drilled Length [m]" becomes Size("0.9", unit="m", type="Drilled Length").
    """
    numeric_value: str
    unit: Optional[str] = None
    type: Optional[str] = None


@dataclass(frozen=True)
class DateRange:
    """Collection date range with partial dates (YYYY, YYYY-MM or YYYY-MM-DD)."""
    start: Optional[str] = None
    end: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.start is None and self.end is None


@dataclass(frozen=True)
class BatchError:
    """
    Batch-level problem that prevents any row from being parsed.

    Attributes:
        message: Human-readable message naming the offending column(s)
        row: Line the problem refers to (0 = whole file, 1 = header row)
    """
    message: str
    row: int = 0


@dataclass(frozen=True)
class RowWarning:
    """Non-fatal problem in a single data row."""
    row: int
    message: str
    field: Optional[str] = None


@dataclass(frozen=True)
class ParsedRow:
    """One data line of the CSV file with all extracted sub-entities."""
    row_number: int
    # Read-only mappings (MappingProxyType); left out of the hash
    fields: Mapping[str, str] = field(hash=False)
    multi_value_fields: Mapping[str, Tuple[str, ...]] = field(hash=False)
    contributors: Tuple[Contributor, ...] = ()
    creator: Optional[Creator] = None
    geo_location: Optional[GeoLocation] = None
    related_identifiers: Tuple[RelatedIdentifier, ...] = ()
    funding_references: Tuple[FundingReference, ...] = ()
    collection_dates: DateRange = field(default_factory=DateRange)
    sizes: Tuple[Size, ...] = ()

    def get(self, column: str, default: str = "") -> str:
        """
        Look up a raw field value by column name, ignoring case.

        Args:
            column: Column name as it appears in the header (any case)
            default: Value returned if the column does not exist

        Returns:
            The trimmed raw cell value
        """
        if column in self.fields:
            return self.fields[column]
        wanted = column.lower()
        for header, value in self.fields.items():
            if header.lower() == wanted:
                return value
        return default

    @property
    def igsn(self) -> str:
        return self.get("igsn")

    @property
    def title(self) -> str:
        return self.get("title")

    @property
    def name(self) -> str:
        return self.get("name")


@dataclass(frozen=True)
class ImportBatch:
    """Result of parsing one CSV file."""
    headers: Tuple[str, ...] = ()
    rows: Tuple[ParsedRow, ...] = ()
    errors: Tuple[BatchError, ...] = ()
    warnings: Tuple[RowWarning, ...] = ()

    @property
    def has_errors(self) -> bool:
        """Return True if the batch was rejected."""
        return len(self.errors) > 0

    @property
    def row_count(self) -> int:
        return len(self.rows)
