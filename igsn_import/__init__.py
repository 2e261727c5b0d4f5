"""IGSN Import - Bulk sample metadata import parser for IGSN registrations."""

from igsn_import.__version__ import __version__
from igsn_import.models import (
    BatchError,
    Contributor,
    Creator,
    DateRange,
    FundingReference,
    GeoLocation,
    ImportBatch,
    ParsedRow,
    RelatedIdentifier,
    RowWarning,
    Size,
)
from igsn_import.utils.igsn_csv_parser import IgsnCsvParser, parse

__all__ = [
    '__version__',
    'BatchError',
    'Contributor',
    'Creator',
    'DateRange',
    'FundingReference',
    'GeoLocation',
    'IgsnCsvParser',
    'ImportBatch',
    'ParsedRow',
    'RelatedIdentifier',
    'RowWarning',
    'Size',
    'parse',
]
