"""Tests for multi-value splitting and row-wide list transposition."""

import pytest

from igsn_import.utils.multi_value import (
    first_non_empty,
    lookup_field,
    split_field,
    split_multi_value,
    split_positional,
    transpose_columns,
)


class TestSplitMultiValue:
    """Test suite for multi-value cell splitting."""

    def test_sample_other_names_split_on_semicolon(self):
        """Test the semicolon-delimited alias field."""
        result = split_field('sample_other_names', "Alias 1; Alias 2; Alias 3")

        assert result == ("Alias 1", "Alias 2", "Alias 3")

    def test_geological_fields_split_on_comma(self):
        """Test the comma-delimited geological fields."""
        assert split_field('geological_age', "Jurassic, Cretaceous") == ("Jurassic", "Cretaceous")
        assert split_field('geological_unit', "Unit A,Unit B") == ("Unit A", "Unit B")

    def test_comma_is_kept_in_semicolon_field(self):
        """Test that only the declared delimiter splits."""
        assert split_field('sample_other_names', "Core 1, top; Core 1, bottom") == (
            "Core 1, top",
            "Core 1, bottom",
        )

    def test_empty_tokens_are_dropped(self):
        """Test that empty tokens never appear in the result."""
        assert split_multi_value(";A;; ;B;", ';') == ("A", "B")

    def test_empty_cell_yields_empty_tuple(self):
        """Test that empty or missing cells give an empty sequence."""
        for value in ["", None, "  ", ";;"]:
            assert split_field('sample_other_names', value) == ()

    def test_unknown_field_raises(self):
        """Test that only declared multi-value fields can be split by name."""
        with pytest.raises(KeyError):
            split_field('title', "a; b")


class TestLookupField:
    """Test suite for column lookup."""

    def test_exact_match(self):
        """Test lookup of an existing column."""
        assert lookup_field({'igsn': 'A'}, 'igsn') == 'A'

    def test_case_insensitive_match(self):
        """Test that column names are compared ignoring case."""
        assert lookup_field({'IGSN': 'A'}, 'igsn') == 'A'
        assert lookup_field({'relatedidentifierType': 'DOI'}, 'relatedIdentifierType') == 'DOI'

    def test_alias_order(self):
        """Test that the first existing alias is used."""
        fields = {'collector_identifier': 'B', 'orcid': 'A'}
        assert lookup_field(fields, 'orcid', 'collector_identifier') == 'A'

    def test_missing_column(self):
        """Test that a missing column yields None."""
        assert lookup_field({'igsn': 'A'}, 'title') is None

    def test_first_non_empty_skips_empty_columns(self):
        """Test that empty columns fall through to the next alias."""
        fields = {'orcid': '  ', 'collector_identifier': '0000-0001-2345-6789'}
        assert first_non_empty(fields, 'orcid', 'collector_identifier') == '0000-0001-2345-6789'
        assert first_non_empty(fields, 'orcid') is None


class TestTransposeColumns:
    """Test suite for row-wide list transposition."""

    COLUMNS = {
        'name': 'contributor',
        'type': 'contributorType',
        'identifier': 'identifier',
    }

    def test_equal_length_lists(self):
        """Test positional zipping of lists with equal length."""
        fields = {
            'contributor': "Jane Roe; Max Mustermann",
            'contributorType': "DataCollector; ProjectLeader",
            'identifier': "0000-0002-1825-0097; 0000-0001-5000-0007",
        }

        records, overflow = transpose_columns(fields, self.COLUMNS, 'name')

        assert records == [
            {'name': "Jane Roe", 'type': "DataCollector", 'identifier': "0000-0002-1825-0097"},
            {'name': "Max Mustermann", 'type': "ProjectLeader", 'identifier': "0000-0001-5000-0007"},
        ]
        assert overflow == []

    def test_shorter_lists_are_padded_with_none(self):
        """Test that missing positions become None."""
        fields = {'contributor': "A; B", 'contributorType': "Editor"}

        records, overflow = transpose_columns(fields, self.COLUMNS, 'name')

        assert records == [
            {'name': "A", 'type': "Editor", 'identifier': None},
            {'name': "B", 'type': None, 'identifier': None},
        ]
        assert overflow == []

    def test_longer_lists_are_reported(self):
        """Test that surplus values are reported and ignored."""
        fields = {'contributor': "A", 'contributorType': "Editor; Other"}

        records, overflow = transpose_columns(fields, self.COLUMNS, 'name')

        assert len(records) == 1
        assert overflow == ['type']

    def test_missing_anchor_column(self):
        """Test that no records are built without anchor values."""
        records, overflow = transpose_columns({'contributorType': "Editor"}, self.COLUMNS, 'name')

        assert records == []
        assert overflow == ['type']

    def test_blank_position_keeps_alignment(self):
        """Test that an empty value stays with its own record."""
        fields = {'contributor': "A; B", 'identifier': "; 0000-0001-2345-6789"}

        records, overflow = transpose_columns(fields, self.COLUMNS, 'name')

        assert records == [
            {'name': "A", 'type': None, 'identifier': None},
            {'name': "B", 'type': None, 'identifier': "0000-0001-2345-6789"},
        ]
        assert overflow == []

    def test_empty_anchor_position_is_skipped(self):
        """Test that a blank name drops its record but not the following ones."""
        fields = {'contributor': "A;; C", 'contributorType': "Editor; Other; Sponsor"}

        records, overflow = transpose_columns(fields, self.COLUMNS, 'name')

        assert [(r['name'], r['type']) for r in records] == [("A", "Editor"), ("C", "Sponsor")]
        assert overflow == []

    def test_split_positional(self):
        """Test positional splitting."""
        assert split_positional("; b;", ';') == (None, "b")
        assert split_positional("a;;c", ';') == ("a", None, "c")
        assert split_positional(" ; ", ';') == ()
        assert split_positional(None, ';') == ()
