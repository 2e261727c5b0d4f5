"""Tests for the sub-entity extractors of a CSV row."""

from igsn_import.models import Contributor, FundingReference, GeoLocation, RelatedIdentifier, Size
from igsn_import.utils.row_extractors import (
    build_place,
    extract_contributors,
    extract_funding_references,
    extract_geo_location,
    extract_related_identifiers,
    extract_sizes,
    parse_float,
    parse_unit_string,
)


class TestExtractContributors:
    """Test suite for contributor extraction."""

    def test_contributors_are_transposed(self):
        """Test that the parallel lists become one contributor each."""
        fields = {
            'contributor': "Jane Roe; Max Mustermann",
            'contributorType': "DataCollector; ProjectLeader",
            'identifier': "0000-0002-1825-0097",
            'identifierType': "ORCID",
        }

        contributors, warnings = extract_contributors(fields, row_number=2)

        assert contributors == [
            Contributor(
                name="Jane Roe",
                type="DataCollector",
                identifier="https://orcid.org/0000-0002-1825-0097",
                identifier_type="ORCID",
            ),
            Contributor(name="Max Mustermann", type="ProjectLeader"),
        ]
        assert warnings == []

    def test_missing_type_defaults_to_other(self):
        """Test the default contributor type."""
        contributors, _ = extract_contributors({'contributor': "Jane Roe"})

        assert contributors[0].type == "Other"

    def test_lowercase_identifier_type_column(self):
        """Test the lowercase identifiertype header variant."""
        fields = {'contributor': "Jane Roe", 'identifiertype': "ORCID"}

        contributors, _ = extract_contributors(fields)

        assert contributors[0].identifier_type == "ORCID"

    def test_surplus_values_produce_warning(self):
        """Test that more types than names are reported."""
        fields = {'contributor': "Jane Roe", 'contributorType': "Editor; Other"}

        contributors, warnings = extract_contributors(fields, row_number=3)

        assert len(contributors) == 1
        assert len(warnings) == 1
        assert warnings[0].row == 3
        assert warnings[0].field == 'contributorType'

    def test_blank_identifier_stays_with_its_contributor(self):
        """Test that an empty identifier slot does not shift later identifiers."""
        fields = {'contributor': "A; B", 'identifier': "; 0000-0001-2345-6789"}

        contributors, _ = extract_contributors(fields)

        assert contributors[0].identifier is None
        assert contributors[1].identifier == "https://orcid.org/0000-0001-2345-6789"

    def test_no_contributor_column(self):
        """Test a row without contributors."""
        contributors, warnings = extract_contributors({'igsn': 'A'})

        assert contributors == []
        assert warnings == []


class TestExtractRelatedIdentifiers:
    """Test suite for related identifier extraction."""

    def test_related_identifiers_with_defaults(self):
        """Test transposition and default types."""
        fields = {
            'relatedIdentifier': "10.5880/GFZ.1.2024.001; 10.1000/xyz",
            'relatedIdentifierType': "DOI",
            'relationtype': "IsCitedBy",
        }

        related, _ = extract_related_identifiers(fields)

        assert related == [
            RelatedIdentifier("10.5880/GFZ.1.2024.001", "DOI", "IsCitedBy"),
            RelatedIdentifier("10.1000/xyz", "DOI", "IsRelatedTo"),
        ]

    def test_parent_igsn_is_first(self):
        """Test that parent_igsn becomes an IsPartOf relation."""
        fields = {
            'parent_igsn': "ICDP5068EH00001",
            'relatedIdentifier': "10.1000/xyz",
        }

        related, _ = extract_related_identifiers(fields)

        assert related[0] == RelatedIdentifier("ICDP5068EH00001", "IGSN", "IsPartOf")
        assert related[1].identifier == "10.1000/xyz"

    def test_lowercase_type_column(self):
        """Test the relatedidentifierType header variant."""
        fields = {'relatedIdentifier': "ICDP5068EH00001", 'relatedidentifierType': "IGSN"}

        related, _ = extract_related_identifiers(fields)

        assert related[0].type == "IGSN"

    def test_relation_type_camel_case_column(self):
        """Test the relationType header variant."""
        fields = {'relatedIdentifier': "10.1000/xyz", 'relationType': "IsCitedBy"}

        related, _ = extract_related_identifiers(fields)

        assert related[0].relation_type == "IsCitedBy"


class TestExtractFundingReferences:
    """Test suite for funding reference extraction."""

    def test_funders_with_detected_type(self):
        """Test funder names, identifiers and detected identifier types."""
        fields = {
            'funderName': "Deutsche Forschungsgemeinschaft; Helmholtz Association",
            'funderIdentifier': "https://doi.org/10.13039/501100001659",
        }

        funders, _ = extract_funding_references(fields)

        assert funders == [
            FundingReference(
                name="Deutsche Forschungsgemeinschaft",
                identifier="https://doi.org/10.13039/501100001659",
                identifier_type="Crossref Funder ID",
            ),
            FundingReference(name="Helmholtz Association"),
        ]


class TestExtractSizes:
    """Test suite for size extraction."""

    def test_sizes_with_units(self):
        """Test decomposition of size units."""
        fields = {'size': "0.9; 146", 'size_unit': "Drilled Length [m]; Core Diameter [mm]"}

        sizes, _ = extract_sizes(fields)

        assert sizes == [
            Size(numeric_value="0.9", unit="m", type="Drilled Length"),
            Size(numeric_value="146", unit="mm", type="Core Diameter"),
        ]

    def test_parse_unit_string(self):
        """Test unit strings with and without brackets."""
        assert parse_unit_string("Drilled Length [m]") == ("Drilled Length", "m")
        assert parse_unit_string("Core Diameter") == ("Core Diameter", None)
        assert parse_unit_string("") == (None, None)
        assert parse_unit_string(None) == (None, None)


class TestExtractGeoLocation:
    """Test suite for geo location extraction."""

    def test_full_geo_location(self):
        """Test a location with all optional values."""
        fields = {
            'latitude': "52.38",
            'longitude': "13.06",
            'elevation': "81.5",
            'elevationUnit': "m",
            'locality': "Telegrafenberg",
        }

        geo_location, warnings = extract_geo_location(fields)

        assert geo_location == GeoLocation(
            latitude=52.38,
            longitude=13.06,
            elevation=81.5,
            elevation_unit="m",
            place="Telegrafenberg",
        )
        assert warnings == []

    def test_location_name_fallback(self):
        """Test that location_name is used without locality."""
        fields = {'latitude': "1", 'longitude': "2", 'location_name': "Potsdam"}

        geo_location, _ = extract_geo_location(fields)

        assert geo_location.place == "Potsdam"
        assert geo_location.elevation is None

    def test_locality_preferred_over_location_name(self):
        """Test place precedence."""
        fields = {'latitude': "1", 'longitude': "2", 'locality': "A", 'location_name': "B"}

        geo_location, _ = extract_geo_location(fields)

        assert geo_location.place == "A"

    def test_missing_coordinates(self):
        """Test that no location is built without coordinates."""
        geo_location, warnings = extract_geo_location({'locality': "Telegrafenberg"})

        assert geo_location is None
        assert warnings == []

    def test_single_coordinate_is_not_enough(self):
        """Test that latitude alone does not give a location."""
        geo_location, _ = extract_geo_location({'latitude': "52.38", 'longitude': ""})

        assert geo_location is None

    def test_invalid_latitude(self):
        """Test that an invalid latitude drops the location and is reported."""
        geo_location, warnings = extract_geo_location({'latitude': "north", 'longitude': "13.06"}, row_number=4)

        assert geo_location is None
        assert len(warnings) == 1
        assert warnings[0].field == 'latitude'
        assert warnings[0].row == 4

    def test_invalid_elevation_only_drops_elevation(self):
        """Test that an invalid elevation keeps the coordinates."""
        fields = {'latitude': "52.38", 'longitude': "13.06", 'elevation': "high"}

        geo_location, warnings = extract_geo_location(fields)

        assert geo_location.latitude == 52.38
        assert geo_location.elevation is None
        assert warnings[0].field == 'elevation'

    def test_build_place_with_details(self):
        """Test that city and country are appended to the place."""
        fields = {'locality': "Telegrafenberg", 'city': "Potsdam", 'country': "Germany"}

        assert build_place(fields) == "Telegrafenberg, Potsdam, Germany"
        assert build_place({}) is None

    def test_parse_float(self):
        """Test number parsing."""
        assert parse_float("-12.5") == -12.5
        assert parse_float(" 7 ") == 7.0
        assert parse_float("") is None
        assert parse_float("abc") is None
        assert parse_float("nan") is None
        assert parse_float("inf") is None
        assert parse_float("1_000") is None
