"""Tests for the reference file parsers."""

import pytest

from errors import UpstreamError
from reference_data import (
    Coords,
    CountyName,
    pad_zip,
    parse_county_names,
    parse_zip_coords,
    parse_zip_county,
    read_reference_file,
)
from tests.conftest import COUNTY_ADJACENCY_TXT, ZCTA_CSV, ZIP_COUNTY_CSV


class TestPadZip:
    @pytest.mark.parametrize("raw,expected", [("1001", "01001"), ("501", "00501"), ("35801", "35801")])
    def test_pads_to_five(self, raw, expected):
        assert pad_zip(raw) == expected


class TestParseZipCounty:
    def test_header_is_skipped(self):
        assert "ZIP" not in parse_zip_county(ZIP_COUNTY_CSV)

    def test_first_mapping_wins(self):
        zip_to_fips = parse_zip_county(ZIP_COUNTY_CSV)
        assert zip_to_fips["35801"] == "01089"

    def test_zips_are_padded(self):
        zip_to_fips = parse_zip_county(ZIP_COUNTY_CSV)
        assert zip_to_fips["01001"] == "25013"
        assert "1001" not in zip_to_fips

    def test_preserves_file_order(self):
        zip_to_fips = parse_zip_county(ZIP_COUNTY_CSV)
        assert list(zip_to_fips) == ["35801", "35802", "35611", "35601", "01001", "99999"]

    def test_short_rows_skipped(self):
        assert parse_zip_county("ZIP,COUNTY\n35801\n35802,01089\n") == {"35802": "01089"}


class TestParseZipCoords:
    def test_parses_signed_coordinates(self):
        coords = parse_zip_coords(ZCTA_CSV)
        assert coords["35801"] == Coords(34.7251, -86.5667)

    def test_malformed_numbers_skipped(self):
        assert "35899" not in parse_zip_coords(ZCTA_CSV)

    def test_rows_with_fewer_than_nine_fields_skipped(self):
        assert "12345" not in parse_zip_coords(ZCTA_CSV)

    def test_non_finite_values_skipped(self):
        text = "header\n11111,1,2,3,4,5,6,nan,-86.0\n22222,1,2,3,4,5,6,34.0,inf\n"
        assert parse_zip_coords(text) == {}

    def test_header_only(self):
        assert parse_zip_coords("ZCTA5CE20,GEOID20\n") == {}


class TestParseCountyNames:
    def test_self_referential_rows_only(self):
        names = parse_county_names(COUNTY_ADJACENCY_TXT)
        assert names["01089"] == CountyName("Madison County", "AL")
        assert names["01083"] == CountyName("Limestone County", "AL")
        assert names["25013"] == CountyName("Hampden County", "MA")

    def test_neighbor_only_county_has_no_name(self):
        assert "01103" not in parse_county_names(COUNTY_ADJACENCY_TXT)

    def test_unmatched_name_token_skipped(self):
        assert "99001" not in parse_county_names(COUNTY_ADJACENCY_TXT)

    def test_windows_line_endings(self):
        text = '"Madison County, AL"\t01089\t"Madison County, AL"\t01089\r\n'
        assert parse_county_names(text) == {"01089": CountyName("Madison County", "AL")}


class TestReadReferenceFile:
    def test_missing_file_is_upstream_error(self, tmp_path):
        with pytest.raises(UpstreamError, match="Could not read reference file"):
            read_reference_file(tmp_path / "missing.csv")

    def test_reads_text(self, tmp_path):
        path = tmp_path / "zips.csv"
        path.write_text("ZIP,COUNTY\n", encoding="utf-8")
        assert read_reference_file(path) == "ZIP,COUNTY\n"


class TestMalformedRows:
    def test_unbalanced_quote_costs_only_its_own_zip_row(self):
        text = 'ZIP,COUNTY\n35801,"01089\n35802,01089\n35611,01083\n'
        assert parse_zip_county(text) == {"35802": "01089", "35611": "01083"}

    def test_unbalanced_quote_costs_only_its_own_coordinate_row(self):
        text = (
            "ZCTA5CE20,GEOID20,CLASSFP20,MTFCC20,FUNCSTAT20,ALAND20,AWATER20,INTPTLAT20,INTPTLON20\n"
            '35899,35899,B5,G6350,S,1,1,"+34.0,-86.0\n'
            "35801,35801,B5,G6350,S,1,1,+34.7251000,-086.5667000\n"
        )
        assert parse_zip_coords(text) == {"35801": Coords(34.7251, -86.5667)}

    def test_quoted_fields_still_parse(self):
        text = 'ZIP,COUNTY,CITY\n"35801","01089","HUNTSVILLE, AL"\n'
        assert parse_zip_county(text) == {"35801": "01089"}
