"""
Parsers for the county reference files:
  1. ZIP_COUNTY_*.csv          — HUD ZIP → county FIPS crosswalk
  2. tl_2020_us_zcta520.csv    — Census ZCTA internal points (lat/lon)
  3. county_adjacency.txt      — Census county adjacency, used for county names

Each parser takes the file text and returns a plain dict keyed in file order.
"""

import csv
import logging
import math
import re
from pathlib import Path
from typing import Iterator, NamedTuple

from errors import UpstreamError

logger = logging.getLogger(__name__)

# Field positions in the ZCTA file
ZCTA_MIN_FIELDS = 9
ZCTA_LAT_FIELD = 7
ZCTA_LON_FIELD = 8

# "Autauga County, AL"
_COUNTY_NAME_RE = re.compile(r'"([^,]+),\s*([A-Z]{2})"')


class Coords(NamedTuple):
    lat: float
    lon: float


class CountyName(NamedTuple):
    name: str
    state: str


def pad_zip(zip_code: str) -> str:
    return zip_code.strip().zfill(5)


def read_reference_file(path: Path) -> str:
    """Read a reference file as UTF-8. Any I/O failure is an UpstreamError."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise UpstreamError(f"Could not read reference file {path}: {e}") from e


def _data_rows(text: str) -> Iterator[list[str]]:
    """CSV rows after the header line. Blank and malformed lines are skipped one at a time."""
    for line in text.splitlines()[1:]:
        line = line.strip()
        if not line:
            continue
        try:
            yield next(csv.reader([line], strict=True))
        except csv.Error:
            logger.debug("Skipping malformed row: %r", line)


def _parse_coordinate(value: str) -> float:
    number = float(value.strip().replace("+", ""))
    if not math.isfinite(number):
        raise ValueError(f"not a coordinate: {value!r}")
    return number


def parse_zip_county(text: str) -> dict[str, str]:
    """ZIP → county FIPS. The first row seen for a ZIP wins."""
    zip_to_fips: dict[str, str] = {}
    for parts in _data_rows(text):
        if len(parts) < 2:
            continue
        zip_code = pad_zip(parts[0])
        if zip_code not in zip_to_fips:
            zip_to_fips[zip_code] = parts[1].strip()
    return zip_to_fips


def parse_zip_coords(text: str) -> dict[str, Coords]:
    """ZIP → internal point. Rows with non-numeric lat/lon are skipped."""
    zip_coords: dict[str, Coords] = {}
    skipped = 0
    for parts in _data_rows(text):
        if len(parts) < ZCTA_MIN_FIELDS:
            continue
        try:
            lat = _parse_coordinate(parts[ZCTA_LAT_FIELD])
            lon = _parse_coordinate(parts[ZCTA_LON_FIELD])
        except ValueError:
            skipped += 1
            continue
        zip_coords[pad_zip(parts[0])] = Coords(lat, lon)

    if skipped:
        logger.debug("Skipped %d ZCTA rows with malformed coordinates", skipped)
    return zip_coords


def parse_county_names(text: str) -> dict[str, CountyName]:
    """
    County FIPS → (name, state) from the adjacency file.

    Only self-referential rows (a county listed as its own neighbor) carry the
    canonical name. The file is tab-delimited and has no header to skip.
    """
    names: dict[str, CountyName] = {}
    for line in text.splitlines():
        parts = line.split("\t")
        if len(parts) < 4 or parts[0] != parts[2]:
            continue
        match = _COUNTY_NAME_RE.search(parts[0])
        if match:
            names[parts[1].strip()] = CountyName(match.group(1), match.group(2))
    return names
