"""
County index — ZIP → nearby counties.

Builds four in-memory tables from the reference files the first time they are
needed (ZIP → FIPS, ZIP → coords, FIPS → name/state, FIPS → centroid) and
answers radius queries against county centroids. Tables are never mutated
after the load completes, so queries need no locking.
"""

import asyncio
import logging
import math
import threading
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from errors import InvalidInputError, NotFoundError, PartnerFinderError
from geo import distance_miles, round_miles
from reference_data import (
    Coords,
    CountyName,
    parse_county_names,
    parse_zip_coords,
    parse_zip_county,
    read_reference_file,
)

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_MILES = 100


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class County(_CamelModel):
    fips: str
    name: str
    state: str


class NeighborCounty(County):
    distance: int  # miles, rounded


class RadiusSearchResult(_CamelModel):
    center_county: County
    nearby_counties: list[NeighborCounty]
    total_found: int


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------

def build_centroids(
    zip_to_fips: dict[str, str], zip_coords: dict[str, Coords]
) -> dict[str, Coords]:
    """Mean lat/lon per county over ZIPs that appear in both tables."""
    county_points: dict[str, list[Coords]] = {}
    for zip_code, fips in zip_to_fips.items():
        coords = zip_coords.get(zip_code)
        if coords is not None:
            county_points.setdefault(fips, []).append(coords)

    return {
        fips: Coords(
            sum(p.lat for p in points) / len(points),
            sum(p.lon for p in points) / len(points),
        )
        for fips, points in county_points.items()
    }


class CountyIndex:
    """Owns the county reference tables. Load once, read many."""

    def __init__(
        self,
        data_dir: str | Path,
        zip_county_file: str = "ZIP_COUNTY_062025.csv",
        zcta_file: str = "tl_2020_us_zcta520.csv",
        adjacency_file: str = "county_adjacency.txt",
    ) -> None:
        data_dir = Path(data_dir)
        self.zip_county_path = data_dir / zip_county_file
        self.zcta_path = data_dir / zcta_file
        self.adjacency_path = data_dir / adjacency_file

        self._zip_to_fips: dict[str, str] = {}
        self._zip_coords: dict[str, Coords] = {}
        self._county_names: dict[str, CountyName] = {}
        self._centroids: dict[str, Coords] = {}

        self._lock = threading.Lock()
        self._loaded = False
        self._load_error: Optional[PartnerFinderError] = None

    @classmethod
    def from_settings(cls, settings) -> "CountyIndex":
        return cls(
            settings.county_db_dir,
            zip_county_file=settings.zip_county_file,
            zcta_file=settings.zcta_file,
            adjacency_file=settings.adjacency_file,
        )

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def county_count(self) -> int:
        """Counties with a centroid, i.e. the ones a radius query can return."""
        return len(self._centroids)

    # --- loading ------------------------------------------------------------

    def ensure_loaded(self) -> None:
        """
        Build the tables on first call; later calls return immediately.

        Concurrent first callers wait on the lock and see the finished tables.
        A failed load is remembered and re-raised to every later caller.
        """
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            if self._load_error is not None:
                raise self._load_error
            try:
                self._load()
            except PartnerFinderError as e:
                self._load_error = e
                raise
            self._loaded = True

    async def aensure_loaded(self) -> None:
        """Async form of ensure_loaded; file reads run in a worker thread."""
        if not self._loaded:
            await asyncio.to_thread(self.ensure_loaded)

    def _load(self) -> None:
        logger.info("Loading county reference data from %s", self.zip_county_path.parent)

        zip_text = read_reference_file(self.zip_county_path)
        coord_text = read_reference_file(self.zcta_path)
        adjacency_text = read_reference_file(self.adjacency_path)

        zip_to_fips = parse_zip_county(zip_text)
        zip_coords = parse_zip_coords(coord_text)
        county_names = parse_county_names(adjacency_text)
        centroids = build_centroids(zip_to_fips, zip_coords)

        # Publish only once every table is built
        self._zip_to_fips = zip_to_fips
        self._zip_coords = zip_coords
        self._county_names = county_names
        self._centroids = centroids

        logger.info(
            "County index ready: %d ZIPs, %d ZIP coordinates, %d named counties, %d centroids",
            len(zip_to_fips),
            len(zip_coords),
            len(county_names),
            len(centroids),
        )

    # --- lookups ------------------------------------------------------------

    def county_name(self, fips: str) -> County:
        named = self._county_names.get(fips)
        if named is None:
            return County(fips=fips, name=f"County {fips}", state="")
        return County(fips=fips, name=named.name, state=named.state)

    def county_for_zip(self, zip_code: str) -> Optional[str]:
        self.ensure_loaded()
        return self._zip_to_fips.get(zip_code)

    def centroid(self, fips: str) -> Optional[Coords]:
        self.ensure_loaded()
        return self._centroids.get(fips)

    # --- radius query -------------------------------------------------------

    def find_counties_within_radius(
        self, zip_code: str, radius_miles: float = DEFAULT_RADIUS_MILES
    ) -> RadiusSearchResult:
        """
        Every county whose centroid lies within radius_miles of the centroid of
        zip_code's county, nearest first. The ZIP's own county is included at 0.
        """
        if math.isnan(radius_miles) or radius_miles < 0:
            raise InvalidInputError(f"Radius must be non-negative, got {radius_miles}")

        self.ensure_loaded()

        center_fips = self._zip_to_fips.get(zip_code)
        if center_fips is None:
            raise NotFoundError(f"ZIP {zip_code} not found in database")

        center = self._centroids.get(center_fips)
        if center is None:
            raise NotFoundError(f"No coordinates for county FIPS {center_fips}")

        nearby: list[NeighborCounty] = []
        for fips, coords in self._centroids.items():
            distance = distance_miles(center.lat, center.lon, coords.lat, coords.lon)
            if distance <= radius_miles:
                county = self.county_name(fips)
                nearby.append(
                    NeighborCounty(
                        fips=fips,
                        name=county.name,
                        state=county.state,
                        distance=round_miles(distance),
                    )
                )

        # Stable: ties keep centroid-table order
        nearby = sorted(nearby, key=lambda c: c.distance)

        logger.debug(
            "ZIP %s -> county %s: %d counties within %s miles",
            zip_code,
            center_fips,
            len(nearby),
            radius_miles,
        )
        return RadiusSearchResult(
            center_county=self.county_name(center_fips),
            nearby_counties=nearby,
            total_found=len(nearby),
        )

    async def afind_counties_within_radius(
        self, zip_code: str, radius_miles: float = DEFAULT_RADIUS_MILES
    ) -> RadiusSearchResult:
        await self.aensure_loaded()
        return self.find_counties_within_radius(zip_code, radius_miles)
