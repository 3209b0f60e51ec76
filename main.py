"""
Set-Aside Partner Finder — FastAPI server
Run with: uvicorn main:app --reload
"""

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

import sba_client as sba
import usaspending_client as usa
from address import extract_zip_from_address
from config import Settings, get_settings
from county_index import County, CountyIndex, RadiusSearchResult
from errors import InternalError, PartnerFinderError
from set_aside_config import SET_ASIDE_LABELS, VALID_SET_ASIDES

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Set-Aside Partner Finder", version="0.1.0")


@lru_cache
def get_county_index() -> CountyIndex:
    return CountyIndex.from_settings(get_settings())


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CountySearchRequest(_CamelModel):
    address: Optional[str] = None
    radius_miles: Optional[float] = None


class PartnerSearchRequest(_CamelModel):
    address: Optional[str] = None
    naics_code: Optional[str] = None
    set_aside_type: Optional[str] = None


class PartnerSearchResponse(_CamelModel):
    center_county: County
    total_counties_searched: int
    contractors: list[sba.EnrichedContractor]
    message: Optional[str] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _zip_or_400(address: Optional[str]) -> str:
    zip_code = extract_zip_from_address(address)
    if not zip_code:
        raise HTTPException(status_code=400, detail="No ZIP code found in address")
    return zip_code


def _to_http_error(e: Exception) -> HTTPException:
    if not isinstance(e, PartnerFinderError):
        logger.exception("Unhandled error")
        e = InternalError(str(e) or "Internal server error")
    return HTTPException(status_code=e.status_code, detail=str(e))


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/health")
async def health(county_index: CountyIndex = Depends(get_county_index)):
    return {
        "status": "ok",
        "county_index_loaded": county_index.is_loaded,
        "counties": county_index.county_count,
    }


@app.get("/api/set-asides")
async def set_asides():
    return [{"code": code, "label": SET_ASIDE_LABELS[code]} for code in VALID_SET_ASIDES]


@app.post("/api/county-search", response_model=RadiusSearchResult)
async def county_search(
    req: CountySearchRequest,
    county_index: CountyIndex = Depends(get_county_index),
    settings: Settings = Depends(get_settings),
):
    """Counties within the radius (default 100 miles) of the address's ZIP."""
    if not req.address:
        raise HTTPException(status_code=400, detail="Address is required")

    zip_code = _zip_or_400(req.address)
    radius = req.radius_miles if req.radius_miles is not None else settings.search_radius_miles

    try:
        return await county_index.afind_counties_within_radius(zip_code, radius)
    except Exception as e:
        raise _to_http_error(e)


@app.post("/api/partner-search", response_model=PartnerSearchResponse)
async def partner_search(
    req: PartnerSearchRequest,
    county_index: CountyIndex = Depends(get_county_index),
    settings: Settings = Depends(get_settings),
):
    """
    Award recipients near the address holding the requested SBA certification.
    Counties → USAspending award search → SBA enrichment → certification filter.
    """
    if not req.address or not req.naics_code or not req.set_aside_type:
        raise HTTPException(
            status_code=400,
            detail="Address, NAICS code, and set-aside type are required",
        )

    zip_code = _zip_or_400(req.address)

    try:
        counties = await county_index.afind_counties_within_radius(
            zip_code, settings.search_radius_miles
        )
        county_fips = [c.fips for c in counties.nearby_counties]

        contractors = await usa.search_contractors(
            county_fips,
            req.naics_code,
            req.set_aside_type,
            settings.max_contractors,
            settings=settings,
        )

        if not contractors:
            return PartnerSearchResponse(
                center_county=counties.center_county,
                total_counties_searched=counties.total_found,
                contractors=[],
                message="No contractors found matching criteria",
            )

        enriched = await sba.enrich_contractors_with_sba(contractors, settings=settings)
    except Exception as e:
        raise _to_http_error(e)

    certified = [c for c in enriched if req.set_aside_type in c.sba_certifications]
    logger.info(
        "Partner search %s/%s near %s: %d of %d contractors certified",
        req.naics_code,
        req.set_aside_type,
        zip_code,
        len(certified),
        len(enriched),
    )
    return PartnerSearchResponse(
        center_county=counties.center_county,
        total_counties_searched=counties.total_found,
        contractors=certified,
    )
