"""
SBA Dynamic Small Business Search client.
Looks up contractors by UEI to add contact details and active SBA certifications.
A failed lookup leaves the contractor un-enriched rather than failing the search.
"""

import asyncio
import copy
import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from config import Settings, get_settings
from set_aside_config import SBA_CERTIFICATION_FLAGS, SBA_REQUEST_TEMPLATE
from usaspending_client import Contractor

logger = logging.getLogger(__name__)


class SBAProfile(BaseModel):
    uei: str
    legal_business_name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    year_established: Optional[str] = None
    sam_active: bool = False
    certifications: list[str] = []


class EnrichedContractor(Contractor):
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    year_established: Optional[str] = None
    sam_active: bool = False
    sba_certifications: list[str] = []


def build_search_body(uei: str) -> dict:
    body = copy.deepcopy(SBA_REQUEST_TEMPLATE)
    body["searchProfiles"] = {"searchTerm": uei}
    return body


def active_certifications(result: dict) -> list[str]:
    return [label for flag, label in SBA_CERTIFICATION_FLAGS if result.get(flag)]


def normalize_profile(result: dict) -> SBAProfile:
    year = result.get("year_established")
    return SBAProfile(
        uei=result.get("uei", ""),
        legal_business_name=result.get("legal_business_name"),
        contact_person=result.get("contact_person") or None,
        email=result.get("email") or None,
        phone=result.get("phone") or None,
        website=result.get("website") or None,
        year_established=str(year) if year else None,
        sam_active=result.get("sam_extract_code") == "A",
        certifications=active_certifications(result),
    )


async def search_by_uei(
    uei: str, *, client: httpx.AsyncClient, settings: Settings
) -> Optional[SBAProfile]:
    """First SBA search hit for a UEI, or None."""
    if not uei:
        return None

    try:
        resp = await client.post(settings.sba_api_url, json=build_search_body(uei))
    except httpx.HTTPError as e:
        logger.warning("SBA lookup for %s failed: %s", uei, e)
        return None

    if not resp.is_success:
        logger.warning("SBA lookup for %s returned HTTP %d", uei, resp.status_code)
        return None

    try:
        data = resp.json()
    except ValueError:
        logger.warning("SBA lookup for %s returned a non-JSON body", uei)
        return None

    results = data.get("results") if isinstance(data, dict) else None
    if not results:
        return None
    return normalize_profile(results[0])


def merge_profile(contractor: Contractor, profile: Optional[SBAProfile]) -> EnrichedContractor:
    if profile is None:
        return EnrichedContractor(**contractor.model_dump())
    return EnrichedContractor(
        **contractor.model_dump(),
        contact_person=profile.contact_person,
        email=profile.email,
        phone=profile.phone,
        website=profile.website,
        year_established=profile.year_established,
        sam_active=profile.sam_active,
        sba_certifications=profile.certifications,
    )


async def enrich_contractors_with_sba(
    contractors: list[Contractor],
    *,
    client: Optional[httpx.AsyncClient] = None,
    settings: Optional[Settings] = None,
) -> list[EnrichedContractor]:
    """Look up every contractor concurrently; output order matches input order."""
    settings = settings or get_settings()

    async def lookup_all(http: httpx.AsyncClient) -> list[Optional[SBAProfile]]:
        return await asyncio.gather(
            *(search_by_uei(c.recipient_uei, client=http, settings=settings) for c in contractors)
        )

    if client is None:
        async with httpx.AsyncClient(timeout=settings.http_timeout) as owned_client:
            profiles = await lookup_all(owned_client)
    else:
        profiles = await lookup_all(client)

    found = sum(p is not None for p in profiles)
    logger.info("SBA profiles found for %d of %d contractors", found, len(contractors))
    return [merge_profile(c, p) for c, p in zip(contractors, profiles)]
