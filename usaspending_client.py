"""
USASpending.gov API client — no API key required.
Finds contract award recipients in a set of counties for one NAICS code and
set-aside type, aggregated by recipient.
"""

import logging
import re
from datetime import date
from typing import Optional

import httpx
from pydantic import BaseModel

from config import Settings, get_settings
from errors import InvalidInputError, UpstreamError
from set_aside_config import (
    AWARD_SEARCH_FIELDS,
    CONTRACT_AWARD_TYPE_CODES,
    STATE_FIPS_TO_USPS,
    VALID_SET_ASIDES,
)

logger = logging.getLogger(__name__)

_NAICS_RE = re.compile(r"^\d{6}$", re.ASCII)


class Contractor(BaseModel):
    recipient_name: str
    recipient_id: str
    recipient_uei: str
    total_awards: float
    award_count: int


def fips_to_location(fips: str) -> Optional[dict]:
    """County FIPS → USAspending place-of-performance location, or None for unknown states."""
    state = STATE_FIPS_TO_USPS.get(fips[:2])
    if state is None:
        return None
    return {"country": "USA", "state": state, "county": fips[2:]}


def _years_ago(today: date, years: int) -> date:
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        # Feb 29 → Feb 28
        return today.replace(year=today.year - years, day=28)


def build_search_payload(
    locations: list[dict],
    naics_code: str,
    set_aside_type: str,
    years_lookback: int = 5,
    page_size: int = 100,
    today: Optional[date] = None,
) -> dict:
    end_date = today or date.today()
    start_date = _years_ago(end_date, years_lookback)

    return {
        "filters": {
            "award_type_codes": CONTRACT_AWARD_TYPE_CODES,
            "time_period": [
                {
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                }
            ],
            "place_of_performance_locations": locations,
            "naics_codes": {"require": [naics_code]},
            "set_aside_type_codes": [set_aside_type],
        },
        "fields": AWARD_SEARCH_FIELDS,
        "limit": page_size,
    }


def validate_search_inputs(naics_code: str, set_aside_type: str) -> None:
    if not _NAICS_RE.match(naics_code or ""):
        raise InvalidInputError(f"Invalid NAICS code: must be 6 digits, got {naics_code}")
    if set_aside_type not in VALID_SET_ASIDES:
        raise InvalidInputError(
            f"Invalid set-aside type: {set_aside_type}. "
            f"Valid types: {', '.join(VALID_SET_ASIDES)}"
        )


async def fetch_awards(client: httpx.AsyncClient, payload: dict, settings: Settings) -> list[dict]:
    """Page through spending_by_award until hasNext is false or the page cap is hit."""
    results: list[dict] = []
    page = 1
    has_more = True

    while has_more and page <= settings.max_api_pages:
        try:
            resp = await client.post(settings.usaspending_api_url, json={**payload, "page": page})
        except httpx.HTTPError as e:
            raise UpstreamError(f"USAspending API request failed: {e}") from e

        if not resp.is_success:
            logger.warning("USAspending returned HTTP %d on page %d", resp.status_code, page)
            raise UpstreamError(f"USAspending API error: {resp.status_code} - {resp.text}")

        data = resp.json()
        results.extend(data.get("results") or [])
        has_more = bool((data.get("page_metadata") or {}).get("hasNext", False))
        page += 1

    logger.info("Fetched %d awards from USAspending in %d page(s)", len(results), page - 1)
    return results


def aggregate_by_recipient(awards: list[dict]) -> list[Contractor]:
    """Sum award amounts per recipient_id, largest total first."""
    by_recipient: dict[str, Contractor] = {}
    for award in awards:
        recipient_id = award.get("recipient_id")
        recipient_name = award.get("Recipient Name")
        amount = award.get("Award Amount") or 0

        if not recipient_id or not recipient_name:
            continue

        existing = by_recipient.get(recipient_id)
        if existing:
            existing.total_awards += amount
            existing.award_count += 1
        else:
            by_recipient[recipient_id] = Contractor(
                recipient_name=recipient_name,
                recipient_id=recipient_id,
                recipient_uei=award.get("Recipient UEI") or "",
                total_awards=amount,
                award_count=1,
            )

    return sorted(by_recipient.values(), key=lambda c: c.total_awards, reverse=True)


async def search_contractors(
    county_fips: list[str],
    naics_code: str,
    set_aside_type: str,
    limit: int = 10,
    *,
    client: Optional[httpx.AsyncClient] = None,
    settings: Optional[Settings] = None,
) -> Optional[list[Contractor]]:
    """
    Top `limit` recipients of set-aside contract awards performed in the given
    counties over the lookback window. Returns None when nothing matched.
    """
    settings = settings or get_settings()
    validate_search_inputs(naics_code, set_aside_type)

    locations = [loc for loc in map(fips_to_location, county_fips) if loc is not None]
    if not locations:
        raise InvalidInputError("No valid county FIPS codes provided")

    payload = build_search_payload(
        locations,
        naics_code,
        set_aside_type,
        years_lookback=settings.years_lookback,
        page_size=settings.api_page_size,
    )

    if client is None:
        async with httpx.AsyncClient(timeout=settings.http_timeout) as owned_client:
            awards = await fetch_awards(owned_client, payload, settings)
    else:
        awards = await fetch_awards(client, payload, settings)

    top = aggregate_by_recipient(awards)[:limit]
    return top or None
