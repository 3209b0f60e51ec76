"""
Runtime settings. Values come from the environment (prefix PARTNER_FINDER_)
or a local .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PARTNER_FINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Reference data
    county_db_dir: str = "public/county_db"
    zip_county_file: str = "ZIP_COUNTY_062025.csv"
    zcta_file: str = "tl_2020_us_zcta520.csv"
    adjacency_file: str = "county_adjacency.txt"

    # Search parameters
    search_radius_miles: float = 100
    max_contractors: int = 10
    years_lookback: int = 5
    api_page_size: int = 100
    max_api_pages: int = 10

    # APIs
    usaspending_api_url: str = "https://api.usaspending.gov/api/v2/search/spending_by_award/"
    sba_api_url: str = "https://search.certifications.sba.gov/_api/v2/search"
    http_timeout: float = 30.0

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
