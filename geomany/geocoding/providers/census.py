"""
US Census Bureau Geocoder provider.

Free, unlimited geocoding service optimized for US addresses.
https://geocoding.geo.census.gov/geocoder/
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from geomany.core import settings
from geomany.geocoding.base import (
    BaseGeocoder,
    ProviderReply,
    status_from_http,
    STATUS_OK,
)

logger = logging.getLogger(__name__)

CENSUS_GEOCODER_URL = "https://geocoding.geo.census.gov/geocoder/locations/onelineaddress"

# Census only covers the United States
CENSUS_COUNTRY = "United States"


class CensusGeocoder(BaseGeocoder):
    """
    US Census Bureau Geocoder.

    Pros:
    - Free and unlimited
    - Good accuracy for US addresses
    - No API key required

    Cons:
    - US only
    - Can be slow during peak hours

    Usage:
        geocoder = CensusGeocoder()
        reply = await geocoder.geocode("4600 Silver Hill Rd, Washington, DC 20233")
    """

    def __init__(self, daily_limit: Optional[int] = None, benchmark: str = "Public_AR_Current"):
        super().__init__(daily_limit)
        self.benchmark = benchmark

    @property
    def provider_name(self) -> str:
        return "census"

    async def geocode(self, location: str) -> ProviderReply:
        """
        Geocode a one-line address using US Census Geocoder.

        Args:
            location: Full one-line address

        Returns:
            ProviderReply with the Census address matches
        """
        params = {
            "address": location,
            "benchmark": self.benchmark,
            "format": "json"
        }

        try:
            connector = aiohttp.TCPConnector(limit=5)
            timeout = aiohttp.ClientTimeout(total=settings.REQUEST_TIMEOUT)
            async with aiohttp.ClientSession(connector=connector, timeout=timeout) as session:
                async with session.get(CENSUS_GEOCODER_URL, params=params) as response:
                    if response.status != 200:
                        logger.warning(f"Census API HTTP {response.status} for {location}")
                        return ProviderReply(status_code=status_from_http(response.status))

                    data = await response.json()

        except asyncio.TimeoutError:
            logger.warning(f"Census: Timeout for {location}")
            return ProviderReply(status_code=504)
        except aiohttp.ClientError as e:
            logger.warning(f"Census: Request failed for {location}: {e}")
            return ProviderReply(status_code=503)

        matches = data.get("result", {}).get("addressMatches", [])
        if not matches:
            logger.debug(f"Census: No match for {location}")

        return ProviderReply(records=matches, status_code=STATUS_OK)

    def normalize(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        coords = raw.get("coordinates") or {}
        return {
            "address": raw.get("matchedAddress"),
            "country": CENSUS_COUNTRY,
            "latitude": coords.get("y"),
            "longitude": coords.get("x"),
            # Matches on a TIGER line segment are interpolated along the street
            "precision": 1.0 if raw.get("tigerLine") else 0.8,
        }
