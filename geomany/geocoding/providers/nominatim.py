"""
Nominatim (OpenStreetMap) Geocoder provider.

Free geocoding using OpenStreetMap data.
https://nominatim.org/
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from geomany.core import settings
from geomany.core.utils.geo import precision_from_bbox
from geomany.geocoding.base import (
    BaseGeocoder,
    ProviderReply,
    status_from_http,
    STATUS_OK,
)

logger = logging.getLogger(__name__)


class NominatimGeocoder(BaseGeocoder):
    """
    Nominatim (OpenStreetMap) Geocoder.

    Pros:
    - Free
    - Good global coverage
    - Open data

    Cons:
    - Strict rate limiting (1 request/second)
    - Variable accuracy
    - Requires user agent

    Usage:
        geocoder = NominatimGeocoder()
        reply = await geocoder.geocode("82 Clerkenwell Road, London")
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        daily_limit: Optional[int] = None,
        url: Optional[str] = None,
        max_results: int = 5,
    ):
        """
        Initialize Nominatim Geocoder.

        Args:
            user_agent: User agent string (required by Nominatim TOS)
            daily_limit: Scheduling weight (uses settings if not provided)
            url: Search endpoint, for self-hosted instances
            max_results: Maximum number of matches to request
        """
        super().__init__(daily_limit)
        self.user_agent = user_agent or settings.NOMINATIM_USER_AGENT
        self.url = url or settings.NOMINATIM_URL
        self.max_results = max_results

    @property
    def provider_name(self) -> str:
        return "nominatim"

    async def geocode(self, location: str) -> ProviderReply:
        """Geocode a location using Nominatim."""
        params = {
            "q": location,
            "format": "json",
            "addressdetails": 1,
            "limit": self.max_results,
        }

        headers = {
            "User-Agent": self.user_agent,
            "Accept-Language": "en",
        }

        try:
            response = await asyncio.to_thread(
                requests.get,
                self.url,
                params=params,
                headers=headers,
                timeout=settings.REQUEST_TIMEOUT
            )
        except requests.Timeout:
            logger.warning(f"Nominatim: Timeout for {location}")
            return ProviderReply(status_code=504)
        except requests.RequestException as e:
            logger.warning(f"Nominatim: Request failed for {location}: {e}")
            return ProviderReply(status_code=503)

        if response.status_code != 200:
            logger.warning(f"Nominatim HTTP {response.status_code} for {location}")
            return ProviderReply(status_code=status_from_http(response.status_code))

        data = response.json()
        if not data:
            logger.debug(f"Nominatim: No results for {location}")

        return ProviderReply(records=data or [], status_code=STATUS_OK)

    def normalize(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        precision = None
        bbox = raw.get("boundingbox")
        if bbox and len(bbox) == 4:
            # Nominatim orders the box as [south, north, west, east]
            south, north, west, east = bbox
            precision = precision_from_bbox(south, west, north, east)

        return {
            "address": raw.get("display_name"),
            "country": (raw.get("address") or {}).get("country"),
            "latitude": raw.get("lat"),
            "longitude": raw.get("lon"),
            "precision": precision,
        }
