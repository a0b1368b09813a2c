"""
Google Geocoding API provider.

Paid, accurate geocoding service.
https://developers.google.com/maps/documentation/geocoding
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from geomany.core import settings
from geomany.core.utils.geo import precision_from_bbox
from geomany.geocoding.base import (
    BaseGeocoder,
    GeocodingError,
    ProviderReply,
    status_from_http,
    STATUS_OK,
    STATUS_EXHAUSTED,
)

logger = logging.getLogger(__name__)

GOOGLE_GEOCODING_URL = "https://maps.googleapis.com/maps/api/geocode/json"

# Google API status -> result status code
GOOGLE_STATUS_CODES = {
    "OK": STATUS_OK,
    "ZERO_RESULTS": STATUS_OK,
    "OVER_QUERY_LIMIT": STATUS_EXHAUSTED,
    "OVER_DAILY_LIMIT": STATUS_EXHAUSTED,
    "REQUEST_DENIED": 403,
    "INVALID_REQUEST": 400,
}


class GoogleGeocoder(BaseGeocoder):
    """
    Google Geocoding API provider.

    Pros:
    - Very accurate
    - Global coverage
    - Good address normalization

    Cons:
    - Requires API key
    - Paid service (~$5 per 1000 requests)

    Usage:
        geocoder = GoogleGeocoder()  # Uses GOOGLE_GEOCODING_API_KEY from env
        reply = await geocoder.geocode("1600 Amphitheatre Parkway, Mountain View, CA")
    """

    def __init__(self, api_key: Optional[str] = None, daily_limit: Optional[int] = None):
        """
        Initialize Google Geocoder.

        Args:
            api_key: Google API key (uses settings if not provided)
            daily_limit: Scheduling weight (uses settings if not provided)
        """
        super().__init__(daily_limit)
        self.api_key = api_key or settings.GOOGLE_GEOCODING_API_KEY

    @property
    def provider_name(self) -> str:
        return "google"

    async def geocode(self, location: str) -> ProviderReply:
        """
        Geocode a location using Google Geocoding API.

        Raises:
            GeocodingError: If no API key is configured
        """
        if not self.api_key:
            raise GeocodingError(
                "GOOGLE_GEOCODING_API_KEY not configured",
                provider=self.provider_name,
                address=location
            )

        params = {
            "address": location,
            "key": self.api_key,
        }

        try:
            response = await asyncio.to_thread(
                requests.get,
                GOOGLE_GEOCODING_URL,
                params=params,
                timeout=settings.REQUEST_TIMEOUT
            )
        except requests.Timeout:
            logger.warning(f"Google: Timeout for {location}")
            return ProviderReply(status_code=504)
        except requests.RequestException as e:
            logger.warning(f"Google: Request failed for {location}: {e}")
            return ProviderReply(status_code=503)

        if response.status_code != 200:
            logger.warning(f"Google API HTTP {response.status_code} for {location}")
            return ProviderReply(status_code=status_from_http(response.status_code))

        data = response.json()
        status = data.get("status", "")

        if status == "ZERO_RESULTS":
            logger.debug(f"Google: No results for {location}")
        elif status in ("OVER_QUERY_LIMIT", "OVER_DAILY_LIMIT"):
            logger.warning(f"Google: API quota exceeded ({status})")
        elif status != "OK":
            logger.warning(f"Google API error: {status}")

        return ProviderReply(
            records=data.get("results", []) if status == "OK" else [],
            status_code=GOOGLE_STATUS_CODES.get(status, 500),
        )

    def normalize(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        geometry = raw.get("geometry") or {}
        location = geometry.get("location") or {}

        precision = None
        viewport = geometry.get("viewport")
        if viewport:
            precision = precision_from_bbox(
                viewport.get("southwest", {}).get("lat"),
                viewport.get("southwest", {}).get("lng"),
                viewport.get("northeast", {}).get("lat"),
                viewport.get("northeast", {}).get("lng"),
            )

        # The country is the political address component of type "country"
        country = None
        for component in raw.get("address_components", []):
            types = component.get("types", [])
            if "country" in types and "political" in types:
                country = component.get("long_name")

        return {
            "address": raw.get("formatted_address"),
            "country": country,
            "latitude": location.get("lat"),
            "longitude": location.get("lng"),
            "precision": precision,
        }
