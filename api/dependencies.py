"""
FastAPI dependencies for the geomany API.

Provides dependency injection for the shared geocoder.
"""

from typing import Optional

from geomany.geocoding import GeocoderMany, build_geocoder

# Shared across requests so backoff history and cache persist
_geocoder: Optional[GeocoderMany] = None


def get_geocoder_many() -> GeocoderMany:
    """
    Get the shared GeocoderMany as a FastAPI dependency.

    Usage:
        @router.get("/geocode")
        async def geocode(geocoder: GeocoderMany = Depends(get_geocoder_many)):
            return await geocoder.geocode("10 Downing St, London")
    """
    global _geocoder

    if _geocoder is None:
        _geocoder = build_geocoder()

    return _geocoder
