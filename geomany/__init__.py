"""
geomany - geocode through many providers with failover, quota-aware
scheduling and result picking.
"""

from geomany.geocoding import (
    GeocoderMany,
    GeocodeOutcome,
    GeocodingResult,
    GeocodingError,
    get_geocoder,
    geocode_address,
)

__version__ = "0.3.0"

__all__ = [
    "GeocoderMany",
    "GeocodeOutcome",
    "GeocodingResult",
    "GeocodingError",
    "get_geocoder",
    "geocode_address",
]
