"""
Multi-provider geocoding.

Provides one geocode call over multiple providers:
- Census: US Census Bureau Geocoder (free, unlimited, US only)
- Google: Google Geocoding API (paid, accurate)
- Nominatim: OpenStreetMap (free, 1 req/sec limit)

Usage:
    from geomany.geocoding import GeocoderMany, CensusGeocoder, NominatimGeocoder

    geocoder = GeocoderMany(scheduler_type="WRR", use_timeouts=True)
    geocoder.add_geocoder(CensusGeocoder(), daily_limit=10000)
    geocoder.add_geocoder(NominatimGeocoder(), daily_limit=5000)
    result = await geocoder.geocode("4600 Silver Hill Rd, Washington, DC 20233")

    # Using convenience function
    result = await geocode_address("4600 Silver Hill Rd, Washington, DC 20233")
"""

from geomany.geocoding.base import (
    GeocodingResult,
    GeocodingError,
    ConfigurationError,
    CacheError,
    ProviderReply,
    BaseGeocoder,
    STATUS_OK,
    STATUS_CACHED,
    STATUS_NOT_FOUND,
    STATUS_EXHAUSTED,
)
from geomany.geocoding.response import GeocodingResponse
from geomany.geocoding.callbacks import (
    FilterPreset,
    PickerPreset,
    min_precision_filter,
    country_filter,
    bounds_filter,
    max_precision_picker,
    consensus_picker,
)
from geomany.geocoding.cache import MemoryCache, JsonFileCache
from geomany.geocoding.many import GeocoderMany, GeocodeOutcome
from geomany.geocoding.providers.census import CensusGeocoder
from geomany.geocoding.providers.google import GoogleGeocoder
from geomany.geocoding.providers.nominatim import NominatimGeocoder
from geomany.geocoding.facade import (
    get_geocoder,
    build_geocoder,
    geocode_address,
    compare_providers,
)

__all__ = [
    # Base classes
    "GeocodingResult",
    "GeocodingError",
    "ConfigurationError",
    "CacheError",
    "ProviderReply",
    "BaseGeocoder",
    "GeocodingResponse",
    # Status codes
    "STATUS_OK",
    "STATUS_CACHED",
    "STATUS_NOT_FOUND",
    "STATUS_EXHAUSTED",
    # Filters and pickers
    "FilterPreset",
    "PickerPreset",
    "min_precision_filter",
    "country_filter",
    "bounds_filter",
    "max_precision_picker",
    "consensus_picker",
    # Orchestration
    "GeocoderMany",
    "GeocodeOutcome",
    "MemoryCache",
    "JsonFileCache",
    # Providers
    "CensusGeocoder",
    "GoogleGeocoder",
    "NominatimGeocoder",
    # Convenience functions
    "get_geocoder",
    "build_geocoder",
    "geocode_address",
    "compare_providers",
]
