"""
Geocoding facade providing a simple interface to all providers.
"""

import logging
from typing import Optional, List, Dict, Literal, Iterable

from geomany.core import settings
from geomany.core.utils.address import normalize_location
from geomany.core.utils.geo import haversine_distance
from geomany.geocoding.base import BaseGeocoder, GeocodingResult, ConfigurationError
from geomany.geocoding.cache import JsonFileCache, MemoryCache
from geomany.geocoding.many import GeocoderMany
from geomany.geocoding.response import GeocodingResponse
from geomany.geocoding.providers.census import CensusGeocoder
from geomany.geocoding.providers.google import GoogleGeocoder
from geomany.geocoding.providers.nominatim import NominatimGeocoder

logger = logging.getLogger(__name__)

ProviderType = Literal["census", "google", "nominatim"]

PROVIDERS = {
    "census": CensusGeocoder,
    "google": GoogleGeocoder,
    "nominatim": NominatimGeocoder,
}


def get_geocoder(provider: ProviderType = "census", **kwargs) -> BaseGeocoder:
    """
    Get a geocoder instance by provider name.

    Args:
        provider: Provider name ("census", "google", "nominatim")
        **kwargs: Passed to the provider constructor

    Returns:
        Geocoder instance
    """
    if provider not in PROVIDERS:
        raise ConfigurationError(
            f"Unknown provider: {provider}. Choose from: {list(PROVIDERS.keys())}"
        )

    return PROVIDERS[provider](**kwargs)


def build_geocoder(
    providers: Optional[Iterable[str]] = None,
    scheduler_type: Optional[str] = None,
    use_timeouts: Optional[bool] = None,
    persistent_cache: bool = False,
    use_cache: bool = True,
) -> GeocoderMany:
    """
    Build a GeocoderMany from settings.

    Google is left out when no API key is configured.

    Args:
        providers: Provider names (default: settings.GEOCODING_PROVIDERS)
        scheduler_type: Scheduling policy (default: settings.SCHEDULER_TYPE)
        use_timeouts: Back off failing providers (default: settings.USE_TIMEOUTS)
        persistent_cache: Cache to settings.GEOCODING_CACHE_PATH instead of memory
        use_cache: Set False to disable caching altogether

    Returns:
        Configured GeocoderMany
    """
    cache = None
    if use_cache:
        cache = JsonFileCache(settings.GEOCODING_CACHE_PATH) if persistent_cache else MemoryCache()

    many = GeocoderMany(
        scheduler_type=scheduler_type or settings.SCHEDULER_TYPE,
        use_timeouts=settings.USE_TIMEOUTS if use_timeouts is None else use_timeouts,
        cache=cache,
        normalize_location=normalize_location,
    )

    for name in providers or settings.GEOCODING_PROVIDERS:
        if name == "google" and not settings.validate_google_geocoding():
            logger.info("Skipping google: GOOGLE_GEOCODING_API_KEY not configured")
            continue
        many.add_geocoder(get_geocoder(name))

    return many


async def geocode_address(
    location: str,
    providers: Optional[List[str]] = None,
    picker: str = "first",
    **kwargs
) -> Optional[GeocodingResult]:
    """
    Geocode a single location with every configured provider as fallback.

    Args:
        location: Location string to geocode
        providers: Provider names to use (default: settings.GEOCODING_PROVIDERS)
        picker: Picker preset name
        **kwargs: Passed to GeocoderMany.geocode

    Returns:
        GeocodingResult if successful, None if all providers fail

    Example:
        result = await geocode_address(
            "4600 Silver Hill Rd, Washington, DC 20233",
            providers=["census", "nominatim"],
        )
    """
    many = build_geocoder(providers=providers, use_cache=False)
    many.set_picker(picker)
    return await many.geocode(location, **kwargs)


async def compare_providers(
    location: str,
    providers: Optional[List[str]] = None,
) -> Dict[str, Optional[GeocodingResult]]:
    """
    Compare geocoding results from multiple providers.

    Useful for validating accuracy or finding discrepancies.

    Args:
        location: Location to geocode
        providers: List of providers to compare (default: all configured)

    Returns:
        Dict mapping provider name to its first result
    """
    if providers is None:
        providers = ["census", "nominatim"]
        # Only add Google if API key is configured
        if settings.validate_google_geocoding():
            providers.append("google")

    results = {}
    for provider in providers:
        geocoder = get_geocoder(provider)
        try:
            reply = await geocoder.geocode(location)
            results[provider] = GeocodingResponse.from_reply(location, geocoder, reply).first
        except Exception as e:
            logger.error(f"{provider}: Error geocoding {location}: {e}")
            results[provider] = None

    # Calculate distances between results
    valid_results = {k: v for k, v in results.items() if v is not None}
    if len(valid_results) > 1:
        provider_names = list(valid_results.keys())
        for i, p1 in enumerate(provider_names):
            for p2 in provider_names[i+1:]:
                r1, r2 = valid_results[p1], valid_results[p2]
                dist = haversine_distance(
                    r1.latitude, r1.longitude,
                    r2.latitude, r2.longitude
                )
                logger.info(f"Distance {p1} vs {p2}: {dist:.1f}m")

    return results
