"""
Geocoding provider implementations.
"""

from geomany.geocoding.providers.census import CensusGeocoder
from geomany.geocoding.providers.google import GoogleGeocoder
from geomany.geocoding.providers.nominatim import NominatimGeocoder

__all__ = ["CensusGeocoder", "GoogleGeocoder", "NominatimGeocoder"]
