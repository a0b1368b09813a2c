"""
API configuration module.

Centralizes all configuration for the geomany API.
"""

from geomany import __version__
from geomany.core import settings as core_settings


class APISettings:
    """API-specific settings extending core settings."""

    # Re-export core settings
    GEOCODING_PROVIDERS = core_settings.GEOCODING_PROVIDERS
    SCHEDULER_TYPE = core_settings.SCHEDULER_TYPE
    USE_TIMEOUTS = core_settings.USE_TIMEOUTS

    # API-specific settings
    API_TITLE = "geomany API"
    API_DESCRIPTION = "Geocoding through multiple providers with failover"
    API_VERSION = __version__

    # CORS settings
    CORS_ORIGINS = core_settings.CORS_ORIGINS
    CORS_ALLOW_CREDENTIALS = True
    CORS_ALLOW_METHODS = ["*"]
    CORS_ALLOW_HEADERS = ["*"]

    @classmethod
    def validate_google_geocoding(cls) -> bool:
        """Check if Google Geocoding API key is configured."""
        return core_settings.validate_google_geocoding()


settings = APISettings()
