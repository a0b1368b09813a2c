"""
Centralized configuration management for geomany.

All configuration is loaded from environment variables with sensible defaults.
Use the `settings` singleton for accessing configuration values.

Usage:
    from geomany.core.config import settings

    # Access configuration
    print(settings.SCHEDULER_TYPE)
    print(settings.BACKOFF_BASE_SECONDS)
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
# Search in common locations
_env_paths = [
    Path.cwd() / ".env",  # Current working directory
    Path(__file__).parent.parent.parent / ".env",  # Repository root
]

for env_path in _env_paths:
    if env_path.exists():
        load_dotenv(env_path)
        break


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # ==========================================================================
    # Provider credentials
    # ==========================================================================
    GOOGLE_GEOCODING_API_KEY: str = field(
        default_factory=lambda: os.getenv("GOOGLE_GEOCODING_API_KEY", "")
    )
    NOMINATIM_URL: str = field(
        default_factory=lambda: os.getenv(
            "NOMINATIM_URL",
            "https://nominatim.openstreetmap.org/search"
        )
    )
    NOMINATIM_USER_AGENT: str = field(
        default_factory=lambda: os.getenv("NOMINATIM_USER_AGENT", "geomany/0.3")
    )

    # ==========================================================================
    # Daily limits (used as scheduling weights)
    # ==========================================================================
    CENSUS_DAILY_LIMIT: int = field(
        default_factory=lambda: int(os.getenv("CENSUS_DAILY_LIMIT", "10000"))
    )
    GOOGLE_DAILY_LIMIT: int = field(
        default_factory=lambda: int(os.getenv("GOOGLE_DAILY_LIMIT", "2500"))
    )
    NOMINATIM_DAILY_LIMIT: int = field(
        default_factory=lambda: int(os.getenv("NOMINATIM_DAILY_LIMIT", "5000"))
    )

    # Comma-separated provider names enabled by default
    GEOCODING_PROVIDERS: List[str] = field(
        default_factory=lambda: [
            p.strip() for p in
            os.getenv("GEOCODING_PROVIDERS", "census,nominatim,google").split(",")
            if p.strip()
        ]
    )

    # ==========================================================================
    # Scheduling
    # ==========================================================================
    SCHEDULER_TYPE: str = field(
        default_factory=lambda: os.getenv("SCHEDULER_TYPE", "WRR")
    )
    USE_TIMEOUTS: bool = field(
        default_factory=lambda: _env_bool("USE_TIMEOUTS")
    )
    BACKOFF_BASE_SECONDS: float = field(
        default_factory=lambda: float(os.getenv("BACKOFF_BASE_SECONDS", "1.0"))
    )
    BACKOFF_MAX_SECONDS: float = field(
        default_factory=lambda: float(os.getenv("BACKOFF_MAX_SECONDS", "600.0"))
    )

    # ==========================================================================
    # Network
    # ==========================================================================
    REQUEST_TIMEOUT: int = field(
        default_factory=lambda: int(os.getenv("REQUEST_TIMEOUT", "10"))
    )

    # ==========================================================================
    # Caching
    # ==========================================================================
    DATA_DIR: Path = field(
        default_factory=lambda: Path(os.getenv("DATA_DIR", "data"))
    )
    CACHE_MISSES: bool = field(
        default_factory=lambda: _env_bool("CACHE_MISSES")
    )

    @property
    def GEOCODING_CACHE_PATH(self) -> Path:
        return self.DATA_DIR / "geocoding_cache.json"

    # ==========================================================================
    # Logging / API
    # ==========================================================================
    LOG_LEVEL: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper()
    )
    CORS_ORIGINS: List[str] = field(
        default_factory=lambda: os.getenv("CORS_ORIGINS", "*").split(",")
    )

    def validate_google_geocoding(self) -> bool:
        """Check if Google Geocoding API key is configured."""
        return bool(self.GOOGLE_GEOCODING_API_KEY)

    def daily_limit_for(self, provider: str) -> int:
        """Configured daily limit for a provider name."""
        limits = {
            "census": self.CENSUS_DAILY_LIMIT,
            "google": self.GOOGLE_DAILY_LIMIT,
            "nominatim": self.NOMINATIM_DAILY_LIMIT,
        }
        if provider not in limits:
            raise KeyError(provider)
        return limits[provider]


# Singleton settings instance
settings = Settings()
