"""
Base classes and interfaces for geocoding providers.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

# Result status codes
STATUS_OK = 200
STATUS_CACHED = 210
STATUS_NOT_FOUND = 401
STATUS_EXHAUSTED = 402
# Used as feedback when a provider raised or returned something unusable
STATUS_PROVIDER_ERROR = 500


def is_success(status_code: int) -> bool:
    """True for any 2xx status code."""
    return 200 <= status_code < 300


def status_from_http(http_status: int) -> int:
    """Map an HTTP status to a result status; rate limiting means quota exhausted."""
    if http_status == 429:
        return STATUS_EXHAUSTED
    return http_status


class GeocodingError(Exception):
    """Exception raised when geocoding fails."""

    def __init__(self, message: str, provider: str = "", address: str = ""):
        self.message = message
        self.provider = provider
        self.address = address
        super().__init__(f"[{provider}] {message}" if provider else message)


class ConfigurationError(GeocodingError):
    """Raised when the geocoder is configured with an unusable value."""
    pass


class CacheError(GeocodingError):
    """Raised when a cache object fails its get/set round-trip check."""
    pass


def _coordinate(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Invalid coordinate: {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Invalid coordinate: {value!r}")
    return number


@dataclass(frozen=True)
class GeocodingResult:
    """
    Standard, immutable result from any geocoding provider.

    Only constructible with numeric latitude and longitude. A precision of
    None means the provider gave no indication of granularity.
    """

    latitude: float
    longitude: float
    address: Optional[str] = None
    country: Optional[str] = None
    precision: Optional[float] = None  # 0.0 to 1.0
    provider: str = ""
    location: str = ""  # the original query string
    status_code: int = STATUS_OK
    geocoded_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    raw_response: Optional[Dict[str, Any]] = field(
        default=None, compare=False, repr=False
    )

    def __post_init__(self):
        if self.latitude is None or self.longitude is None:
            raise ValueError("latitude and longitude are required")
        object.__setattr__(self, "latitude", _coordinate(self.latitude))
        object.__setattr__(self, "longitude", _coordinate(self.longitude))

        if self.precision is not None:
            precision = float(self.precision)
            if not 0.0 <= precision <= 1.0:
                raise ValueError(f"precision out of range: {precision}")
            object.__setattr__(self, "precision", precision)

    @property
    def as_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
            "country": self.country,
            "precision": self.precision,
            "provider": self.provider,
            "location": self.location,
            "status_code": self.status_code,
            "geocoded_at": self.geocoded_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeocodingResult":
        """Rebuild a result from `as_dict` output (e.g. a cache entry)."""
        known = {
            "latitude", "longitude", "address", "country", "precision",
            "provider", "location", "status_code", "geocoded_at",
        }
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class ProviderReply:
    """
    What a provider call hands back: its raw reply objects and a status code.

    `records` holds provider-native payloads; the orchestrator normalizes
    them through the provider's `normalize` method.
    """

    records: List[Dict[str, Any]] = field(default_factory=list)
    status_code: int = STATUS_OK


class BaseGeocoder(ABC):
    """
    Abstract base class for geocoding providers.

    Subclasses must implement:
    - geocode(): Query the provider for a location string
    - normalize(): Map one raw reply object to the common record fields
    - provider_name: Name of the provider

    Optional overrides:
    - daily_limit: Quota used as the scheduling weight
    """

    def __init__(self, daily_limit: Optional[int] = None):
        self._daily_limit = daily_limit

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Name of the geocoding provider."""
        pass

    @property
    def daily_limit(self) -> int:
        """Requests allowed per 24 hours; used as scheduling weight."""
        if self._daily_limit is not None:
            return self._daily_limit
        from geomany.core import settings
        try:
            return settings.daily_limit_for(self.provider_name)
        except KeyError:
            raise ConfigurationError(
                "No daily limit configured; pass daily_limit",
                provider=self.provider_name
            )

    @abstractmethod
    async def geocode(self, location: str) -> ProviderReply:
        """
        Geocode a location string.

        Args:
            location: Free-form location to look up

        Returns:
            ProviderReply with raw reply objects and a status code. A
            failing provider returns no records and a non-2xx status.
        """
        pass

    @abstractmethod
    def normalize(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        """
        Convert one raw reply into the common record fields.

        Returns:
            Dict with address, country, latitude, longitude and precision.
            Missing coordinates are passed through as None.
        """
        pass

    def __repr__(self):
        return f"<{type(self).__name__}(name='{self.provider_name}')>"
