"""
Response schemas for the geomany API.
"""

from typing import Optional, List
from pydantic import BaseModel, Field

from geomany.geocoding import GeocodeOutcome, GeocodingResult


class LocationResponse(BaseModel):
    """A single accepted geocoding result."""

    latitude: float = Field(..., description="Latitude (WGS84)")
    longitude: float = Field(..., description="Longitude (WGS84)")
    address: Optional[str] = Field(None, description="Matched address")
    country: Optional[str] = Field(None, description="Country, if the provider reports one")
    precision: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="0.0-1.0 granularity score, null if unknown"
    )
    provider: str = Field(..., description="Provider that returned the result")
    geocoded_at: str = Field(..., description="ISO 8601 timestamp")

    @classmethod
    def from_result(cls, result: GeocodingResult) -> "LocationResponse":
        return cls(
            latitude=result.latitude,
            longitude=result.longitude,
            address=result.address,
            country=result.country,
            precision=result.precision,
            provider=result.provider,
            geocoded_at=result.geocoded_at,
        )


class ProviderAttemptResponse(BaseModel):
    """How one provider answered during the request."""

    provider: str = Field(..., description="Provider name")
    status_code: int = Field(..., description="Provider status code")
    results: int = Field(..., description="Number of usable results returned")


class GeocodeResponse(BaseModel):
    """Full geocoding response."""

    location: str = Field(..., description="The original query string")
    status_code: int = Field(
        ..., description="200 success, 210 from cache, 401 not found, 402 providers exhausted"
    )
    result: Optional[LocationResponse] = Field(None, description="Accepted result")
    attempts: List[ProviderAttemptResponse] = Field(
        default_factory=list, description="Providers queried for this request"
    )

    @classmethod
    def from_outcome(cls, location: str, outcome: GeocodeOutcome) -> "GeocodeResponse":
        return cls(
            location=location,
            status_code=outcome.status_code,
            result=LocationResponse.from_result(outcome.result) if outcome.result else None,
            attempts=[
                ProviderAttemptResponse(
                    provider=r.provider,
                    status_code=r.status_code,
                    results=len(r),
                )
                for r in outcome.responses
            ],
        )
