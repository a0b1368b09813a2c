"""
Request schemas for the geomany API.
"""

from typing import List
from pydantic import BaseModel, Field


class GeocodeRequest(BaseModel):
    """Request body for geocoding a location."""

    location: str = Field(..., min_length=1, description="Location string to geocode")
    no_cache: bool = Field(False, description="Bypass the result cache")
    wait_for_retries: bool = Field(
        False, description="Wait for backed-off providers instead of giving up"
    )
    skip: List[str] = Field(default_factory=list, description="Providers not to query")

    model_config = {
        "json_schema_extra": {
            "example": {
                "location": "82 Clerkenwell Road, London, EC1M 5RF",
                "skip": ["google"],
            }
        }
    }
