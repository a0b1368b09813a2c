"""
Pydantic schemas for API request/response models.
"""

from api.schemas.requests import GeocodeRequest
from api.schemas.responses import (
    LocationResponse,
    ProviderAttemptResponse,
    GeocodeResponse,
)

__all__ = [
    "GeocodeRequest",
    "LocationResponse",
    "ProviderAttemptResponse",
    "GeocodeResponse",
]
