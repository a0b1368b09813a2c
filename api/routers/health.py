"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends

from geomany.geocoding import GeocoderMany
from api.dependencies import get_geocoder_many

router = APIRouter(tags=["Health"])


@router.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "geomany API"}


@router.get("/health")
async def health(geocoder: GeocoderMany = Depends(get_geocoder_many)):
    """Detailed health check."""
    from api.config import settings

    return {
        "status": "ok",
        "service": "geomany API",
        "version": settings.API_VERSION,
        "scheduler": geocoder.scheduler_type.value,
        "providers": {
            name: {
                "available": geocoder.backoff.is_available(name),
                "consecutive_failures": geocoder.backoff.failures(name),
            }
            for name in geocoder.geocoders
        },
        "dependencies": {
            "google": settings.validate_google_geocoding(),
        }
    }
