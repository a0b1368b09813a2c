"""
API routers for the geomany API.
"""

from api.routers.health import router as health_router
from api.routers.geocoding import router as geocoding_router

__all__ = ["health_router", "geocoding_router"]
