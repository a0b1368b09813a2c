"""
geomany API - FastAPI Backend

Geocodes locations through multiple providers with failover, backoff and
result picking.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from geomany.core import settings as core_settings
from api.config import settings
from api.routers import health_router, geocoding_router

logging.basicConfig(
    level=core_settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Initialize FastAPI
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)

app.include_router(health_router)
app.include_router(geocoding_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
