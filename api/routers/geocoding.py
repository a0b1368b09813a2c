"""
Geocoding endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from geomany.geocoding import GeocoderMany, GeocodingError
from api.dependencies import get_geocoder_many
from api.schemas.requests import GeocodeRequest
from api.schemas.responses import GeocodeResponse

router = APIRouter(prefix="/api", tags=["Geocoding"])


async def _geocode(
    geocoder: GeocoderMany,
    location: str,
    no_cache: bool,
    wait_for_retries: bool,
    skip: List[str],
) -> GeocodeResponse:
    if not geocoder.geocoders:
        raise HTTPException(status_code=503, detail="No geocoding providers configured")

    try:
        outcome = await geocoder.geocode_detailed(
            location,
            no_cache=no_cache,
            wait_for_retries=wait_for_retries,
            skip=skip,
        )
    except GeocodingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return GeocodeResponse.from_outcome(location, outcome)


@router.get("/geocode", response_model=GeocodeResponse)
async def geocode_get(
    location: str = Query(..., min_length=1, description="Location string to geocode"),
    no_cache: bool = False,
    wait_for_retries: bool = False,
    skip: Optional[List[str]] = Query(None),
    geocoder: GeocoderMany = Depends(get_geocoder_many),
):
    """
    Geocode a location.

    The HTTP status is 200 whether or not a location was found; the
    geocoding status is reported in `status_code`.
    """
    return await _geocode(geocoder, location, no_cache, wait_for_retries, skip or [])


@router.post("/geocode", response_model=GeocodeResponse)
async def geocode_post(
    request: GeocodeRequest,
    geocoder: GeocoderMany = Depends(get_geocoder_many),
):
    """Geocode a location given in the request body."""
    return await _geocode(
        geocoder,
        request.location,
        request.no_cache,
        request.wait_for_retries,
        request.skip,
    )
