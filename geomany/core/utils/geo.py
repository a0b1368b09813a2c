"""
Geographic utility functions for coordinate calculations.

This module consolidates all geographic calculations used across the codebase:
- Haversine distance calculation (meters, feet, kilometers, miles)
- Bounding box checks (inclusive bounds and strict square neighbourhoods)
- Precision scoring from a result's bounding box

Usage:
    from geomany.core.utils.geo import haversine_distance, precision_from_bbox

    # Calculate distance in meters
    distance_m = haversine_distance(51.52, -0.10, 51.53, -0.11)

    # Score a result whose viewport spans a single building
    precision = precision_from_bbox(51.5201, -0.1001, 51.5203, -0.0999)
"""

import math
from typing import Optional, Literal

# Earth radius constants
EARTH_RADIUS_METERS = 6_371_000
EARTH_RADIUS_FEET = 20_902_231
EARTH_RADIUS_KM = 6_371
EARTH_RADIUS_MILES = 3_958.8

# Bounding box diagonals (km) mapped to precision 1.0 and 0.0
PRECISE_DIAGONAL_KM = 0.25
IMPRECISE_DIAGONAL_KM = 1000.0

# Unit type for type hints
DistanceUnit = Literal['meters', 'feet', 'kilometers', 'miles']


def haversine_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    unit: DistanceUnit = 'meters'
) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Uses the Haversine formula which gives accurate results for most distances.

    Args:
        lat1: Latitude of first point in decimal degrees
        lon1: Longitude of first point in decimal degrees
        lat2: Latitude of second point in decimal degrees
        lon2: Longitude of second point in decimal degrees
        unit: Unit for the result ('meters', 'feet', 'kilometers', 'miles')

    Returns:
        Distance between the two points in the specified unit

    Example:
        >>> haversine_distance(51.5007, -0.1246, 51.5033, -0.1196)
        445.1  # meters
    """
    # Select earth radius based on unit
    earth_radius = {
        'meters': EARTH_RADIUS_METERS,
        'feet': EARTH_RADIUS_FEET,
        'kilometers': EARTH_RADIUS_KM,
        'miles': EARTH_RADIUS_MILES,
    }.get(unit, EARTH_RADIUS_METERS)

    # Convert to radians
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    # Haversine formula
    a = (
        math.sin(delta_phi / 2) ** 2 +
        math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return earth_radius * c


def is_within_bounds(lat: float, lng: float, bounds: dict) -> bool:
    """
    Check if coordinates are within a bounding box (inclusive).

    Args:
        lat: Latitude to check
        lng: Longitude to check
        bounds: Dictionary with min_lat, max_lat, min_lng, max_lng

    Returns:
        True if coordinates are within bounds
    """
    return (
        bounds["min_lat"] <= lat <= bounds["max_lat"] and
        bounds["min_lng"] <= lng <= bounds["max_lng"]
    )


def in_box(
    centre_lat: float,
    centre_lng: float,
    half_width: float,
    lat: float,
    lng: float
) -> bool:
    """
    True iff (lat, lng) lies strictly inside the square of side 2*half_width
    centred on (centre_lat, centre_lng). Points on the edge do not count.
    """
    return (
        centre_lat - half_width < lat < centre_lat + half_width and
        centre_lng - half_width < lng < centre_lng + half_width
    )


def precision_from_bbox(
    south: Optional[float],
    west: Optional[float],
    north: Optional[float],
    east: Optional[float]
) -> Optional[float]:
    """
    Derive a 0.0-1.0 precision score from the size of a result's bounding box.

    The diagonal of the box is measured in kilometers. Anything smaller than
    PRECISE_DIAGONAL_KM (a building or a short street) scores 1.0, anything
    larger than IMPRECISE_DIAGONAL_KM (a country) scores 0.0, and sizes in
    between are scaled logarithmically.

    Returns None (unknown) when any corner is missing.
    """
    if None in (south, west, north, east):
        return None

    diagonal = haversine_distance(
        float(south), float(west), float(north), float(east),
        unit='kilometers'
    )

    if diagonal <= PRECISE_DIAGONAL_KM:
        return 1.0
    if diagonal >= IMPRECISE_DIAGONAL_KM:
        return 0.0

    span = math.log(IMPRECISE_DIAGONAL_KM) - math.log(PRECISE_DIAGONAL_KM)
    return 1.0 - (math.log(diagonal) - math.log(PRECISE_DIAGONAL_KM)) / span
