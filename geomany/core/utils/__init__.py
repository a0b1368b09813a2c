"""
Shared utility functions for geomany.

Modules:
- geo: Geographic calculations (haversine, bounding boxes, precision scoring)
- address: Location string normalization

Usage:
    from geomany.core.utils import haversine_distance, normalize_location
"""

from geomany.core.utils.geo import (
    haversine_distance,
    is_within_bounds,
    in_box,
    precision_from_bbox,
)
from geomany.core.utils.address import normalize_location

__all__ = [
    # Geo utilities
    "haversine_distance",
    "is_within_bounds",
    "in_box",
    "precision_from_bbox",
    # Location utilities
    "normalize_location",
]
