"""
Core module providing shared configuration and utilities.

This module consolidates common functionality used across the codebase:
- Configuration management (settings, environment variables)
- Utility functions (geo, location normalization)

Usage:
    from geomany.core import settings
    from geomany.core.utils import haversine_distance, normalize_location
"""

from geomany.core.config import settings, Settings

__all__ = [
    "settings",
    "Settings",
]
