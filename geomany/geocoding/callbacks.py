"""
Result filters and pickers.

A filter is a predicate over one GeocodingResult; results it rejects never
reach the picker.

A picker is called with the results collected so far (most recent first)
and a flag saying whether more providers may still be queried. It returns
the result to accept, or None to ask for more.

Usage:
    from geomany.geocoding.callbacks import consensus_picker, min_precision_filter

    geocoder.set_filter(min_precision_filter(0.5))
    geocoder.set_picker(consensus_picker(required_consensus=2, nearness=0.1))
"""

from enum import Enum
from typing import Callable, List, Optional, Union

from geomany.core.utils.geo import in_box, is_within_bounds
from geomany.geocoding.base import GeocodingResult, ConfigurationError

FilterCallback = Callable[[GeocodingResult], bool]
PickerCallback = Callable[[List[GeocodingResult], bool], Optional[GeocodingResult]]


class FilterPreset(str, Enum):
    """Named filters accepted by `resolve_filter`."""

    DEFAULT = ""
    ALL = "all"


class PickerPreset(str, Enum):
    """Named pickers accepted by `resolve_picker`."""

    DEFAULT = ""
    FIRST = "first"
    MAX_PRECISION = "max_precision"


# =============================================================================
# Filters
# =============================================================================

def min_precision_filter(threshold: float) -> FilterCallback:
    """Only pass results whose precision is known and at least `threshold`."""

    def _filter(result: GeocodingResult) -> bool:
        if result.precision is None:
            return False
        return result.precision >= threshold

    return _filter


def country_filter(country_name: str) -> FilterCallback:
    """Only pass results whose country is exactly `country_name`."""

    def _filter(result: GeocodingResult) -> bool:
        if result.country is None:
            return False
        return result.country == country_name

    return _filter


def bounds_filter(bounds: dict) -> FilterCallback:
    """
    Only pass results inside a bounding box.

    Args:
        bounds: Dictionary with min_lat, max_lat, min_lng, max_lng
    """

    def _filter(result: GeocodingResult) -> bool:
        return is_within_bounds(result.latitude, result.longitude, bounds)

    return _filter


# =============================================================================
# Pickers
# =============================================================================

def _precision_key(result: GeocodingResult) -> float:
    return result.precision if result.precision is not None else 0.0


def find_max_precision(results: List[GeocodingResult]) -> Optional[GeocodingResult]:
    """
    Highest-precision result; unknown precision counts as 0.

    The list is most-recent-first, so ties go to the later entry, which is
    the one received first.
    """
    if not results:
        return None
    return max(reversed(results), key=_precision_key)


def max_precision_picker(
    results: List[GeocodingResult],
    more_available: bool
) -> Optional[GeocodingResult]:
    """
    Wait until every provider has been asked, then pick the most precise result.

    Querying every provider can take comparatively long.
    """
    if more_available:
        return None
    return find_max_precision(results)


def consensus_picker(required_consensus: int, nearness: float) -> PickerCallback:
    """
    Require `required_consensus` results to agree on a location.

    Results agree when they fall strictly inside a square of half-width
    `nearness` (degrees) centred on one of them. The first result, in list
    order, whose square holds enough results wins; the most precise member
    of that square is returned. Without agreement the picker asks for more,
    and on the final call it gives up and returns None.

    Quadratic in the number of results, which is bounded by the number of
    providers.
    """
    if required_consensus < 1:
        raise ConfigurationError(
            f"required_consensus must be at least 1, got {required_consensus}"
        )
    if nearness <= 0:
        raise ConfigurationError(f"nearness must be positive, got {nearness}")

    def _picker(
        results: List[GeocodingResult],
        more_available: bool
    ) -> Optional[GeocodingResult]:
        for centre in results:
            cluster = [
                other for other in results
                if in_box(
                    centre.latitude,
                    centre.longitude,
                    nearness,
                    other.latitude,
                    other.longitude,
                )
            ]
            if len(cluster) >= required_consensus:
                return find_max_precision(cluster)

        # No consensus reached
        return None

    return _picker


# =============================================================================
# Preset lookup
# =============================================================================

_FILTERS = {
    FilterPreset.DEFAULT: None,
    FilterPreset.ALL: None,
}

_PICKERS = {
    PickerPreset.DEFAULT: None,
    PickerPreset.FIRST: None,
    PickerPreset.MAX_PRECISION: max_precision_picker,
}


def resolve_filter(
    value: Union[str, FilterPreset, FilterCallback, None]
) -> Optional[FilterCallback]:
    """
    Turn a preset name or callable into a filter. None means accept all.

    Raises:
        ConfigurationError: For unknown names and non-callables
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            preset = FilterPreset(value.strip())
        except ValueError:
            raise ConfigurationError(
                f"Unknown filter '{value}'. Choose from: {[p.value for p in FilterPreset]}"
            )
        return _FILTERS[preset]
    if callable(value):
        return value
    raise ConfigurationError(
        f"Filter must be a preset name or a callable, got {type(value).__name__}"
    )


def resolve_picker(
    value: Union[str, PickerPreset, PickerCallback, None]
) -> Optional[PickerCallback]:
    """
    Turn a preset name or callable into a picker. None means accept first.

    Raises:
        ConfigurationError: For unknown names and non-callables
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            preset = PickerPreset(value.strip())
        except ValueError:
            raise ConfigurationError(
                f"Unknown picker '{value}'. Choose from: {[p.value for p in PickerPreset]}"
            )
        return _PICKERS[preset]
    if callable(value):
        return value
    raise ConfigurationError(
        f"Picker must be a preset name or a callable, got {type(value).__name__}"
    )
