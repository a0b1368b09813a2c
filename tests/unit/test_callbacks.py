"""
Unit tests for result filters and pickers.
"""

import pytest

from geomany.geocoding.base import ConfigurationError, GeocodingResult
from geomany.geocoding.callbacks import (
    FilterPreset,
    PickerPreset,
    bounds_filter,
    consensus_picker,
    country_filter,
    find_max_precision,
    max_precision_picker,
    min_precision_filter,
    resolve_filter,
    resolve_picker,
)


def result(lat, lng, precision=None, country=None, provider="test"):
    return GeocodingResult(
        latitude=lat,
        longitude=lng,
        precision=precision,
        country=country,
        provider=provider,
    )


class TestFilters:
    """Tests for the stock filters."""

    def test_min_precision(self):
        check = min_precision_filter(0.5)
        assert check(result(1, 1, precision=0.5))
        assert check(result(1, 1, precision=0.9))
        assert not check(result(1, 1, precision=0.3))

    def test_min_precision_rejects_unknown(self):
        assert not min_precision_filter(0.0)(result(1, 1))

    def test_country_exact_match(self):
        check = country_filter("United Kingdom")
        assert check(result(1, 1, country="United Kingdom"))
        assert not check(result(1, 1, country="united kingdom"))
        assert not check(result(1, 1, country="UK"))
        assert not check(result(1, 1))

    def test_bounds(self):
        check = bounds_filter({"min_lat": 50, "max_lat": 52, "min_lng": -1, "max_lng": 1})
        assert check(result(51, 0))
        assert check(result(52, 1))
        assert not check(result(53, 0))


class TestMaxPrecision:
    """Tests for the max_precision picker."""

    def test_waits_for_last_call(self):
        low, high, lowest = result(1, 1, 0.4), result(2, 2, 0.9), result(3, 3, 0.2)
        candidates = []

        candidates.insert(0, low)
        assert max_precision_picker(candidates, True) is None
        candidates.insert(0, high)
        assert max_precision_picker(candidates, True) is None
        candidates.insert(0, lowest)
        assert max_precision_picker(candidates, False) is high

    def test_unknown_precision_counts_as_zero(self):
        unknown, known = result(1, 1), result(2, 2, 0.1)
        assert find_max_precision([unknown, known]) is known

    def test_ties_go_to_earliest_received(self):
        # most recent first: `earlier` arrived before `later`
        later, earlier = result(1, 1, 0.5), result(2, 2, 0.5)
        assert find_max_precision([later, earlier]) is earlier

    def test_empty(self):
        assert max_precision_picker([], False) is None


class TestConsensus:
    """Tests for the consensus picker."""

    def test_accepts_once_two_agree(self):
        picker = consensus_picker(required_consensus=2, nearness=0.1)
        origin = result(0, 0, 0.4)
        nearby = result(0.05, 0.05, 0.8)
        distant = result(5, 5, 1.0)

        candidates = [origin]
        assert picker(candidates, True) is None

        candidates.insert(0, nearby)
        assert picker(candidates, True) is nearby

        candidates.insert(0, distant)
        assert picker(candidates, False) is nearby

    def test_never_accepts_without_enough_agreement(self):
        picker = consensus_picker(required_consensus=3, nearness=0.1)
        candidates = [result(5, 5, 1.0), result(0.05, 0.05, 0.8), result(0, 0, 0.4)]
        assert picker(candidates, True) is None
        assert picker(candidates, False) is None

    def test_boundary_does_not_count(self):
        picker = consensus_picker(required_consensus=2, nearness=0.5)
        candidates = [result(0, 0), result(0.5, 0)]
        assert picker(candidates, False) is None

    def test_first_sufficient_cluster_wins(self):
        picker = consensus_picker(required_consensus=2, nearness=0.1)
        pair_a = [result(10, 10, 0.2), result(10.01, 10.01, 0.3)]
        pair_b = [result(20, 20, 0.9), result(20.01, 20.01, 0.95)]
        assert picker(pair_a + pair_b, False) is pair_a[1]

    def test_single_result_consensus(self):
        picker = consensus_picker(required_consensus=1, nearness=0.1)
        only = result(1, 1)
        assert picker([only], True) is only

    @pytest.mark.parametrize("required,nearness", [(0, 0.1), (2, 0), (2, -1)])
    def test_invalid_arguments(self, required, nearness):
        with pytest.raises(ConfigurationError):
            consensus_picker(required, nearness)


class TestPresets:
    """Tests for preset name resolution."""

    @pytest.mark.parametrize("name", ["", "all", FilterPreset.ALL])
    def test_accept_all_filters(self, name):
        assert resolve_filter(name) is None

    @pytest.mark.parametrize("name", ["", "first", PickerPreset.FIRST])
    def test_first_pickers(self, name):
        assert resolve_picker(name) is None

    def test_max_precision_preset(self):
        assert resolve_picker("max_precision") is max_precision_picker

    def test_callables_pass_through(self):
        check = min_precision_filter(0.1)
        assert resolve_filter(check) is check
        assert resolve_picker(max_precision_picker) is max_precision_picker

    def test_unknown_names(self):
        with pytest.raises(ConfigurationError):
            resolve_filter("strict")
        with pytest.raises(ConfigurationError):
            resolve_picker("best")

    def test_non_callables(self):
        with pytest.raises(ConfigurationError):
            resolve_filter(42)
        with pytest.raises(ConfigurationError):
            resolve_picker(["first"])
