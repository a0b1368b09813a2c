"""
Weight-proportional scheduling policies.

Neither policy remembers what it offered during a cycle; both are meant to
be wrapped in UniquenessScheduler, which passes the already-offered names in
as exclusions.
"""

import random
from typing import AbstractSet, Dict, Optional, Sequence

from geomany.scheduling.base import Scheduler, ProviderWeight


class WeightedRoundRobinScheduler(Scheduler):
    """
    Weighted round-robin without per-call randomness.

    Every selection adds each provider's weight to its running credit, picks
    the allowed provider with the highest credit and takes the total weight
    off its credit. Without exclusions, every run of sum(weights) selections
    picks each provider exactly `weight` times, interleaved rather than in
    bursts.
    """

    def __init__(self, providers: Sequence[ProviderWeight]):
        super().__init__(providers)
        self._credit: Dict[str, int] = {p.name: 0 for p in self._providers}

    def select(self, exclude: AbstractSet[str]) -> Optional[str]:
        allowed = [p for p in self._providers if p.name not in exclude]
        if not allowed:
            return None

        total = 0
        for provider in self._providers:
            self._credit[provider.name] += provider.weight
            total += provider.weight

        # max() keeps the first of equal credits, i.e. registration order
        chosen = max(allowed, key=lambda p: self._credit[p.name])
        self._credit[chosen.name] -= total
        return chosen.name


class WeightedRandomScheduler(Scheduler):
    """
    Picks an allowed provider at random, with probability proportional to
    its weight. Weights are renormalized over the allowed set on every draw.
    """

    def __init__(
        self,
        providers: Sequence[ProviderWeight],
        rng: Optional[random.Random] = None
    ):
        super().__init__(providers)
        self._rng = rng or random.Random()

    def select(self, exclude: AbstractSet[str]) -> Optional[str]:
        allowed = [p for p in self._providers if p.name not in exclude]
        if not allowed:
            return None

        chosen = self._rng.choices(
            allowed, weights=[p.weight for p in allowed], k=1
        )[0]
        return chosen.name
