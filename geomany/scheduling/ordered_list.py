"""
Strict preferential ordering by weight.
"""

from typing import AbstractSet, Optional, Sequence, Set

from geomany.scheduling.base import Scheduler, ProviderWeight


class OrderedListScheduler(Scheduler):
    """
    Always offers the highest-weight provider not yet tried this cycle.

    Weights are ordered descending; equal weights keep registration order.
    Uniqueness is built in, so this policy does not need the uniqueness
    decorator.

    Usage:
        scheduler = OrderedListScheduler([
            ProviderWeight("google", 100),
            ProviderWeight("osm", 50),
        ])
        scheduler.reset_available()
        scheduler.get_next_unique()  # "google"
        scheduler.get_next_unique()  # "osm"
        scheduler.next_available()   # None
    """

    def __init__(self, providers: Sequence[ProviderWeight]):
        super().__init__(providers)
        # sorted() is stable, so ties stay in registration order
        self._ordered = [
            p.name for p in sorted(self._providers, key=lambda p: -p.weight)
        ]
        self._offered: Set[str] = set()

    def reset_available(self) -> None:
        self._offered = set()

    def select(self, exclude: AbstractSet[str]) -> Optional[str]:
        for name in self._ordered:
            if name in self._offered or name in exclude:
                continue
            self._offered.add(name)
            return name
        return None

    def remaining(self) -> Set[str]:
        return set(self._ordered) - self._offered
