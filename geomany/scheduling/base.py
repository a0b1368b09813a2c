"""
Scheduler interface shared by every policy and decorator.

A scheduler decides which provider to try next for a single geocoding
request (a "cycle"). The orchestrator drives it like this:

    scheduler.reset_available()
    while (wait := scheduler.next_available()) is not None:
        name = scheduler.get_next_unique()
        ...
        scheduler.process_feedback(name, {"status_code": 200})

Decorators (uniqueness, backoff) implement the same interface and hold
another scheduler, so they can be stacked in any order.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Dict, List, Optional, Sequence, Set

logger = logging.getLogger(__name__)

Feedback = Dict[str, int]


class SchedulerType(str, Enum):
    """Built-in scheduling policies."""

    ORDERED_LIST = "OrderedList"
    WRR = "WRR"
    WEIGHTED_RANDOM = "WeightedRandom"

    @classmethod
    def parse(cls, value) -> "SchedulerType":
        """Accept an enum member, its value, or "WeightedRoundRobin"."""
        if isinstance(value, cls):
            return value
        name = str(value).strip()
        if name == "WeightedRoundRobin":
            return cls.WRR
        return cls(name)


@dataclass(frozen=True)
class ProviderWeight:
    """A registered provider as the scheduler sees it."""

    name: str
    weight: int


def feedback_succeeded(feedback: Feedback) -> bool:
    """True when the reported status code is in the 2xx range."""
    status_code = feedback.get("status_code", 0)
    return 200 <= status_code < 300


class Scheduler(ABC):
    """
    Base class for scheduling policies.

    Subclasses must implement:
    - select(): Pick the next provider outside an exclusion set

    Optional overrides:
    - reset_available(): Clear per-cycle state
    - next_available(): Seconds until something may be tried, None when done
    - remaining(): Providers not yet offered this cycle
    - process_feedback(): React to the outcome of an attempt
    """

    def __init__(self, providers: Sequence[ProviderWeight]):
        seen = set()
        for provider in providers:
            if provider.name in seen:
                raise ValueError(f"Duplicate provider: {provider.name}")
            if provider.weight <= 0:
                raise ValueError(
                    f"Provider {provider.name} needs a positive weight, got {provider.weight}"
                )
            seen.add(provider.name)
        self._providers = list(providers)

    @property
    def providers(self) -> List[ProviderWeight]:
        return list(self._providers)

    @property
    def names(self) -> List[str]:
        return [p.name for p in self._providers]

    def reset_available(self) -> None:
        """Start a new cycle."""
        pass

    def next_available(self) -> Optional[float]:
        """
        Minimum time in seconds before some untried provider may be eligible.

        Returns None once no provider can be offered again this cycle.
        """
        return 0.0 if self.remaining() else None

    def get_next_unique(self) -> Optional[str]:
        """Name of the next provider to try, or None if nothing is on offer."""
        return self.select(frozenset())

    @abstractmethod
    def select(self, exclude: AbstractSet[str]) -> Optional[str]:
        """Pick the next provider whose name is not in `exclude`."""
        pass

    def remaining(self) -> Set[str]:
        """Providers that may still be offered in the current cycle."""
        return set(self.names)

    def process_feedback(self, provider_name: str, feedback: Feedback) -> None:
        """Report how the last attempt with `provider_name` went."""
        pass


class SchedulerDecorator(Scheduler):
    """A scheduler that wraps another one and forwards by default."""

    def __init__(self, inner: Scheduler):
        super().__init__(inner.providers)
        self._inner = inner

    @property
    def inner(self) -> Scheduler:
        return self._inner

    def reset_available(self) -> None:
        self._inner.reset_available()

    def next_available(self) -> Optional[float]:
        return self._inner.next_available()

    def select(self, exclude: AbstractSet[str]) -> Optional[str]:
        return self._inner.select(exclude)

    def remaining(self) -> Set[str]:
        return self._inner.remaining()

    def process_feedback(self, provider_name: str, feedback: Feedback) -> None:
        self._inner.process_feedback(provider_name, feedback)
