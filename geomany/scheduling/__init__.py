"""
Scheduling policies deciding which geocoding provider to try next.

Policies:
- OrderedList: strict priority by weight
- WRR: weighted round-robin
- WeightedRandom: random, proportional to weight

Decorators:
- UniquenessScheduler: each provider at most once per request
- SelectiveScheduler: exponential backoff for failing providers

Usage:
    from geomany.scheduling import build_scheduler, ProviderWeight

    scheduler = build_scheduler(
        "WRR",
        [ProviderWeight("google", 2500), ProviderWeight("osm", 5000)],
        use_timeouts=True,
    )
"""

import random
from typing import Optional, Sequence, Union

from geomany.scheduling.base import (
    Scheduler,
    SchedulerDecorator,
    SchedulerType,
    ProviderWeight,
    feedback_succeeded,
)
from geomany.scheduling.ordered_list import OrderedListScheduler
from geomany.scheduling.weighted import (
    WeightedRoundRobinScheduler,
    WeightedRandomScheduler,
)
from geomany.scheduling.uniqueness import UniquenessScheduler
from geomany.scheduling.selective import (
    BackoffState,
    BackoffRegistry,
    SelectiveScheduler,
)


def build_scheduler(
    scheduler_type: Union[str, SchedulerType],
    providers: Sequence[ProviderWeight],
    use_timeouts: bool = False,
    backoff: Optional[BackoffRegistry] = None,
    rng: Optional[random.Random] = None,
) -> Scheduler:
    """
    Assemble a scheduler for the given providers.

    WRR and WeightedRandom are wrapped in UniquenessScheduler; with
    `use_timeouts` the result is further wrapped in SelectiveScheduler.

    Raises:
        ValueError: If the scheduler type is unknown
    """
    kind = SchedulerType.parse(scheduler_type)

    if kind is SchedulerType.ORDERED_LIST:
        scheduler: Scheduler = OrderedListScheduler(providers)
    elif kind is SchedulerType.WRR:
        scheduler = UniquenessScheduler(WeightedRoundRobinScheduler(providers))
    else:
        scheduler = UniquenessScheduler(WeightedRandomScheduler(providers, rng=rng))

    if use_timeouts:
        scheduler = SelectiveScheduler(scheduler, backoff)

    return scheduler


__all__ = [
    "Scheduler",
    "SchedulerDecorator",
    "SchedulerType",
    "ProviderWeight",
    "feedback_succeeded",
    "OrderedListScheduler",
    "WeightedRoundRobinScheduler",
    "WeightedRandomScheduler",
    "UniquenessScheduler",
    "BackoffState",
    "BackoffRegistry",
    "SelectiveScheduler",
    "build_scheduler",
]
