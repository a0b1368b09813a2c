"""
Decorator guaranteeing each provider is offered at most once per cycle.
"""

import logging
from typing import AbstractSet, Optional, Set

from geomany.scheduling.base import Scheduler, SchedulerDecorator

logger = logging.getLogger(__name__)


class UniquenessScheduler(SchedulerDecorator):
    """
    Wraps a policy that may repeat itself (WRR, WeightedRandom).

    Keeps the set of names offered since the last `reset_available` and
    hands it to the wrapped policy as exclusions. A name that comes back
    anyway is logged and redrawn.
    """

    def __init__(self, inner: Scheduler):
        super().__init__(inner)
        self._offered: Set[str] = set()

    def reset_available(self) -> None:
        self._offered = set()
        super().reset_available()

    def next_available(self) -> Optional[float]:
        if not self.remaining():
            return None
        return self._inner.next_available()

    def select(self, exclude: AbstractSet[str]) -> Optional[str]:
        blocked = set(exclude) | self._offered

        # One draw per provider is enough for a policy that honours exclusions
        for _ in range(len(self._providers) + 1):
            name = self._inner.select(frozenset(blocked))
            if name is None:
                return None
            if name in blocked:
                logger.error(
                    f"{type(self._inner).__name__} offered excluded provider "
                    f"'{name}' during one cycle; redrawing"
                )
                continue
            self._offered.add(name)
            return name

        return None

    def remaining(self) -> Set[str]:
        return self._inner.remaining() - self._offered
