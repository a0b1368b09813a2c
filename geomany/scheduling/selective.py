"""
Exponential backoff for failing providers.

Providers that keep failing are taken out of rotation for a while. Each
consecutive failure doubles the timeout, up to a cap; a single success
clears it.

Usage:
    backoff = BackoffRegistry(base=1.0, cap=600.0)
    scheduler = SelectiveScheduler(UniquenessScheduler(wrr), backoff)
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import AbstractSet, Callable, Dict, Optional, Set

from geomany.scheduling.base import (
    Feedback,
    Scheduler,
    SchedulerDecorator,
    feedback_succeeded,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class BackoffState:
    """Failure bookkeeping for one provider."""

    consecutive_failures: int = 0
    available_at: float = 0.0


class BackoffRegistry:
    """
    Per-provider backoff state, keyed by provider name.

    Outlives individual requests and scheduler rebuilds. Every
    read-modify-write happens under one lock.
    """

    def __init__(
        self,
        base: float = 1.0,
        cap: float = 600.0,
        clock: Optional[Clock] = None
    ):
        if base <= 0 or cap < base:
            raise ValueError(f"Invalid backoff settings: base={base}, cap={cap}")
        self.base = base
        self.cap = cap
        self.clock = clock or time.monotonic
        self._states: Dict[str, BackoffState] = {}
        self._lock = threading.Lock()

    def delay_for(self, failures: int) -> float:
        """Timeout after `failures` consecutive failures."""
        if failures <= 0:
            return 0.0
        return min(self.base * 2 ** (failures - 1), self.cap)

    def record_failure(self, name: str) -> float:
        """Count a failure and return the new timeout in seconds."""
        with self._lock:
            state = self._states.setdefault(name, BackoffState())
            state.consecutive_failures += 1
            delay = self.delay_for(state.consecutive_failures)
            state.available_at = self.clock() + delay
            return delay

    def record_success(self, name: str) -> None:
        with self._lock:
            self._states[name] = BackoffState()

    def failures(self, name: str) -> int:
        with self._lock:
            state = self._states.get(name)
            return state.consecutive_failures if state else 0

    def remaining_timeout(self, name: str) -> float:
        """Seconds until `name` may be tried again (0.0 if available now)."""
        with self._lock:
            state = self._states.get(name)
            if state is None:
                return 0.0
            return max(0.0, state.available_at - self.clock())

    def is_available(self, name: str) -> bool:
        return self.remaining_timeout(name) == 0.0


class SelectiveScheduler(SchedulerDecorator):
    """
    Suppresses providers that are currently timed out.

    `next_available` is 0 while some untried provider is available, the
    shortest remaining timeout when all untried providers are timed out,
    and None when nothing is left to try this cycle.
    """

    def __init__(self, inner: Scheduler, backoff: Optional[BackoffRegistry] = None):
        super().__init__(inner)
        self.backoff = backoff or BackoffRegistry()

    def _timed_out(self) -> Set[str]:
        return {
            name for name in self._inner.remaining()
            if not self.backoff.is_available(name)
        }

    def next_available(self) -> Optional[float]:
        inner_wait = self._inner.next_available()
        if inner_wait is None:
            return None

        remaining = self._inner.remaining()
        if not remaining:
            return None

        wait = min(self.backoff.remaining_timeout(name) for name in remaining)
        return max(inner_wait, wait)

    def select(self, exclude: AbstractSet[str]) -> Optional[str]:
        return self._inner.select(frozenset(exclude) | self._timed_out())

    def process_feedback(self, provider_name: str, feedback: Feedback) -> None:
        if feedback_succeeded(feedback):
            if self.backoff.failures(provider_name):
                logger.info(f"{provider_name}: Recovered, clearing backoff")
            self.backoff.record_success(provider_name)
        else:
            delay = self.backoff.record_failure(provider_name)
            logger.warning(
                f"{provider_name}: Status {feedback.get('status_code')}, "
                f"backing off for {delay:.1f}s"
            )
        super().process_feedback(provider_name, feedback)
