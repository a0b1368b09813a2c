"""Shared test fixtures and configuration."""

import os
from typing import Any, Dict, List, Optional, Union

import pytest

# Keep tests independent of any local .env
os.environ.setdefault("GOOGLE_GEOCODING_API_KEY", "")
os.environ.setdefault("CACHE_MISSES", "false")

from geomany.geocoding.base import BaseGeocoder, ProviderReply


def record(
    latitude: Optional[float],
    longitude: Optional[float],
    precision: Optional[float] = None,
    country: Optional[str] = None,
    address: Optional[str] = None,
) -> Dict[str, Any]:
    """A raw reply already in the common record shape."""
    return {
        "latitude": latitude,
        "longitude": longitude,
        "precision": precision,
        "country": country,
        "address": address,
    }


def reply(*records: Dict[str, Any], status_code: int = 200) -> ProviderReply:
    return ProviderReply(records=list(records), status_code=status_code)


class FakeGeocoder(BaseGeocoder):
    """
    Provider double. Replays `replies` in order (the last one repeats);
    an Exception in the list is raised instead of returned.
    """

    def __init__(
        self,
        name: str,
        replies: Optional[List[Union[ProviderReply, Exception, Any]]] = None,
        daily_limit: int = 100,
    ):
        super().__init__(daily_limit)
        self._name = name
        self._replies = list(replies) if replies else [reply(status_code=200)]
        self.calls: List[str] = []

    @property
    def provider_name(self) -> str:
        return self._name

    async def geocode(self, location: str) -> ProviderReply:
        self.calls.append(location)
        if len(self._replies) > 1:
            outcome = self._replies.pop(0)
        else:
            outcome = self._replies[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def normalize(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        return raw


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSleep:
    """Async sleep that advances a FakeClock instead of waiting."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.clock.advance(seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_sleep(clock: FakeClock) -> FakeSleep:
    return FakeSleep(clock)
