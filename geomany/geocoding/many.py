"""
GeocoderMany: one geocode call over many providers.

Ties together the provider registry, a scheduler, the filter/picker
pipeline and an optional cache.

Usage:
    from geomany.geocoding import GeocoderMany, NominatimGeocoder, GoogleGeocoder

    geocoder = GeocoderMany(scheduler_type="OrderedList", use_timeouts=True)
    geocoder.add_geocoder(NominatimGeocoder(), daily_limit=5000)
    geocoder.add_geocoder(GoogleGeocoder(), daily_limit=2500)
    geocoder.set_picker("max_precision")

    result = await geocoder.geocode("82 Clerkenwell Road, London, EC1M 5RF")
    if result:
        print(result.address, result.latitude, result.longitude)
"""

import asyncio
import logging
import random
from dataclasses import dataclass, field, replace
from typing import (
    Any, Awaitable, Callable, Dict, Iterable, List, Optional, Set, Union
)

from geomany.core import settings
from geomany.geocoding.base import (
    BaseGeocoder,
    GeocodingError,
    GeocodingResult,
    ConfigurationError,
    CacheError,
    ProviderReply,
    is_success,
    STATUS_OK,
    STATUS_CACHED,
    STATUS_NOT_FOUND,
    STATUS_EXHAUSTED,
    STATUS_PROVIDER_ERROR,
)
from geomany.geocoding.callbacks import (
    FilterCallback,
    PickerCallback,
    resolve_filter,
    resolve_picker,
)
from geomany.geocoding.response import GeocodingResponse
from geomany.scheduling import (
    BackoffRegistry,
    ProviderWeight,
    Scheduler,
    SchedulerType,
    build_scheduler,
)

logger = logging.getLogger(__name__)

_CACHE_CHECK_KEY = "__geomany_cache_check__"
_CACHE_CHECK_VALUE = "test"


@dataclass
class GeocodeOutcome:
    """The accepted result of one geocode call, with how it was reached."""

    result: Optional[GeocodingResult]
    status_code: int
    responses: List[GeocodingResponse] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.result is not None


class GeocoderMany:
    """
    Geocode through several providers with failover and result picking.

    Options:
        scheduler_type: "WRR" (default), "OrderedList" or "WeightedRandom"
        use_timeouts: Back off providers that keep failing (default: False)
        cache: Object with get/set; checked with a round-trip on construction
        normalize_location: Maps a location to its cache key
        cache_misses: Also cache "not found" answers (default: settings.CACHE_MISSES)
        backoff_base / backoff_max: Backoff timeouts in seconds
        clock / sleep / rng: Injectable time, sleep and randomness sources

    Result status codes:
        200   Success
        210   Success (from cache)
        401   Unable to find location
        402   All providers failed, were timed out or skipped
    """

    def __init__(
        self,
        scheduler_type: Union[str, SchedulerType] = SchedulerType.WRR,
        use_timeouts: bool = False,
        cache: Optional[Any] = None,
        normalize_location: Optional[Callable[[str], str]] = None,
        cache_misses: Optional[bool] = None,
        backoff_base: Optional[float] = None,
        backoff_max: Optional[float] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        rng: Optional[random.Random] = None,
    ):
        try:
            self.scheduler_type = SchedulerType.parse(scheduler_type)
        except ValueError:
            raise ConfigurationError(
                f"Unsupported scheduler type: {scheduler_type}. "
                f"Choose from: {[t.value for t in SchedulerType]}"
            )

        self.use_timeouts = use_timeouts
        self.normalize_location = normalize_location
        self.cache_misses = settings.CACHE_MISSES if cache_misses is None else cache_misses

        try:
            self.backoff = BackoffRegistry(
                base=settings.BACKOFF_BASE_SECONDS if backoff_base is None else backoff_base,
                cap=settings.BACKOFF_MAX_SECONDS if backoff_max is None else backoff_max,
                clock=clock,
            )
        except ValueError as e:
            raise ConfigurationError(str(e))

        self._sleep = sleep or asyncio.sleep
        self._rng = rng
        self._geocoders: Dict[str, BaseGeocoder] = {}
        self._weights: Dict[str, int] = {}
        self._filter: Optional[FilterCallback] = None
        self._picker: Optional[PickerCallback] = None
        self._lock = asyncio.Lock()

        self.cache = None
        if cache is not None:
            self._set_caching_object(cache)

        self._recalculate_geocoder_stats()

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def geocoders(self) -> List[str]:
        """Names of the registered providers, in registration order."""
        return list(self._geocoders)

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    def add_geocoder(self, geocoder: BaseGeocoder, daily_limit: Optional[int] = None) -> bool:
        """
        Register a provider.

        If the same provider name is added twice, only the first registration
        is used; later ones are ignored with a warning.

        Args:
            geocoder: Provider instance
            daily_limit: Requests per 24 hours, used as the scheduling weight
                         (defaults to the provider's own daily_limit)

        Returns:
            True if the provider was added

        Raises:
            ConfigurationError: If the daily limit is not a positive integer
        """
        name = geocoder.provider_name
        if name in self._geocoders:
            logger.warning(f"Duplicate geocoder ({name}) ignored")
            return False

        weight = geocoder.daily_limit if daily_limit is None else daily_limit
        if isinstance(weight, bool) or not isinstance(weight, int) or weight <= 0:
            raise ConfigurationError(
                f"daily_limit must be a positive integer, got {weight!r}",
                provider=name,
            )

        self._geocoders[name] = geocoder
        self._weights[name] = weight
        self._recalculate_geocoder_stats()
        logger.info(f"Added geocoder {name} (daily limit {weight})")
        return True

    def set_filter(self, value) -> None:
        """
        Set the result filter: a callable, or "" / "all" to pass everything.

        Raises:
            ConfigurationError: For unknown names and non-callables
        """
        self._filter = resolve_filter(value)

    def set_picker(self, value) -> None:
        """
        Set the result picker: a callable, "" / "first" to accept the first
        valid result, or "max_precision".

        Raises:
            ConfigurationError: For unknown names and non-callables
        """
        self._picker = resolve_picker(value)

    # =========================================================================
    # Geocoding
    # =========================================================================

    async def geocode(
        self,
        location: str,
        no_cache: bool = False,
        wait_for_retries: bool = False,
        skip: Optional[Iterable[str]] = None,
    ) -> Optional[GeocodingResult]:
        """
        Geocode a location string.

        Args:
            location: Location string to pass to the providers
            no_cache: Neither read nor write the cache
            wait_for_retries: Sleep until backed-off providers may be retried
            skip: Provider names not to query for this call

        Returns:
            The accepted GeocodingResult, or None
        """
        outcome = await self.geocode_detailed(
            location,
            no_cache=no_cache,
            wait_for_retries=wait_for_retries,
            skip=skip,
        )
        return outcome.result

    async def geocode_detailed(
        self,
        location: str,
        no_cache: bool = False,
        wait_for_retries: bool = False,
        skip: Optional[Iterable[str]] = None,
    ) -> GeocodeOutcome:
        """Like `geocode`, but also report the status code and provider responses."""
        if not location or not location.strip():
            raise GeocodingError("geocode requires a location")

        use_cache = self.cache is not None and not no_cache

        if use_cache:
            cached = self._get_from_cache(location)
            if cached is not None:
                return cached

        if not self._geocoders:
            logger.warning("geocode called, but no geocoders have been added")
            return GeocodeOutcome(result=None, status_code=STATUS_EXHAUSTED)

        async with self._lock:
            outcome = await self._dispatch(location, wait_for_retries, set(skip or ()))

        if use_cache:
            self._set_in_cache(location, outcome)

        return outcome

    async def geocode_batch(
        self,
        locations: Iterable[str],
        **kwargs
    ) -> Dict[str, Optional[GeocodingResult]]:
        """
        Geocode several locations one after another.

        Returns:
            Dict mapping each location to its result or None
        """
        results = {}
        for location in locations:
            results[location] = await self.geocode(location, **kwargs)
        return results

    async def _dispatch(
        self,
        location: str,
        wait_for_retries: bool,
        skip: Set[str],
    ) -> GeocodeOutcome:
        scheduler = self._scheduler
        candidates: List[GeocodingResult] = []
        responses: List[GeocodingResponse] = []
        attempted: Set[str] = set()
        accepted: Optional[GeocodingResult] = None
        answered = False

        # We have not yet tried any geocoders for this query
        scheduler.reset_available()

        while accepted is None:
            waiting_time = scheduler.next_available()
            if waiting_time is None:
                break

            if waiting_time > 0 and wait_for_retries:
                logger.debug(f"Waiting {waiting_time:.2f}s for a provider to come back")
                await self._sleep(waiting_time)

            name = scheduler.get_next_unique()
            if name is None:
                if wait_for_retries and waiting_time > 0:
                    continue
                if waiting_time > 0:
                    logger.info(f"All remaining geocoders are backed off for {location}")
                else:
                    logger.error("Scheduler reported availability but offered no geocoder")
                break

            if name in attempted:
                logger.error(
                    f"The scheduler is bad - it returned {name} twice "
                    f"between calls to reset_available"
                )
                break
            attempted.add(name)

            if name in skip:
                logger.debug(f"Skipping geocoder {name}")
                continue

            geocoder = self._geocoders[name]
            response = await self._call_geocoder(geocoder, location)

            if response is None:
                scheduler.process_feedback(name, {"status_code": STATUS_PROVIDER_ERROR})
                continue

            responses.append(response)
            scheduler.process_feedback(name, {"status_code": response.status_code})

            if not is_success(response.status_code):
                logger.debug(f"{name}: Status {response.status_code} for {location}")
                continue
            answered = True

            passed = [r for r in response.results if self._passes_filter(r)]
            if not passed:
                continue

            if self._picker is None:
                # No picker? Just accept the first valid result.
                accepted = passed[0]
                break

            for result in passed:
                candidates.insert(0, result)

            more_available = scheduler.next_available() is not None
            accepted = self._picker(candidates, more_available)

        # Out of geocoders: give the picker one last chance
        if self._picker is not None and accepted is None:
            accepted = self._picker(candidates, False)

        if accepted is not None:
            status_code = STATUS_OK
        elif answered:
            status_code = STATUS_NOT_FOUND
        else:
            status_code = STATUS_EXHAUSTED

        return GeocodeOutcome(result=accepted, status_code=status_code, responses=responses)

    async def _call_geocoder(
        self,
        geocoder: BaseGeocoder,
        location: str
    ) -> Optional[GeocodingResponse]:
        """Query one provider; None when it raised or replied with garbage."""
        name = geocoder.provider_name
        try:
            reply = await geocoder.geocode(location)
        except Exception as e:
            logger.error(f"{name}: Error geocoding {location}: {e}")
            return None

        if not isinstance(reply, ProviderReply):
            logger.error(f"{name}: Returned {type(reply).__name__} instead of a ProviderReply")
            return None

        try:
            return GeocodingResponse.from_reply(location, geocoder, reply)
        except Exception as e:
            logger.error(f"{name}: Could not read reply for {location}: {e}")
            return None

    def _passes_filter(self, result: GeocodingResult) -> bool:
        return self._filter is None or bool(self._filter(result))

    def _recalculate_geocoder_stats(self) -> None:
        """Rebuild the scheduler for the current providers; backoff history is kept."""
        providers = [
            ProviderWeight(name=name, weight=self._weights[name])
            for name in self._geocoders
        ]
        self._scheduler = build_scheduler(
            self.scheduler_type,
            providers,
            use_timeouts=self.use_timeouts,
            backoff=self.backoff,
            rng=self._rng,
        )

    # =========================================================================
    # Caching
    # =========================================================================

    def _set_caching_object(self, cache: Any) -> None:
        self._test_cache_object(cache)
        self.cache = cache

    def _test_cache_object(self, cache: Any) -> None:
        """Fail fast unless the cache hands back what it was given."""
        try:
            cache.set(_CACHE_CHECK_KEY, _CACHE_CHECK_VALUE)
            round_trip = cache.get(_CACHE_CHECK_KEY)
        except Exception as e:
            raise CacheError(
                f"Unable to use cache object {type(cache).__name__}: {e}"
            ) from e

        if round_trip != _CACHE_CHECK_VALUE:
            raise CacheError(
                f"Unable to use cache object {type(cache).__name__}: "
                f"get returned {round_trip!r} after set"
            )

        delete = getattr(cache, "delete", None)
        if callable(delete):
            try:
                delete(_CACHE_CHECK_KEY)
            except Exception as e:
                raise CacheError(
                    f"Unable to use cache object {type(cache).__name__}: {e}"
                ) from e

    def _cache_key(self, location: str) -> str:
        if self.normalize_location:
            normalized = self.normalize_location(location)
            return normalized or location
        return location

    def _get_from_cache(self, location: str) -> Optional[GeocodeOutcome]:
        key = self._cache_key(location)
        try:
            entry = self.cache.get(key)
        except Exception as e:
            logger.warning(f"Cache read error: {e}")
            return None

        if not entry:
            return None

        if isinstance(entry, GeocodingResult):
            result = entry
        elif not isinstance(entry, dict):
            logger.warning(f"Ignoring unreadable cache entry for {location}")
            return None
        elif entry.get("latitude") is None:
            if entry.get("status_code") == STATUS_NOT_FOUND:
                logger.debug(f"Cached miss for {location}")
                return GeocodeOutcome(result=None, status_code=STATUS_NOT_FOUND)
            return None
        else:
            try:
                result = GeocodingResult.from_dict(entry)
            except (TypeError, ValueError) as e:
                logger.warning(f"Ignoring unreadable cache entry for {location}: {e}")
                return None

        logger.debug(f"Cache hit for {location}")
        return GeocodeOutcome(
            result=replace(result, status_code=STATUS_CACHED),
            status_code=STATUS_CACHED,
        )

    def _set_in_cache(self, location: str, outcome: GeocodeOutcome) -> None:
        if outcome.result is not None:
            entry = outcome.result.as_dict
        elif outcome.status_code == STATUS_NOT_FOUND and self.cache_misses:
            entry = {"status_code": STATUS_NOT_FOUND}
        else:
            return

        try:
            self.cache.set(self._cache_key(location), entry)
        except Exception as e:
            logger.warning(f"Cache write error: {e}")
