# public facade: cached city weather for one credential, up to 10 cities for 10 minutes
# POLLING instances refresh every cached city in the background once an interval is set
# get instances from InstanceRegistry so each credential has exactly one

from __future__ import annotations
import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Tuple

from . import service
from .cache import WeatherCache
from .client import OpenWeatherClient
from .config import Settings
from .errors import InvalidArgumentError
from .models import GeoLocation, Mode
from .scheduler import MAX_INTERVAL_MS, MIN_INTERVAL_MS, PollingScheduler

logger = logging.getLogger(__name__)


def now_millis() -> int:
    return int(time.time() * 1000)


class CityWeatherSDK:
    def __init__(
        self,
        credential: str,
        mode: Mode = Mode.ON_DEMAND,
        client: OpenWeatherClient | None = None,
        settings: Settings | None = None,
        clock: Callable[[], int] = now_millis,
    ):
        if not credential:
            raise InvalidArgumentError("API key cannot be empty")
        if not isinstance(mode, Mode):
            raise InvalidArgumentError(f"mode must be a Mode (got {mode!r})")

        self._credential = credential
        self._mode = mode
        self._client = client or OpenWeatherClient(credential, settings=settings)
        self._clock = clock
        self._cache = WeatherCache()

        # per-city locks so a foreground miss and a sweep never fetch the same city twice
        self._locks_guard = threading.Lock()
        self._city_locks: Dict[str, Tuple[threading.Lock, int]] = {}

        self._scheduler: PollingScheduler | None = None
        if mode is Mode.POLLING:
            self._scheduler = PollingScheduler(self._cache.cities, self._refresh_city)

    @property
    def credential(self) -> str:
        return self._credential

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def cache(self) -> WeatherCache:
        return self._cache

    @property
    def polling_interval_ms(self) -> int | None:
        return self._scheduler.interval_ms if self._scheduler else None

    @property
    def is_polling(self) -> bool:
        return self._scheduler is not None and self._scheduler.is_running

    def set_polling_interval(self, interval_ms: int) -> None:
        # starts background refresh, only the first call takes effect
        if self._mode is not Mode.POLLING:
            raise InvalidArgumentError("Polling interval can only be set in POLLING mode")
        if isinstance(interval_ms, bool) or not isinstance(interval_ms, int):
            raise InvalidArgumentError(f"Polling interval must be an integer number of ms (got {interval_ms!r})")
        if not MIN_INTERVAL_MS <= interval_ms <= MAX_INTERVAL_MS:
            raise InvalidArgumentError("Polling interval must be between 1 ms and 60 minutes")
        self._scheduler.start(interval_ms)

    def get_weather_by_city(self, city: str) -> Dict[str, Any]:
        # fetch errors (CityNotFoundError, DataError, TransportError) reach the caller
        _require_city(city)
        record = self._valid_record(city)
        if record is not None:
            return record

        with self._city_lock(city):
            # another caller may have fetched it while we waited
            record = self._valid_record(city)
            if record is not None:
                return record
            logger.debug("cache miss for %r", city)
            record = service.fetch_weather(self._client, city)
            self._cache.put(city, record, self._clock())
            return record

    def get_geo_data(self, city: str) -> GeoLocation:
        _require_city(city)
        return service.fetch_geo(self._client, city)

    def get_cached_weather(self, city: str) -> Dict[str, Any] | None:
        return self._valid_record(city)

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_cache_size(self) -> int:
        return self._cache.size()

    def shutdown(self) -> None:
        if self._scheduler is not None and not self._scheduler.is_stopped:
            self._scheduler.stop()
            logger.debug("polling stopped")

    def __enter__(self) -> "CityWeatherSDK":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return f"CityWeatherSDK(mode={self._mode.name}, cached={self._cache.size()})"

    def _valid_record(self, city: str) -> Dict[str, Any] | None:
        entry = self._cache.get(city)
        if entry is None or self._cache.is_expired(entry, self._clock()):
            return None
        return entry.record

    def _refresh_city(self, city: str) -> None:
        # sweep path, errors propagate to the scheduler which logs them
        with self._city_lock(city):
            record = service.fetch_weather(self._client, city)
            self._cache.put(city, record, self._clock())

    @contextmanager
    def _city_lock(self, city: str) -> Iterator[None]:
        with self._locks_guard:
            lock, users = self._city_locks.get(city, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._city_locks[city] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._locks_guard:
                lock, users = self._city_locks[city]
                if users == 1:
                    del self._city_locks[city]
                else:
                    self._city_locks[city] = (lock, users - 1)


def _require_city(city: str) -> None:
    if not isinstance(city, str) or not city.strip():
        raise InvalidArgumentError("City name cannot be empty")
