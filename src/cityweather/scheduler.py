# background refresh for POLLING instances, one apscheduler BackgroundScheduler each
# the interval job fires immediately, then at a fixed rate; sweeps never overlap
# states: stopped -> running -> stopped, the last stop is terminal and the first interval wins

from __future__ import annotations
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, List
from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

MIN_INTERVAL_MS = 1
MAX_INTERVAL_MS = 60 * 60 * 1000


class PollingScheduler:
    # cities() snapshots the cached city names, refresh(city) re-fetches one of them

    def __init__(self, cities: Callable[[], List[str]], refresh: Callable[[str], Any], name: str = "cityweather-poller"):
        self._cities = cities
        self._refresh = refresh
        self._name = name
        self._lock = threading.Lock()
        self._scheduler: BackgroundScheduler | None = None
        self._stopped = False
        self._interval_ms: int | None = None

    @property
    def interval_ms(self) -> int | None:
        return self._interval_ms

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and not self._stopped

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    def start(self, interval_ms: int) -> bool:
        # False when already running or already shut down
        with self._lock:
            if self._stopped:
                logger.warning("%s: scheduler was shut down, not restarting", self._name)
                return False
            if self._scheduler is not None:
                logger.debug("%s: already polling every %sms, ignoring %sms", self._name, self._interval_ms, interval_ms)
                return False

            scheduler = BackgroundScheduler(timezone="UTC", daemon=True)
            scheduler.add_job(
                self.sweep_once,
                "interval",
                seconds=interval_ms / 1000.0,
                next_run_time=datetime.now(timezone.utc),
                id="sweep",
                max_instances=1,
                coalesce=True,
            )
            scheduler.start()
            self._scheduler = scheduler
            self._interval_ms = interval_ms
            logger.debug("%s: polling every %sms", self._name, interval_ms)
            return True

    def stop(self, wait: bool = False) -> None:
        # a sweep already in flight finishes, no further sweep starts
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            scheduler = self._scheduler
        if scheduler is not None:
            scheduler.shutdown(wait=wait)
            logger.debug("%s: stopped", self._name)

    def sweep_once(self) -> int:
        # returns how many cities refreshed successfully
        refreshed = 0
        for city in self._cities():
            try:
                self._refresh(city)
                refreshed += 1
            except Exception as exc:
                # the stale entry stays cached until a later sweep succeeds
                logger.warning("Failed to update weather data for city %r: %s", city, exc)
        return refreshed
