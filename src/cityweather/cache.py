# bounded, insertion-ordered city -> CacheEntry store
# one lock guards the whole ordered map, foreground callers and the polling thread share it
# expiry is a query, entries are never dropped for age

from __future__ import annotations
import logging
import threading
from collections import OrderedDict
from typing import Any, Dict, List

from .models import CacheEntry

logger = logging.getLogger(__name__)

MAX_CITIES = 10
EXPIRY_MS = 10 * 60 * 1000


class WeatherCache:
    def __init__(self, capacity: int = MAX_CITIES, expiry_ms: int = EXPIRY_MS):
        self.capacity = capacity
        self.expiry_ms = expiry_ms
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, city: str) -> CacheEntry | None:
        # pure lookup: no reordering, no expiry check
        with self._lock:
            return self._entries.get(city)

    def put(self, city: str, record: Dict[str, Any], now_ms: int) -> CacheEntry:
        entry = CacheEntry(city=city, record=record, fetched_at_ms=now_ms)
        with self._lock:
            if city in self._entries:
                # update counts as a touch, only a new key can evict
                self._entries.move_to_end(city)
            elif len(self._entries) >= self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("cache full, evicted %r", evicted)
            self._entries[city] = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def cities(self) -> List[str]:
        # snapshot, oldest first
        with self._lock:
            return list(self._entries)

    def is_expired(self, entry: CacheEntry, now_ms: int) -> bool:
        return now_ms - entry.fetched_at_ms > self.expiry_ms

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, city: object) -> bool:
        with self._lock:
            return city in self._entries
