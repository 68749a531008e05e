# value objects shared by the cache, the fetch layer and the facade

from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Any, Dict


class Mode(enum.Enum):
    ON_DEMAND = "on_demand"  # cache refreshed only when a caller asks
    POLLING = "polling"      # cached cities refreshed in the background


@dataclass(frozen=True)
class GeoLocation:
    name: str
    lat: float
    lon: float

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "lat": self.lat, "lon": self.lon}


@dataclass(frozen=True)
class CacheEntry:
    # a refresh stores a new entry, it never mutates this one
    city: str
    record: Dict[str, Any]
    fetched_at_ms: int
