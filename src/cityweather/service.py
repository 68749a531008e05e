# fetch orchestration: geocode the city, then fetch and normalize its weather
# parse_geo and normalize_weather are pure, fetch_* only add the client calls
# nothing here touches the cache, the sdk layers caching on top


from __future__ import annotations
from typing import Any, Dict
from .client import OpenWeatherClient
from .errors import CityNotFoundError, DataError
from .models import GeoLocation


def parse_geo(payload: Any, city: str) -> GeoLocation:
    # geocoding shape: [{"name": ..., "lat": ..., "lon": ..., "country": ..., ...}]
    if not isinstance(payload, list):
        raise DataError(f"Unexpected geocoding shape for {city!r}: expected a list")
    if not payload:
        raise CityNotFoundError(f"City {city!r} not found")

    first = payload[0]
    try:
        return GeoLocation(name=str(first["name"]), lat=float(first["lat"]), lon=float(first["lon"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise DataError(f"Geocoding result for {city!r} is missing name/lat/lon") from exc


def _pick(source: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    return {k: source[k] for k in keys if k in source}


def normalize_weather(payload: Any) -> Dict[str, Any]:
    # reduce the provider payload to the sdk record; absent sections are left out, never null-filled
    if not isinstance(payload, dict):
        raise DataError("Unexpected weather shape: expected an object")

    result: Dict[str, Any] = {}

    conditions = payload.get("weather")
    if isinstance(conditions, list) and conditions and isinstance(conditions[0], dict):
        result["weather"] = _pick(conditions[0], "main", "description")

    main = payload.get("main")
    if isinstance(main, dict):
        result["temperature"] = _pick(main, "temp", "feels_like")

    if "visibility" in payload:
        result["visibility"] = payload["visibility"]

    wind = payload.get("wind")
    if isinstance(wind, dict):
        result["wind"] = _pick(wind, "speed")

    if "dt" in payload:
        result["datetime"] = payload["dt"]

    sys_info = payload.get("sys")
    if isinstance(sys_info, dict):
        result["sys"] = _pick(sys_info, "sunrise", "sunset")

    if "timezone" in payload:
        result["timezone"] = payload["timezone"]
    if "name" in payload:
        result["name"] = payload["name"]

    return result


def fetch_geo(client: OpenWeatherClient, city: str) -> GeoLocation:
    return parse_geo(client.geocode(city, limit=1), city)


# single city path: geocode -> weather -> normalize
def fetch_weather(client: OpenWeatherClient, city: str) -> Dict[str, Any]:
    geo = fetch_geo(client, city)
    return normalize_weather(client.current_weather(geo.lat, geo.lon))
