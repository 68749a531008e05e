# environment driven settings for the http layer and the cli
# the sdk itself only needs a credential, everything here has a usable default

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping
from dotenv import load_dotenv

from .errors import InvalidArgumentError

GEO_URL = "http://api.openweathermap.org/geo/1.0/direct"
WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    geo_url: str = GEO_URL
    weather_url: str = WEATHER_URL
    timeout: float = 10.0
    max_retries: int = 0
    units: str | None = None  # None leaves the provider default (kelvin)
    lang: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        if environ is None:
            load_dotenv()  # local .env for development, real deployments inject the environment
            environ = os.environ

        return cls(
            api_key=environ.get("OPENWEATHER_API_KEY") or None,
            geo_url=environ.get("CITYWEATHER_GEO_URL", GEO_URL),
            weather_url=environ.get("CITYWEATHER_WEATHER_URL", WEATHER_URL),
            timeout=_number(environ, "CITYWEATHER_TIMEOUT", 10.0, float),
            max_retries=_number(environ, "CITYWEATHER_MAX_RETRIES", 0, int),
            units=environ.get("CITYWEATHER_UNITS") or None,
            lang=environ.get("CITYWEATHER_LANG") or None,
        )


def _number(environ: Mapping[str, str], name: str, default, cast):
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise InvalidArgumentError(f"{name} must be a number (got {raw!r})") from exc
    if value < 0:
        raise InvalidArgumentError(f"{name} must not be negative (got {raw!r})")
    return value
