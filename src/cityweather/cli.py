# connects command line input (city names) to the sdk and prints one line per city

from __future__ import annotations
import argparse
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Sequence

from .config import Settings
from .errors import CityWeatherError
from .models import Mode
from .registry import InstanceRegistry


def format_weather(city: str, record: Dict[str, Any]) -> str:
    weather = record.get("weather", {})
    temperature = record.get("temperature", {})
    parts = [f"{record.get('name', city)}: {weather.get('main', '?')}"]
    if "description" in weather:
        parts[0] += f" ({weather['description']})"
    if "temp" in temperature:
        parts.append(f"temp {temperature['temp']}")
    if "feels_like" in temperature:
        parts.append(f"feels like {temperature['feels_like']}")
    return ", ".join(parts)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cityweather", description="Current weather for one or more cities.")
    parser.add_argument("cities", nargs="+", metavar="CITY")
    parser.add_argument("--geo", action="store_true", help="print coordinates instead of weather")
    parser.add_argument("--workers", type=int, default=4, help="concurrent requests (default: 4)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = Settings.from_env()
    if not settings.api_key:
        print("OPENWEATHER_API_KEY not set", file=sys.stderr)
        return 2

    registry = InstanceRegistry(settings=settings)
    sdk = registry.create_instance(settings.api_key, Mode.ON_DEMAND)

    def lookup(city: str) -> str:
        if args.geo:
            geo = sdk.get_geo_data(city)
            return f"{geo.name}: lat {geo.lat}, lon {geo.lon}"
        return format_weather(city, sdk.get_weather_by_city(city))

    lines: List[str] = []
    try:
        # map keeps the output in argument order
        with ThreadPoolExecutor(max_workers=max(1, args.workers)) as pool:
            lines.extend(pool.map(lookup, args.cities))
    except CityWeatherError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        registry.shutdown_all()

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
