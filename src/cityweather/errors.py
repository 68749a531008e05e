# error types raised by the sdk
# every failure surfaces as a CityWeatherError subclass so callers can catch one base

from __future__ import annotations


class CityWeatherError(RuntimeError):
    pass


class InvalidArgumentError(CityWeatherError, ValueError):
    # bad credential, bad polling interval, wrong mode for an operation
    pass


class DataError(CityWeatherError):
    # upstream answered, but the payload lacks what we need
    pass


class CityNotFoundError(DataError):
    pass


class TransportError(CityWeatherError):
    # non-2xx status, network failure, empty body or malformed json

    def __init__(self, message: str, status: int | None = None, url: str | None = None):
        super().__init__(message)
        self.status = status
        self.url = url
