# openweathermap transport: endpoints, appid, timeouts and the mapping of http failures to TransportError
# callers get decoded json back, shaping it is service.py's job
# each thread lazily builds its own requests session, the polling job and foreground calls never share one

from __future__ import annotations
import logging
import threading
from typing import Any, Dict, List
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import Settings
from .errors import InvalidArgumentError, TransportError

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    # provider details: endpoints, auth param, timeouts
    USER_AGENT = "city-weather-sdk/0.1"

    def __init__(
        self,
        api_key: str,
        settings: Settings | None = None,
        session: requests.Session | None = None,
    ):
        if not api_key:
            raise InvalidArgumentError("API key cannot be empty")
        self.api_key = api_key
        self.settings = settings or Settings()

        # an injected session is shared by every thread, otherwise each thread builds its own
        self._shared_session = session
        self._local = threading.local()

        # zero retries unless configured, failures surface to the caller
        self._retry = Retry(
            total=self.settings.max_retries,
            backoff_factor=0.5,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET",),
            raise_on_status=False,
        )

    def _build_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update({"User-Agent": self.USER_AGENT})
        adapter = HTTPAdapter(max_retries=self._retry)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    def _session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        sess = getattr(self._local, "session", None)
        if sess is None:
            sess = self._build_session()
            self._local.session = sess
        return sess

    def get_json(self, url: str, params: Dict[str, Any]) -> Any:
        query = dict(params, appid=self.api_key)
        try:
            resp = self._session().get(url, params=query, timeout=self.settings.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"Request error for {url}: {exc}", url=url) from exc

        if not 200 <= resp.status_code < 300:
            # short body snippet, the provider puts its error message there
            snippet = (resp.text or "")[:300]
            status = f"{resp.status_code} {resp.reason}" if resp.reason else str(resp.status_code)
            raise TransportError(
                f"HTTP {status} for {url}. Body: {snippet}",
                status=resp.status_code,
                url=url,
            )

        if not resp.content:
            raise TransportError(f"Empty response from {url}", status=resp.status_code, url=url)

        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"Invalid JSON from {url}: {exc}", status=resp.status_code, url=url) from exc

    def geocode(self, city: str, limit: int = 1) -> List[Dict[str, Any]]:
        logger.debug("geocoding %r", city)
        return self.get_json(self.settings.geo_url, {"q": city, "limit": limit})

    def current_weather(self, lat: float, lon: float) -> Dict[str, Any]:
        params: Dict[str, Any] = {"lat": lat, "lon": lon}
        if self.settings.units:
            params["units"] = self.settings.units
        if self.settings.lang:
            params["lang"] = self.settings.lang
        logger.debug("fetching weather for lat=%s lon=%s", lat, lon)
        return self.get_json(self.settings.weather_url, params)
