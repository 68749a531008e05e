# one CityWeatherSDK per credential
# owned by whoever embeds the sdk, there is no module-level instance

from __future__ import annotations
import logging
import threading
from typing import Callable, Dict

from .client import OpenWeatherClient
from .config import Settings
from .errors import InvalidArgumentError
from .models import Mode
from .sdk import CityWeatherSDK, now_millis

logger = logging.getLogger(__name__)


# client_factory builds the http client for each new instance, tests pass a fake
class InstanceRegistry:
    def __init__(
        self,
        settings: Settings | None = None,
        client_factory: Callable[[str], OpenWeatherClient] | None = None,
        clock: Callable[[], int] = now_millis,
    ):
        self._settings = settings or Settings()
        self._client_factory = client_factory or (lambda key: OpenWeatherClient(key, settings=self._settings))
        self._clock = clock
        self._instances: Dict[str, CityWeatherSDK] = {}
        self._lock = threading.Lock()

    def create_instance(self, credential: str, mode: Mode = Mode.ON_DEMAND) -> CityWeatherSDK:
        # an existing instance is returned unchanged, its mode wins over the requested one
        if not credential:
            raise InvalidArgumentError("API key cannot be empty")

        with self._lock:
            instance = self._instances.get(credential)
            if instance is not None:
                if instance.mode is not mode:
                    logger.debug("instance exists in %s mode, ignoring requested %s", instance.mode.name, mode)
                return instance

            instance = CityWeatherSDK(
                credential,
                mode,
                client=self._client_factory(credential),
                clock=self._clock,
            )
            self._instances[credential] = instance
            logger.debug("created %s instance (%d live)", mode.name, len(self._instances))
            return instance

    def get_instance(self, credential: str) -> CityWeatherSDK | None:
        with self._lock:
            return self._instances.get(credential)

    def delete_instance(self, credential: str) -> None:
        with self._lock:
            instance = self._instances.pop(credential, None)
            # stop polling before the instance becomes unreachable
            if instance is not None:
                instance.shutdown()
                logger.debug("deleted instance (%d live)", len(self._instances))

    def shutdown_all(self) -> None:
        with self._lock:
            instances = list(self._instances.values())
            self._instances.clear()
        for instance in instances:
            instance.shutdown()

    def __contains__(self, credential: object) -> bool:
        with self._lock:
            return credential in self._instances

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)
