"""Process-level directory of our own identity and our dependencies.

SystemConfig is built once at startup. Construction resolves where every
required service lives, then checks that each one answers before returning,
so a process that got a SystemConfig knows its dependencies are up.
"""

import logging
import threading
import time
from collections.abc import Iterable

import httpx

from pzcommon.config.services import (
    DEFAULT_DOMAIN,
    DEFAULT_PROTOCOL,
    DEFAULT_SPACE,
    LOCAL_ADDRESS,
    NON_HTTP_SERVICES,
    ServiceName,
    endpoint_prefix,
    health_path,
    service_key,
)
from pzcommon.config.vcap import (
    PlatformSettings,
    load_settings,
    read_application,
    read_services,
)
from pzcommon.core.errors import (
    ServiceTimeoutError,
    StartupHealthError,
    UnknownServiceError,
)

logger = logging.getLogger(__name__)

# Budgets for wait_for_service / wait_for_service_to_die
WAIT_TIMEOUT_SECONDS = 2.0
WAIT_POLL_SECONDS = 0.1

# Per-request timeout of the client SystemConfig creates for itself
HTTP_TIMEOUT_SECONDS = 5.0


class SystemConfig:
    """Directory mapping service names to ``host:port`` addresses.

    Example:
        ```python
        from pzcommon import ServiceName, SystemConfig

        sys = SystemConfig(ServiceName.WORKFLOW, [ServiceName.LOGGER])
        url = sys.url_of(ServiceName.LOGGER)
        ```

    Attributes:
        name: Our own service name.
        address: Our own public address.
        bind_to: Local bind spec, e.g. ``:8080``.
        space: Deployment space, e.g. ``int`` or ``stage``.
    """

    def __init__(
        self,
        name: ServiceName | str,
        required: Iterable[ServiceName | str] = (),
        *,
        settings: PlatformSettings | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Resolve our identity and dependencies, then health-check them.

        Args:
            name: Our own service name.
            required: Services this process depends on.
            settings: Platform settings; read from the environment when omitted.
            client: HTTP client for health checks and waits. When omitted one
                is created and closed by close().

        Raises:
            ConfigError: If the platform environment is malformed.
            StartupHealthError: If a required service fails its health check.
        """
        self._lock = threading.Lock()
        self._endpoints: dict[str, str] = {}
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=HTTP_TIMEOUT_SECONDS)

        try:
            settings = settings or load_settings()
            application = read_application(settings)
            services = read_services(settings)

            self.name = service_key(name)
            if application is None:
                self.address = LOCAL_ADDRESS
                self.bind_to = LOCAL_ADDRESS
                self._domain = DEFAULT_DOMAIN
            else:
                self.address = application.address
                self.bind_to = application.bind_port
                self._domain = application.domain or DEFAULT_DOMAIN

            if settings.domain:
                self._domain = settings.domain
                if not self._domain.startswith("."):
                    self._domain = "." + self._domain

            self.space = settings.space or DEFAULT_SPACE

            self._check_requirements(required, services)
            self._run_health_checks()
        except Exception:
            self.close()
            raise

    def _check_requirements(
        self, required: Iterable[ServiceName | str], services: dict[str, str]
    ) -> None:
        for item in required:
            key = service_key(item)
            if key == self.name:
                address = self.address
            elif key in services:
                address = services[key]
            else:
                # not bound by the platform, assume the conventional host name
                address = key + self._domain
            self.add_service(key, address)
            logger.debug("Required service: %s at %s", key, address)

    def _run_health_checks(self) -> None:
        with self._lock:
            endpoints = dict(self._endpoints)

        for key, address in endpoints.items():
            if key == self.name or key in NON_HTTP_SERVICES:
                continue

            url = f"{DEFAULT_PROTOCOL}://{address}{health_path(key)}"
            try:
                response = self._client.get(url)
            except httpx.RequestError as e:
                logger.warning("Health check errored for service: %s at %s", key, url)
                raise StartupHealthError(key, url, str(e)) from e
            if response.status_code != httpx.codes.OK:
                logger.warning(
                    "Health check failed for service: %s at %s (%d)",
                    key,
                    url,
                    response.status_code,
                )
                raise StartupHealthError(key, url, f"status {response.status_code}")
            logger.debug("Service healthy: %s at %s", key, url)

    @property
    def domain(self) -> str:
        """Host suffix, always starting with a dot."""
        return self._domain

    @property
    def http_client(self) -> httpx.Client:
        """The HTTP client used to reach dependencies."""
        return self._client

    def add_service(self, name: ServiceName | str, address: str) -> None:
        """Insert or replace the address of a service."""
        with self._lock:
            self._endpoints[service_key(name)] = address

    def address_of(self, name: ServiceName | str) -> str:
        """Return the ``host:port`` of a service.

        Raises:
            UnknownServiceError: If the service is not in the directory.
        """
        key = service_key(name)
        with self._lock:
            try:
                return self._endpoints[key]
            except KeyError:
                raise UnknownServiceError(key) from None

    def url_of(self, name: ServiceName | str) -> str:
        """Return the base URL of a service, e.g. ``http://host:port``.

        Raises:
            UnknownServiceError: If the service is not in the directory.
        """
        address = self.address_of(name)
        return f"{DEFAULT_PROTOCOL}://{address}{endpoint_prefix(name)}"

    def services(self) -> dict[str, str]:
        """Return a snapshot of the directory."""
        with self._lock:
            return dict(self._endpoints)

    def _is_alive(self, url: str) -> bool:
        try:
            response = self._client.get(url)
        except httpx.RequestError:
            return False
        return response.status_code == httpx.codes.OK

    def _is_reachable(self, url: str) -> bool:
        try:
            self._client.get(url)
        except httpx.RequestError:
            return False
        return True

    def wait_for_service(self, name: ServiceName | str) -> None:
        """Block until the service answers 200 on its root.

        Raises:
            UnknownServiceError: If the service is not in the directory.
            ServiceTimeoutError: If it does not answer within the budget.
        """
        self.wait_for_service_by_address(name, self.address_of(name))

    def wait_for_service_by_address(self, name: ServiceName | str, address: str) -> None:
        """Block until ``http://address`` answers 200.

        Raises:
            ServiceTimeoutError: If it does not answer within the budget.
        """
        url = f"{DEFAULT_PROTOCOL}://{address}"
        deadline = time.monotonic() + WAIT_TIMEOUT_SECONDS
        while True:
            if self._is_alive(url):
                return
            if time.monotonic() >= deadline:
                raise ServiceTimeoutError(service_key(name), url, "service")
            time.sleep(WAIT_POLL_SECONDS)

    def wait_for_service_to_die(self, name: ServiceName | str) -> None:
        """Block until the service stops accepting connections.

        Raises:
            UnknownServiceError: If the service is not in the directory.
            ServiceTimeoutError: If it is still reachable after the budget.
        """
        self.wait_for_service_to_die_by_address(name, self.address_of(name))

    def wait_for_service_to_die_by_address(
        self, name: ServiceName | str, address: str
    ) -> None:
        """Block until ``http://address`` gives a transport error.

        Raises:
            ServiceTimeoutError: If it is still reachable after the budget.
        """
        url = f"{DEFAULT_PROTOCOL}://{address}"
        deadline = time.monotonic() + WAIT_TIMEOUT_SECONDS
        while True:
            if not self._is_reachable(url):
                return
            if time.monotonic() >= deadline:
                raise ServiceTimeoutError(service_key(name), url, "service to die")
            time.sleep(WAIT_POLL_SECONDS)

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()
