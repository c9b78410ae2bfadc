"""Registry of well-known services and their endpoint tables."""

from enum import Enum


class ServiceName(str, Enum):
    """Well-known services of the family. Comparisons are exact-match."""

    DISCOVER = "pz-discover"
    ELASTICSEARCH = "pz-elasticsearch"
    # not a real service, used by tests
    GOCOMMON = "PZ-GOCOMMON"
    KAFKA = "pz-kafka"
    LOGGER = "pz-logger"
    UUIDGEN = "pz-uuidgen"
    WORKFLOW = "pz-workflow"
    HELLO = "pzsvc-hello"
    SERVICE_CONTROLLER = "pz-servicecontroller"
    METRICS = "pz-metrics"

    def __str__(self) -> str:
        return self.value


DEFAULT_DOMAIN = ".int.geointservices.io"
DEFAULT_SPACE = "int"
DEFAULT_PROTOCOL = "http"

# Fallback identity when the platform provides no application info
LOCAL_ADDRESS = "localhost:0"

LOCAL_SERVICE_ADDRESSES: dict[str, str] = {
    ServiceName.ELASTICSEARCH.value: "localhost:9200",
    ServiceName.KAFKA.value: "localhost:9092",
    ServiceName.LOGGER.value: "localhost:14600",
    ServiceName.UUIDGEN.value: "localhost:14800",
}

ENDPOINT_PREFIXES: dict[str, str] = {
    ServiceName.DISCOVER.value: "",
    ServiceName.ELASTICSEARCH.value: "",
    ServiceName.KAFKA.value: "",
    ServiceName.LOGGER.value: "",
    ServiceName.UUIDGEN.value: "",
    ServiceName.WORKFLOW.value: "",
    ServiceName.HELLO.value: "",
    ServiceName.SERVICE_CONTROLLER.value: "",
    ServiceName.METRICS.value: "",
}

HEALTHCHECK_ENDPOINTS: dict[str, str] = {
    ServiceName.DISCOVER.value: "",
    ServiceName.ELASTICSEARCH.value: "",
    ServiceName.KAFKA.value: "",
    ServiceName.LOGGER.value: "/",
    ServiceName.UUIDGEN.value: "/",
    ServiceName.WORKFLOW.value: "/",
    ServiceName.HELLO.value: "/",
    ServiceName.SERVICE_CONTROLLER.value: "",
    ServiceName.METRICS.value: "/",
}

# Dependencies that are not HTTP services and get no startup health check
NON_HTTP_SERVICES = frozenset({ServiceName.KAFKA.value})


def service_key(name: "ServiceName | str") -> str:
    """Return the plain string form of a service name."""
    return name.value if isinstance(name, ServiceName) else str(name)


def endpoint_prefix(name: "ServiceName | str") -> str:
    """Return the URL path prefix of a service, empty for unknown names."""
    return ENDPOINT_PREFIXES.get(service_key(name), "")


def health_path(name: "ServiceName | str") -> str:
    """Return the health-check path of a service, empty for unknown names."""
    return HEALTHCHECK_ENDPOINTS.get(service_key(name), "")
