"""Exception hierarchy shared by every pzcommon component."""

from typing import Any


class PzCommonError(Exception):
    """Base class for all errors raised by pzcommon."""


class ConfigError(PzCommonError):
    """Platform environment variables are malformed or contradictory."""


class UnknownServiceError(PzCommonError, LookupError):
    """A service name was looked up that is not in the directory."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown service: {name}")
        self.service = name


class StartupHealthError(PzCommonError):
    """A required dependency failed its startup health check."""

    def __init__(self, service: str, url: str, reason: str) -> None:
        super().__init__(f"Health check failed for service: {service} at {url} ({reason})")
        self.service = service
        self.url = url


class ServiceTimeoutError(PzCommonError, TimeoutError):
    """A wait_for_service / wait_for_service_to_die budget expired."""

    def __init__(self, service: str, url: str, waiting_for: str) -> None:
        super().__init__(f"timed out waiting for {waiting_for}: {service} at {url}")
        self.service = service
        self.url = url


class SinkNotConfiguredError(PzCommonError):
    """A sink was written to without its mandatory configuration."""


class InvalidCountError(PzCommonError, ValueError):
    """read(count) was called with a negative count."""

    def __init__(self, count: int) -> None:
        super().__init__(f"invalid count: {count}")
        self.count = count


class RemoteSinkError(PzCommonError):
    """A remote sink got an error response or a transport failure.

    Attributes:
        response: The decoded JsonResponse envelope, when one was received.
    """

    def __init__(self, message: str, response: Any = None) -> None:
        super().__init__(message)
        self.response = response


class InvalidMessageError(PzCommonError, ValueError):
    """A SyslogMessage failed validation or could not be parsed."""


class DocumentIndexError(PzCommonError):
    """A document index rejected an operation."""
