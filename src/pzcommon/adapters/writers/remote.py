"""Sink posting records to the remote logger service."""

import httpx

from pzcommon.adapters.http import JsonClient
from pzcommon.config.services import ServiceName
from pzcommon.config.system import SystemConfig
from pzcommon.core.encoding.ndjson import message_to_dict
from pzcommon.core.errors import RemoteSinkError
from pzcommon.core.models import SyslogMessage

SYSLOG_ENDPOINT = "/syslog"


class HttpWriter:
    """Posts each record as JSON to the logger service's ``/syslog``.

    Construction blocks until the logger service answers, or fails once the
    wait budget is spent.
    """

    def __init__(self, sys: SystemConfig, client: httpx.Client | None = None) -> None:
        """Resolve and wait for the logger service.

        Args:
            sys: Directory holding the logger service's address.
            client: HTTP client for the posts; defaults to the directory's.

        Raises:
            UnknownServiceError: If the logger is not in the directory.
            ServiceTimeoutError: If the logger does not come up in time.
        """
        self.url = sys.url_of(ServiceName.LOGGER)
        self._http = JsonClient(self.url, client or sys.http_client)
        sys.wait_for_service(ServiceName.LOGGER)

    def write(self, message: SyslogMessage) -> None:
        """Post a record.

        Raises:
            RemoteSinkError: On a transport failure or an error envelope. The
                envelope is attached as ``response``.
        """
        response = self._http.post_json(SYSLOG_ENDPOINT, message_to_dict(message))
        if response.is_error():
            detail = f": {response.message}" if response.message else ""
            raise RemoteSinkError(
                f"logger service returned {response.status_code}{detail}",
                response=response,
            )

    def close(self) -> None:
        """Nothing to release; the HTTP client belongs to the caller."""
