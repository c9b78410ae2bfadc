"""In-memory sink for syslog records."""

import threading

from pzcommon.core.errors import InvalidCountError
from pzcommon.core.models import SyslogMessage


class InMemoryWriter:
    """In-memory implementation of SyslogWriterPort and SyslogReaderPort.

    Stores records in a list. Suitable for testing and for callers that
    need to inspect recent records.
    """

    def __init__(self) -> None:
        self._messages: list[SyslogMessage] = []
        self._lock = threading.Lock()

    def write(self, message: SyslogMessage) -> None:
        """Append a record."""
        with self._lock:
            self._messages.append(message)

    def read(self, count: int) -> list[SyslogMessage]:
        """Return the last ``count`` records, newest last.

        Asking for more records than are stored returns all of them.

        Raises:
            InvalidCountError: If count is negative.
        """
        if count < 0:
            raise InvalidCountError(count)
        if count == 0:
            return []
        with self._lock:
            return self._messages[-count:]

    def close(self) -> None:
        """Nothing to release."""

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)
