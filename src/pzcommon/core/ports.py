"""Port interfaces for log sinks and the document index.

These protocols define the contracts that sink adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pzcommon.core.models import IndexResponse, SyslogMessage


@runtime_checkable
class SyslogWriterPort(Protocol):
    """Port for writing syslog records to some output.

    Examples: InMemoryWriter, FileWriter, HttpWriter, SyslogdWriter, IndexWriter.
    """

    def write(self, message: SyslogMessage) -> None:
        """Append one record to the sink."""
        ...

    def close(self) -> None:
        """Release resources. Idempotent, safe if nothing was written."""
        ...


@runtime_checkable
class SyslogReaderPort(Protocol):
    """Port for sinks that can hand back what was written to them."""

    def read(self, count: int) -> list[SyslogMessage]:
        """Read the latest records.

        Args:
            count: Number of records wanted: 1 is the latest record, 2 the two
                latest, and so on. Asking for more than are stored is not an
                error.

        Returns:
            Up to ``count`` records, with the newest at the end.

        Raises:
            InvalidCountError: If count is negative.
        """
        ...


@runtime_checkable
class IndexPort(Protocol):
    """The single document-index operation the sinks depend on."""

    def post_data(
        self, type: str, id: str, document: Mapping[str, Any]
    ) -> IndexResponse:
        """Store a document under the given type and id.

        An empty id lets the index assign one.
        """
        ...
