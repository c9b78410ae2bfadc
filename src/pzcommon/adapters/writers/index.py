"""Sink storing each record as a document in a document index."""

from pzcommon.core.encoding.ndjson import message_to_dict
from pzcommon.core.errors import SinkNotConfiguredError
from pzcommon.core.models import IndexResponse, SyslogMessage
from pzcommon.core.ports import IndexPort


class IndexWriter:
    """Posts each record's JSON form to an index under a type and id.

    Thread-safety is left to the index.
    """

    def __init__(self, index: IndexPort | None, type: str = "") -> None:
        self.index = index
        self._type = type
        self._id = ""

    def set_type(self, type: str) -> None:
        """Set the document type records are stored under."""
        self._type = type

    def set_id(self, id: str) -> None:
        """Set the document id; empty lets the index assign one."""
        self._id = id

    def write(self, message: SyslogMessage) -> None:
        """Store one record.

        Raises:
            SinkNotConfiguredError: If there is no index or no type.
        """
        self.post(message)

    def post(self, message: SyslogMessage) -> IndexResponse:
        """Store one record and return the index's answer."""
        if self.index is None or not self._type:
            raise SinkNotConfiguredError("index writer needs an index and a type")
        return self.index.post_data(self._type, self._id, message_to_dict(message))

    def close(self) -> None:
        """Nothing to release."""
