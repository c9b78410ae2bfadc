"""Sinks writing the RFC 5424 text form to files and streams."""

import os
import threading
from typing import TextIO

from pzcommon.core.encoding.rfc5424 import format_message
from pzcommon.core.errors import SinkNotConfiguredError
from pzcommon.core.models import SyslogMessage

# Permission bits of a newly created log file (before the umask)
FILE_MODE = 0o777


class FileWriter:
    """Appends one text line per record to a local file.

    The file is opened lazily on the first write and created if needed.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = os.fspath(path)
        self._file: TextIO | None = None
        self._lock = threading.Lock()

    def _open(self) -> TextIO:
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, FILE_MODE)
        return os.fdopen(fd, "a", encoding="utf-8")

    def write(self, message: SyslogMessage) -> None:
        """Append the record's text form and a newline.

        Raises:
            SinkNotConfiguredError: If the writer has no path.
            OSError: If the file cannot be opened or written.
        """
        if not self.path:
            raise SinkNotConfiguredError("file writer has no path")

        line = format_message(message) + "\n"
        with self._lock:
            if self._file is None:
                self._file = self._open()
            self._file.write(line)
            self._file.flush()

    def close(self) -> None:
        """Close the file if it was opened."""
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None


class StreamWriter:
    """Writes one text line per record to an already open text stream.

    The stream belongs to the caller; close() only flushes it.

    Example:
        ```python
        import sys

        writer = StreamWriter(sys.stderr)
        ```
    """

    def __init__(self, stream: TextIO | None) -> None:
        self.stream = stream
        self._lock = threading.Lock()

    def write(self, message: SyslogMessage) -> None:
        """Write the record's text form and a newline.

        Raises:
            SinkNotConfiguredError: If the writer has no stream.
        """
        if self.stream is None:
            raise SinkNotConfiguredError("stream writer has no stream")

        line = format_message(message) + "\n"
        with self._lock:
            self.stream.write(line)
            self.stream.flush()

    def close(self) -> None:
        if self.stream is not None and not self.stream.closed:
            self.stream.flush()
