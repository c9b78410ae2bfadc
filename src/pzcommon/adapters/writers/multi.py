"""Fan-out sink feeding one record to several sinks."""

from collections.abc import Iterable

from pzcommon.core.models import SyslogMessage
from pzcommon.core.ports import SyslogWriterPort


class MultiWriter:
    """Writes each record to every wrapped sink, in order.

    The first failing sink stops the fan-out and its error propagates;
    sinks after it do not see the record.
    """

    def __init__(self, writers: Iterable[SyslogWriterPort]) -> None:
        self.writers = list(writers)

    def write(self, message: SyslogMessage) -> None:
        for writer in self.writers:
            writer.write(message)

    def close(self) -> None:
        """Close every sink, then raise the first close error, if any."""
        first_error: Exception | None = None
        for writer in self.writers:
            try:
                writer.close()
            except Exception as e:
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error
