"""Python logging handler adapter for pzcommon.

This adapter bridges Python's standard library logging module to a
SyslogWriterPort, so records logged through ``logging`` reach the same sinks
as the Syslogger facade.
"""

import logging
from datetime import datetime

from pzcommon.core.models import Severity, SyslogMessage
from pzcommon.core.ports import SyslogWriterPort
from pzcommon.core.timestamps import format_rfc3339

_EXCEPTION_FORMATTER = logging.Formatter()


def severity_for_level(levelno: int) -> Severity:
    """Map a stdlib logging level to the nearest RFC 5424 severity."""
    if levelno >= logging.CRITICAL:
        return Severity.CRITICAL
    if levelno >= logging.ERROR:
        return Severity.ERROR
    if levelno >= logging.WARNING:
        return Severity.WARNING
    if levelno >= logging.INFO:
        return Severity.INFORMATIONAL
    return Severity.DEBUG


class SyslogHandler(logging.Handler):
    """Logging handler that writes log records to a SyslogWriterPort.

    Example:
        ```python
        from pzcommon import FileWriter, SyslogHandler

        handler = SyslogHandler(FileWriter("service.log"), application="pz-workflow")
        logging.getLogger().addHandler(handler)
        ```
    """

    def __init__(
        self,
        writer: SyslogWriterPort,
        application: str = "",
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler with a sink.

        Args:
            writer: Sink implementing SyslogWriterPort.
            application: Stamped into each record's application field.
            level: Minimum logging level handled.
        """
        super().__init__(level)
        self._writer = writer
        self._application = application

    def to_message(self, record: logging.LogRecord) -> SyslogMessage:
        """Convert a LogRecord into a syslog record."""
        text = record.getMessage()
        if record.exc_info:
            formatter = self.formatter or _EXCEPTION_FORMATTER
            text = f"{text}\n{formatter.formatException(record.exc_info)}"

        created = datetime.fromtimestamp(record.created).astimezone()
        fields: dict[str, str] = {}
        if record.process is not None:
            fields["process"] = str(record.process)

        return SyslogMessage(
            severity=severity_for_level(record.levelno),
            timestamp=format_rfc3339(created),
            application=self._application,
            message=text,
            **fields,
        )

    def emit(self, record: logging.LogRecord) -> None:
        """Write a log record to the sink.

        Sink failures go to ``handleError`` and are never logged through
        this handler again.

        Args:
            record: The log record to emit.
        """
        try:
            self._writer.write(self.to_message(record))
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        try:
            self._writer.close()
        finally:
            super().close()
