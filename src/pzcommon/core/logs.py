"""Logger facade and factory for SyslogMessage objects."""

from dataclasses import replace
from typing import Any

from pzcommon.core.models import AuditElement, MetricElement, Severity, SyslogMessage
from pzcommon.core.ports import SyslogWriterPort


def new_message(**fields: Any) -> SyslogMessage:
    """Create a syslog record with automatic defaults.

    Timestamp, host name and process ID are filled from the environment;
    facility 1, severity 6 and version 1 are used unless overridden.

    Args:
        **fields: Any SyslogMessage field to override.

    Returns:
        A fresh SyslogMessage.
    """
    return SyslogMessage(**fields)


class Syslogger:
    """Convenience facade that stamps defaults into records and writes them.

    Example:
        ```python
        from pzcommon import InMemoryWriter, Syslogger

        writer = InMemoryWriter()
        logger = Syslogger(writer, application="pz-workflow")
        logger.warning("disk nearly full")
        ```

    Errors raised by the writer propagate unchanged.
    """

    def __init__(self, writer: SyslogWriterPort, application: str = "") -> None:
        """Initialize the facade.

        Args:
            writer: The sink every record is written to.
            application: Stamped into each record's application field.
        """
        self.writer = writer
        self.application = application

    def _write(self, severity: int, text: str, **fields: Any) -> SyslogMessage:
        message = new_message(
            application=self.application, severity=severity, message=text, **fields
        )
        self.writer.write(message)
        return message

    def log(self, message: SyslogMessage) -> None:
        """Write a prebuilt record, stamping the application if it has none."""
        if not message.application and self.application:
            message = replace(message, application=self.application)
        self.writer.write(message)

    def warning(self, text: str) -> SyslogMessage:
        """Write a severity 4 (warning) record."""
        return self._write(Severity.WARNING, text)

    def error(self, text: str) -> SyslogMessage:
        """Write a severity 3 (error) record."""
        return self._write(Severity.ERROR, text)

    def fatal(self, text: str) -> SyslogMessage:
        """Write a severity 2 (critical) record."""
        return self._write(Severity.CRITICAL, text)

    def info(self, text: str) -> SyslogMessage:
        """Write a severity 6 (informational) record."""
        return self._write(Severity.INFORMATIONAL, text)

    def debug(self, text: str) -> SyslogMessage:
        """Write a severity 7 (debug) record."""
        return self._write(Severity.DEBUG, text)

    def audit(self, actor: str, action: str, actee: str, text: str) -> SyslogMessage:
        """Write an informational record carrying a pzaudit element.

        Args:
            actor: Who performed the action.
            action: What was done.
            actee: What it was done to.
            text: Free-form message.

        Returns:
            The record that was written.
        """
        return self._write(
            Severity.INFORMATIONAL,
            text,
            audit_data=AuditElement(actor=actor, action=action, actee=actee),
        )

    def metric(self, name: str, value: float, object: str, text: str) -> SyslogMessage:
        """Write an informational record carrying a pzmetric element.

        Args:
            name: Metric name.
            value: Observed value.
            object: What the metric was measured on.
            text: Free-form message.

        Returns:
            The record that was written.
        """
        return self._write(
            Severity.INFORMATIONAL,
            text,
            metric_data=MetricElement(name=name, value=float(value), object=object),
        )
