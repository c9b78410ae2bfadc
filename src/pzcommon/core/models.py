"""Core domain models for structured syslog records."""

import os
import socket
from dataclasses import dataclass, field
from enum import IntEnum

from pzcommon.core.errors import InvalidMessageError
from pzcommon.core.timestamps import is_syslog_timestamp, now_rfc3339

# Private Enterprise Number qualifying our SD-IDs
PRIVATE_ENTERPRISE_NUMBER = "48851"

AUDIT_SD_ID = f"pzaudit@{PRIVATE_ENTERPRISE_NUMBER}"
METRIC_SD_ID = f"pzmetric@{PRIVATE_ENTERPRISE_NUMBER}"

DEFAULT_FACILITY = 1
SYSLOG_VERSION = 1

SECURITY_AUDIT_ACTIONS = frozenset({"create", "read", "update", "delete"})


class Severity(IntEnum):
    """RFC 5424 numeric severities."""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFORMATIONAL = 6
    DEBUG = 7


def _default_host_name() -> str:
    try:
        host = socket.gethostname().strip()
    except OSError:
        return "-"
    return host or "-"


def _default_process() -> str:
    return str(os.getpid())


def _has_line_break(value: str) -> bool:
    return "\n" in value or "\r" in value


@dataclass(frozen=True)
class AuditElement:
    """The ``pzaudit`` structured-data element.

    Attributes:
        actor: Who performed the action.
        action: What was done (e.g. ``create``, ``read``).
        actee: What the action was done to.
    """

    actor: str
    action: str
    actee: str

    def validate(self) -> None:
        """Raise InvalidMessageError if any attribute is empty or multi-line."""
        if not self.actor:
            raise InvalidMessageError("AuditElement.actor not set")
        if not self.action:
            raise InvalidMessageError("AuditElement.action not set")
        if not self.actee:
            raise InvalidMessageError("AuditElement.actee not set")
        if any(_has_line_break(v) for v in (self.actor, self.action, self.actee)):
            raise InvalidMessageError("AuditElement attributes must be single lines")


@dataclass(frozen=True)
class MetricElement:
    """The ``pzmetric`` structured-data element.

    Attributes:
        name: Metric name.
        value: Observed value.
        object: What the metric was measured on.
    """

    name: str
    value: float
    object: str

    def validate(self) -> None:
        """Raise InvalidMessageError if name or object is empty or multi-line."""
        if not self.name:
            raise InvalidMessageError("MetricElement.name not set")
        if not self.object:
            raise InvalidMessageError("MetricElement.object not set")
        if _has_line_break(self.name) or _has_line_break(self.object):
            raise InvalidMessageError("MetricElement attributes must be single lines")


@dataclass(frozen=True)
class SyslogMessage:
    """An RFC 5424 log record plus our two private SD elements.

    Records are immutable once built; use ``dataclasses.replace`` to derive
    a modified copy.

    Attributes:
        facility: Syslog facility, always 1 for this family.
        severity: RFC 5424 severity, 0 (emergency) to 7 (debug).
        version: Syslog protocol version, always 1.
        timestamp: RFC 3339 timestamp string.
        host_name: Producing host; ``-`` when unknown.
        application: Producing service.
        process: Producing process ID.
        message_id: Optional message type identifier.
        audit_data: Optional audit SD element.
        metric_data: Optional metric SD element.
        message: Free-form text.
    """

    facility: int = DEFAULT_FACILITY
    severity: int = Severity.INFORMATIONAL
    version: int = SYSLOG_VERSION
    timestamp: str = field(default_factory=now_rfc3339)
    host_name: str = field(default_factory=_default_host_name)
    application: str = ""
    process: str = field(default_factory=_default_process)
    message_id: str = ""
    audit_data: AuditElement | None = None
    metric_data: MetricElement | None = None
    message: str = ""

    @property
    def priority(self) -> int:
        """The RFC 5424 PRI value, ``facility * 8 + severity``."""
        return self.facility * 8 + self.severity

    def is_security_audit(self) -> bool:
        """Return True if the audit action must be formally recorded."""
        if self.audit_data is None:
            return False
        return self.audit_data.action in SECURITY_AUDIT_ACTIONS

    def validate(self) -> None:
        """Check that the record is well-formed.

        Raises:
            InvalidMessageError: Naming the first offending field.
        """
        if self.facility != DEFAULT_FACILITY:
            raise InvalidMessageError(f"Invalid message facility: {self.facility}")
        if not 0 <= self.severity <= 7:
            raise InvalidMessageError(f"Invalid message severity: {self.severity}")
        if self.version != SYSLOG_VERSION:
            raise InvalidMessageError(f"Invalid message version: {self.version}")
        if not is_syslog_timestamp(self.timestamp):
            raise InvalidMessageError(
                f"Invalid message timestamp value or format: {self.timestamp}"
            )
        if not self.host_name:
            raise InvalidMessageError("Message host name not set")
        if not self.application:
            raise InvalidMessageError("Message application not set")
        if not self.process:
            raise InvalidMessageError("Message process not set")
        if _has_line_break(self.message):
            raise InvalidMessageError("Message text must be a single line")

        if self.audit_data is not None:
            self.audit_data.validate()
        if self.metric_data is not None:
            self.metric_data.validate()


@dataclass(frozen=True)
class IndexResponse:
    """Result of posting a document to a document index."""

    created: bool
    id: str
    index: str
    type: str
    version: int = 0
