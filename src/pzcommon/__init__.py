"""pzcommon - shared runtime for the pz service family.

Structured RFC 5424 logging with audit and metric extensions, pluggable log
sinks, and a startup-checked directory of dependent services.
"""

from pzcommon.adapters.index import MockIndex
from pzcommon.adapters.logging import SyslogHandler
from pzcommon.adapters.writers import (
    FileWriter,
    HttpWriter,
    IndexWriter,
    InMemoryWriter,
    MultiWriter,
    StreamWriter,
    SyslogdWriter,
)
from pzcommon.config import ServiceName, SystemConfig
from pzcommon.core.encoding import format_message, parse_message
from pzcommon.core.errors import (
    ConfigError,
    DocumentIndexError,
    InvalidCountError,
    InvalidMessageError,
    PzCommonError,
    RemoteSinkError,
    ServiceTimeoutError,
    SinkNotConfiguredError,
    StartupHealthError,
    UnknownServiceError,
)
from pzcommon.core.logs import Syslogger, new_message
from pzcommon.core.models import (
    AuditElement,
    IndexResponse,
    MetricElement,
    Severity,
    SyslogMessage,
)
from pzcommon.core.ports import IndexPort, SyslogReaderPort, SyslogWriterPort
from pzcommon.core.response import JsonPagination, JsonResponse, PaginationOrder

__all__ = [
    # Models
    "AuditElement",
    "IndexResponse",
    "MetricElement",
    "Severity",
    "SyslogMessage",
    # Ports
    "IndexPort",
    "SyslogReaderPort",
    "SyslogWriterPort",
    # Logging
    "Syslogger",
    "SyslogHandler",
    "new_message",
    # Encoding
    "format_message",
    "parse_message",
    # Sinks
    "FileWriter",
    "HttpWriter",
    "InMemoryWriter",
    "IndexWriter",
    "MultiWriter",
    "StreamWriter",
    "SyslogdWriter",
    "MockIndex",
    # Config
    "ServiceName",
    "SystemConfig",
    # HTTP envelope
    "JsonPagination",
    "JsonResponse",
    "PaginationOrder",
    # Errors
    "ConfigError",
    "DocumentIndexError",
    "InvalidCountError",
    "InvalidMessageError",
    "PzCommonError",
    "RemoteSinkError",
    "ServiceTimeoutError",
    "SinkNotConfiguredError",
    "StartupHealthError",
    "UnknownServiceError",
]
