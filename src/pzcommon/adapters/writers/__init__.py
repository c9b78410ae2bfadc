"""Sink adapters implementing SyslogWriterPort."""

from pzcommon.adapters.writers.file import FileWriter, StreamWriter
from pzcommon.adapters.writers.in_memory import InMemoryWriter
from pzcommon.adapters.writers.index import IndexWriter
from pzcommon.adapters.writers.multi import MultiWriter
from pzcommon.adapters.writers.remote import HttpWriter
from pzcommon.adapters.writers.syslogd import SyslogdWriter

__all__ = [
    "FileWriter",
    "HttpWriter",
    "InMemoryWriter",
    "IndexWriter",
    "MultiWriter",
    "StreamWriter",
    "SyslogdWriter",
]
