"""Text and JSON encodings of syslog records."""

from pzcommon.core.encoding.ndjson import (
    encode_messages,
    message_from_dict,
    message_to_dict,
)
from pzcommon.core.encoding.rfc5424 import format_message, parse_message

__all__ = [
    "encode_messages",
    "format_message",
    "message_from_dict",
    "message_to_dict",
    "parse_message",
]
