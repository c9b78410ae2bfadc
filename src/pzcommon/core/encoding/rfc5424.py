"""RFC 5424 text codec for syslog records.

The textual form is one line::

    <PRI>VER TIMESTAMP HOST APP PROC MSGID SDES MESSAGE

Empty header fields are written as ``-``. SDES holds the ``pzaudit`` and
``pzmetric`` elements (in that order, space-separated), or ``-`` when neither
is present. CR and LF anywhere in the line are written as ``#015`` and
``#012``.
"""

import math
import re

from pzcommon.core.errors import InvalidMessageError
from pzcommon.core.models import (
    AUDIT_SD_ID,
    METRIC_SD_ID,
    AuditElement,
    MetricElement,
    SyslogMessage,
)
from pzcommon.core.timestamps import format_rfc3339, is_syslog_timestamp, parse_rfc3339

NIL = "-"

_HEADER = re.compile(
    r"^<(?P<pri>\d{1,3})>(?P<version>\d{1,2}) "
    r"(?P<timestamp>\S+) (?P<host>\S+) (?P<app>\S+) (?P<proc>\S+) (?P<msgid>\S+) "
    r"(?P<rest>.*)$",
    re.DOTALL,
)

# Line breaks are escaped the way rsyslog escapes control characters
_LINE_BREAK_ESCAPES = {"\r": "#015", "\n": "#012"}

# A space-separated element is only taken as SD when it is one of ours;
# otherwise it starts the message
_PRIVATE_SD_STARTS = (f" [{AUDIT_SD_ID} ", f" [{METRIC_SD_ID} ")

# Characters that end an SD-NAME (RFC 5424 section 6.3.2)
_NAME_STOP = frozenset(' ="]')


def _nil(value: str) -> str:
    return value if value else NIL


def _unnil(value: str) -> str:
    return "" if value == NIL else value


def _fold_line_breaks(text: str) -> str:
    for char, escape in _LINE_BREAK_ESCAPES.items():
        text = text.replace(char, escape)
    return text


def _wire_timestamp(value: str) -> str:
    if is_syslog_timestamp(value):
        return value
    try:
        return format_rfc3339(parse_rfc3339(value))
    except ValueError:
        return NIL


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("]", "\\]")


def _format_float(value: float) -> str:
    # peers expect NaN, +Inf and -Inf for non-finite values
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:f}"


def format_audit_element(element: AuditElement) -> str:
    """Return the ``[pzaudit@48851 ...]`` form of an audit element."""
    return (
        f'[{AUDIT_SD_ID} Actor="{_escape(element.actor)}" '
        f'Action="{_escape(element.action)}" Actee="{_escape(element.actee)}"]'
    )


def format_metric_element(element: MetricElement) -> str:
    """Return the ``[pzmetric@48851 ...]`` form of a metric element."""
    return (
        f'[{METRIC_SD_ID} Name="{_escape(element.name)}" '
        f'Value="{_format_float(element.value)}" Object="{_escape(element.object)}"]'
    )


def format_message(message: SyslogMessage) -> str:
    """Serialize a record to its RFC 5424 line (without a trailing newline).

    Serialization does not validate; call ``message.validate()`` first when
    the record comes from an untrusted producer.

    Args:
        message: The record to serialize.

    Returns:
        The single-line textual form.
    """
    timestamp = _wire_timestamp(message.timestamp)
    header = (
        f"<{message.priority}>{message.version} {timestamp} "
        f"{_nil(message.host_name)} {_nil(message.application)} "
        f"{_nil(message.process)} {_nil(message.message_id)}"
    )

    sdes = []
    if message.audit_data is not None:
        sdes.append(format_audit_element(message.audit_data))
    if message.metric_data is not None:
        sdes.append(format_metric_element(message.metric_data))
    sde = " ".join(sdes) or NIL

    return _fold_line_breaks(f"{header} {sde} {message.message}")


def _scan_name(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] not in _NAME_STOP:
        pos += 1
    return pos


def _scan_value(text: str, pos: int) -> tuple[str, int]:
    chars = []
    while pos < len(text):
        ch = text[pos]
        if ch == "\\" and pos + 1 < len(text) and text[pos + 1] in '"\\]':
            chars.append(text[pos + 1])
            pos += 2
        elif ch == '"':
            return "".join(chars), pos + 1
        else:
            chars.append(ch)
            pos += 1
    raise InvalidMessageError("unterminated structured data parameter value")


def _parse_structured_data(text: str) -> tuple[list[tuple[str, dict[str, str]]], str]:
    """Split the leading SD-ELEMENTs off text.

    Returns:
        The parsed (sd_id, params) pairs and the unparsed remainder.
    """
    elements: list[tuple[str, dict[str, str]]] = []
    pos = 0
    while pos < len(text):
        if elements and text.startswith(_PRIVATE_SD_STARTS, pos):
            pos += 1
        elif text[pos] != "[":
            break
        end = _scan_name(text, pos + 1)
        sd_id = text[pos + 1 : end]
        if not sd_id:
            raise InvalidMessageError("structured data element has no SD-ID")
        pos = end
        params: dict[str, str] = {}
        while True:
            if pos >= len(text):
                raise InvalidMessageError(f"unterminated structured data element: {sd_id}")
            if text[pos] == "]":
                pos += 1
                break
            if text[pos] != " ":
                raise InvalidMessageError(f"malformed structured data element: {sd_id}")
            end = _scan_name(text, pos + 1)
            name = text[pos + 1 : end]
            if not name or text[end : end + 2] != '="':
                raise InvalidMessageError(f"malformed structured data parameter in {sd_id}")
            params[name], pos = _scan_value(text, end + 2)
        elements.append((sd_id, params))
    return elements, text[pos:]


def _audit_from_params(params: dict[str, str]) -> AuditElement:
    return AuditElement(
        actor=params.get("Actor", ""),
        action=params.get("Action", ""),
        actee=params.get("Actee", ""),
    )


def _metric_from_params(params: dict[str, str]) -> MetricElement:
    raw = params.get("Value", "0")
    try:
        value = float(raw)
    except ValueError as e:
        raise InvalidMessageError(f"invalid {METRIC_SD_ID} Value: {raw}") from e
    return MetricElement(name=params.get("Name", ""), value=value, object=params.get("Object", ""))


def parse_message(text: str) -> SyslogMessage:
    """Parse an RFC 5424 line back into a record.

    Header fields, the message text and the ``pzaudit`` / ``pzmetric``
    elements are recovered; other SD-IDs are skipped. Nil (``-``) fields
    become empty strings. RFC 5424 timestamps are kept as written; other RFC 3339
    spellings are normalized to second precision.

    Args:
        text: One syslog line, optionally with a trailing newline.

    Returns:
        The parsed record.

    Raises:
        InvalidMessageError: If the line is not RFC 5424.
    """
    match = _HEADER.match(text.rstrip("\r\n"))
    if match is None:
        raise InvalidMessageError(f"not an RFC 5424 message: {text!r}")

    pri = int(match.group("pri"))
    if pri > 191:
        raise InvalidMessageError(f"invalid PRI value: {pri}")

    raw_timestamp = match.group("timestamp")
    if raw_timestamp == NIL:
        timestamp = ""
    else:
        timestamp = _wire_timestamp(raw_timestamp)
        if timestamp == NIL:
            raise InvalidMessageError(f"invalid timestamp: {raw_timestamp}")

    rest = match.group("rest")
    audit_data = None
    metric_data = None
    if rest.startswith(NIL):
        remainder = rest[len(NIL) :]
    elif rest.startswith("["):
        elements, remainder = _parse_structured_data(rest)
        for sd_id, params in elements:
            if sd_id == AUDIT_SD_ID:
                audit_data = _audit_from_params(params)
            elif sd_id == METRIC_SD_ID:
                metric_data = _metric_from_params(params)
    else:
        raise InvalidMessageError("missing structured data field")

    if remainder and not remainder.startswith(" "):
        raise InvalidMessageError("structured data not followed by a space")
    body = remainder[1:].removeprefix("\ufeff")

    return SyslogMessage(
        facility=pri // 8,
        severity=pri % 8,
        version=int(match.group("version")),
        timestamp=timestamp,
        host_name=_unnil(match.group("host")),
        application=_unnil(match.group("app")),
        process=_unnil(match.group("proc")),
        message_id=_unnil(match.group("msgid")),
        audit_data=audit_data,
        metric_data=metric_data,
        message=body,
    )
