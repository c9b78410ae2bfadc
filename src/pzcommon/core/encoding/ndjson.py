"""JSON form of syslog records, plus an NDJSON encoder.

The JSON form is what the remote logger service and the document index
receive. Keys are lower-camel case and absent SD elements are ``null``.
"""

import json
from collections.abc import Iterable, Mapping
from typing import Any

from pzcommon.core.errors import InvalidMessageError
from pzcommon.core.models import AuditElement, MetricElement, SyslogMessage


def message_to_dict(message: SyslogMessage) -> dict[str, Any]:
    """Convert a record to its JSON-ready dict form."""
    audit = message.audit_data
    metric = message.metric_data
    return {
        "facility": int(message.facility),
        "severity": int(message.severity),
        "version": int(message.version),
        "timeStamp": message.timestamp,
        "hostName": message.host_name,
        "application": message.application,
        "process": message.process,
        "messageId": message.message_id,
        "auditData": (
            None
            if audit is None
            else {"actor": audit.actor, "action": audit.action, "actee": audit.actee}
        ),
        "metricData": (
            None
            if metric is None
            else {"name": metric.name, "value": metric.value, "object": metric.object}
        ),
        "message": message.message,
    }


def message_from_dict(data: Mapping[str, Any]) -> SyslogMessage:
    """Build a record from its JSON dict form.

    Missing keys take the empty / zero value, as a JSON decoder filling a
    struct would.

    Raises:
        InvalidMessageError: If a field has the wrong type.
    """
    try:
        audit = data.get("auditData")
        metric = data.get("metricData")
        return SyslogMessage(
            facility=int(data.get("facility", 0)),
            severity=int(data.get("severity", 0)),
            version=int(data.get("version", 0)),
            timestamp=str(data.get("timeStamp", "")),
            host_name=str(data.get("hostName", "")),
            application=str(data.get("application", "")),
            process=str(data.get("process", "")),
            message_id=str(data.get("messageId", "")),
            audit_data=(
                None
                if audit is None
                else AuditElement(
                    actor=str(audit.get("actor", "")),
                    action=str(audit.get("action", "")),
                    actee=str(audit.get("actee", "")),
                )
            ),
            metric_data=(
                None
                if metric is None
                else MetricElement(
                    name=str(metric.get("name", "")),
                    value=float(metric.get("value", 0.0)),
                    object=str(metric.get("object", "")),
                )
            ),
            message=str(data.get("message", "")),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise InvalidMessageError(f"malformed syslog JSON: {e}") from e


def encode_messages(messages: Iterable[SyslogMessage]) -> str:
    """Encode records to newline-delimited JSON.

    Args:
        messages: An iterable of SyslogMessage objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no records.
    """
    lines = [json.dumps(message_to_dict(message)) for message in messages]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
