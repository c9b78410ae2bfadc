"""RFC 3339 timestamp helpers used by the syslog record and its codec."""

import re
from datetime import datetime, timedelta

_RFC3339 = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware datetime.

    Args:
        value: Timestamp such as ``2023-01-02T03:04:05Z`` or
            ``2023-01-02T03:04:05.123-05:00``.

    Returns:
        Timezone-aware datetime.

    Raises:
        ValueError: If the value is not a valid RFC 3339 timestamp.
    """
    match = _RFC3339.match(value)
    if match is None:
        raise ValueError(f"not an RFC 3339 timestamp: {value!r}")
    text = match.group("base").replace("t", "T")
    frac = match.group("frac")
    if frac:
        # datetime keeps microseconds only
        text += "." + frac[:6].ljust(6, "0")
    offset = match.group("offset")
    text += "+00:00" if offset in ("Z", "z") else offset
    return datetime.fromisoformat(text)


def format_rfc3339(moment: datetime) -> str:
    """Format an aware datetime at second precision, using ``Z`` for UTC."""
    text = moment.replace(microsecond=0).isoformat()
    if moment.utcoffset() == timedelta(0):
        text = text[: -len("+00:00")] + "Z"
    return text


def now_rfc3339() -> str:
    """Return the current local time as an RFC 3339 string."""
    return format_rfc3339(datetime.now().astimezone())


def is_rfc3339(value: str) -> bool:
    """Return True if value parses as an RFC 3339 timestamp."""
    try:
        parse_rfc3339(value)
    except ValueError:
        return False
    return True


# The RFC 5424 subset of RFC 3339: upper-case T and Z, at most six
# fractional digits
_SYSLOG_TIMESTAMP = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d{1,6})?(?:Z|[+-]\d{2}:\d{2})$"
)


def is_syslog_timestamp(value: str) -> bool:
    """Return True if value can go on the wire unchanged as a TIMESTAMP."""
    return _SYSLOG_TIMESTAMP.match(value) is not None and is_rfc3339(value)
