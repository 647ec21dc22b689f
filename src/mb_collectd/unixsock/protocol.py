"""Command construction and reply parsing for the collectd unixsock protocol.

Plain-text lines over a Unix socket. Each request is one line; each reply is a status
line followed by as many lines as the status count declares.

Request:  GETVAL "myhost/cpu-0/cpu-idle"
Reply:    1 Value found
          value=4.2e+01
Error:    -1 No such value

String arguments are wrapped in double quotes but never escaped: collectd's own parser
does not understand escapes either.
"""

import math
import re
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from enum import Enum

from mb_collectd.unixsock.errors import ProtocolError


class Undefined(Enum):
    """Marker for a data source slot without data."""

    UNDEFINED = "U"


UNDEFINED = Undefined.UNDEFINED

Value = int | float | Undefined

# Signed count, then optionally a space and the free-text status
_STATUS_RE = re.compile(r"([+-]?\d+)(?: (.*))?")


def quote(text: str) -> str:
    """Wrap a string argument in double quotes, without escaping."""
    return f'"{text}"'


def format_options(options: Mapping[str, str] | None) -> str:
    """Serialize an options map as space-separated key="value" pairs."""
    if not options:
        return ""
    return " ".join(f"{key}={quote(value)}" for key, value in options.items())


def format_value(value: Value | str) -> str:
    """Format a single data source value. The string "U" is accepted as UNDEFINED.

    Raises:
        TypeError: Value is not a number or the undefined marker.

    """
    match value:
        case Undefined.UNDEFINED | "U":
            return "U"
        case bool():
            pass
        case int():
            return str(value)
        case float():
            return repr(value)
    msg = f"Unsupported value {value!r}: expected a number or UNDEFINED."
    raise TypeError(msg)


def format_timestamp(timestamp: datetime | None) -> str:
    """Format a submission time as integer Unix seconds, or N for "now"."""
    if timestamp is None:
        return "N"
    return str(math.floor(timestamp.timestamp()))


def _join(*parts: str) -> str:
    """Join non-empty command parts with single spaces."""
    return " ".join(part for part in parts if part)


def build_getval(identifier: str) -> str:
    """Build a GETVAL command line."""
    return f"GETVAL {quote(identifier)}"


def build_putval(identifier: str, options: Mapping[str, str] | None, timestamp: datetime | None, values: Iterable[Value | str]) -> str:
    """Build a PUTVAL command line: identifier, options, then time:value:value..."""
    value_list = ":".join([format_timestamp(timestamp), *(format_value(v) for v in values)])
    return _join("PUTVAL", quote(identifier), format_options(options), value_list)


def build_putnotif(options: Mapping[str, str] | None, message: str) -> str:
    """Build a PUTNOTIF command line. The message always comes last."""
    return _join("PUTNOTIF", format_options(options), f"message={quote(message)}")


def build_listval() -> str:
    """Build a LISTVAL command line."""
    return "LISTVAL"


def build_flush(timeout: int, plugins: Iterable[str] = (), identifiers: Iterable[str] = ()) -> str:
    """Build a FLUSH command line. A timeout of -1 means no timeout; empty filters apply to everything."""
    parts = ["FLUSH", f"timeout={int(timeout)}"]
    parts.extend(f"plugin={quote(plugin)}" for plugin in plugins)
    parts.extend(f"identifier={quote(identifier)}" for identifier in identifiers)
    return " ".join(parts)


def parse_status(line: str) -> tuple[int, str]:
    """Split a status line into its signed count and free-text status.

    Raises:
        ValueError: The line does not start with an integer.

    """
    m = _STATUS_RE.fullmatch(line)
    if m is None:
        msg = f"Malformed status line: {line!r}"
        raise ValueError(msg)
    return int(m.group(1)), m.group(2) or ""


def parse_getval(lines: Iterable[str]) -> dict[str, float]:
    """Parse GETVAL reply lines of the form name=number.

    Raises:
        ProtocolError: A line is not name=number; partial holds the values parsed so far.

    """
    result: dict[str, float] = {}
    for line in lines:
        name, sep, raw = line.partition("=")
        if not sep:
            msg = f"Malformed value line {line!r}"
            raise ProtocolError(msg, partial=result)
        try:
            result[name] = float(raw)
        except ValueError:
            msg = f"Could not parse value {raw!r}"
            raise ProtocolError(msg, partial=result) from None
    return result


def parse_timestamp(text: str) -> datetime:
    """Parse a LISTVAL timestamp: seconds with an optional millisecond fraction.

    Only the seconds must parse: a missing or unparseable fraction counts as zero.

    Raises:
        ValueError: The seconds part is not an integer.

    """
    sec, _, frac = text.partition(".")
    seconds = int(sec)
    milliseconds = int(frac) if frac.isdecimal() else 0
    return datetime.fromtimestamp(seconds, tz=UTC) + timedelta(milliseconds=milliseconds)


def parse_listval(lines: Iterable[str]) -> dict[str, datetime]:
    """Parse LISTVAL reply lines of the form "<timestamp> <identifier>".

    Raises:
        ProtocolError: A line is malformed; partial holds the entries parsed so far.

    """
    result: dict[str, datetime] = {}
    for line in lines:
        raw_time, sep, identifier = line.partition(" ")
        if not sep:
            msg = f"Malformed identifier line {line!r}"
            raise ProtocolError(msg, partial=result)
        try:
            result[identifier] = parse_timestamp(raw_time)
        except (ValueError, OverflowError, OSError):
            msg = f"Could not parse timestamp {raw_time!r}"
            raise ProtocolError(msg, partial=result) from None
    return result
