"""Parsing of repeated key=value CLI options and PUTVAL value arguments."""

from mb_collectd.output import Output
from mb_collectd.unixsock import UNDEFINED, Value


def parse_options(out: Output, raw: list[str] | None) -> dict[str, str]:
    """Turn ["key=value", ...] into a dict, exiting on a malformed entry."""
    options: dict[str, str] = {}
    for item in raw or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            out.print_error_and_exit("invalid_argument", f"Option must be key=value: {item!r}")
        options[key] = value
    return options


def parse_value(out: Output, text: str) -> Value:
    """Parse a PUTVAL value argument: U, an integer, or a float."""
    if text == "U":
        return UNDEFINED
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        out.print_error_and_exit("invalid_argument", f"Value must be a number or U: {text!r}")
