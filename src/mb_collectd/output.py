"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201 — this module is the output layer; print() is its sole mechanism for producing CLI output.

import json
import sys
from datetime import datetime
from typing import NoReturn

import typer


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def _success(self, data: dict[str, object], message: str) -> None:
        """Print a success result in JSON or human-readable format."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}))
        elif message:
            print(message)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
        raise typer.Exit(code=1)

    # --- Queries ---

    def print_values(self, identifier: str, values: dict[str, float]) -> None:
        """Print the data source values of one identifier."""
        self._success(
            {"identifier": identifier, "values": values},
            "\n".join(f"{name}={value!r}" for name, value in values.items()),
        )

    def print_list_values(self, entries: dict[str, datetime]) -> None:
        """Print known identifiers with their last update time (epoch seconds)."""
        if self._json_mode:
            data = {identifier: ts.isoformat() for identifier, ts in entries.items()}
            print(json.dumps({"ok": True, "data": {"values": data}}))
        else:
            for identifier, ts in sorted(entries.items()):
                print(f"{ts.timestamp():.3f} {identifier}")

    def print_lines(self, lines: list[str]) -> None:
        """Print raw reply lines of a passthrough command."""
        self._success({"lines": lines}, "\n".join(lines))

    # --- Submissions ---

    def print_value_submitted(self, identifier: str) -> None:
        """Print PUTVAL confirmation."""
        self._success({"identifier": identifier}, f"Value submitted for '{identifier}'.")

    def print_notification_submitted(self) -> None:
        """Print PUTNOTIF confirmation."""
        self._success({}, "Notification submitted.")

    def print_flushed(self) -> None:
        """Print FLUSH confirmation."""
        self._success({}, "Flushed.")
