"""Synchronous client for the collectd unixsock plugin."""

from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Self

from mb_collectd.unixsock import protocol
from mb_collectd.unixsock.connection import Connection, Transport
from mb_collectd.unixsock.protocol import Value


class CollectdClient:
    """Typed commands on top of a unixsock connection."""

    def __init__(self, conn: Connection) -> None:
        """Initialize client with an open connection.

        Args:
            conn: Connection to the daemon. Closed by close().

        """
        self._conn = conn

    @classmethod
    def open_unix(cls, path: Path | str, timeout: float | None = None) -> Self:
        """Connect to the daemon socket at path."""
        return cls(Connection.open_unix(path, timeout=timeout))

    @classmethod
    def from_stream(cls, stream: Transport) -> Self:
        """Wrap a caller-supplied transport."""
        return cls(Connection(stream))

    def send_command(self, command: str) -> list[str]:
        """Send a raw command line and return the reply lines."""
        return self._conn.send(command)

    def get_value(self, identifier: str) -> dict[str, float]:
        """Return the current values of an identifier, keyed by data source name.

        Raises:
            ProtocolError: The daemon rejected the request or a value did not parse
                (partial holds the values parsed before the failure).

        """
        return protocol.parse_getval(self._conn.send(protocol.build_getval(identifier)))

    def put_value(
        self, identifier: str, options: Mapping[str, str] | None, timestamp: datetime | None, *values: Value | str
    ) -> None:
        """Submit values for an identifier.

        Args:
            identifier: Target identifier, host/plugin-instance/type-instance.
            options: Extra options such as {"interval": "10"}.
            timestamp: Time of the measurement; None lets the daemon use the current time.
            values: One number or UNDEFINED per data source.

        """
        self._conn.send(protocol.build_putval(identifier, options, timestamp, values))

    def put_notification(self, options: Mapping[str, str] | None, message: str) -> None:
        """Submit a notification, e.g. options={"severity": "warning", "host": "myhost"}."""
        self._conn.send(protocol.build_putnotif(options, message))

    def list_values(self) -> dict[str, datetime]:
        """Return every identifier known to the daemon with its last update time."""
        return protocol.parse_listval(self._conn.send(protocol.build_listval()))

    def flush(self, timeout: int = -1, plugins: Iterable[str] = (), identifiers: Iterable[str] = ()) -> None:
        """Flush cached data older than timeout seconds (-1 for no timeout).

        Empty plugins/identifiers flush everything.
        """
        self._conn.send(protocol.build_flush(timeout, plugins, identifiers))

    def close(self) -> None:
        """Close the connection."""
        self._conn.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None) -> None:
        self.close()
