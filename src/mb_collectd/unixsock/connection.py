"""Connection and reply framing over a single stream transport."""

import contextlib
import logging
import socket
import threading
from pathlib import Path
from types import TracebackType
from typing import Protocol, Self

from mb_collectd.unixsock.errors import ProtocolError, TransportError
from mb_collectd.unixsock.protocol import parse_status

logger = logging.getLogger(__name__)

# Read buffer size
_BUFSIZE = 65536
# Longest reply line accepted before the peer is considered broken
MAX_LINE_BYTES = 1024 * 1024


class Transport(Protocol):
    """Bidirectional byte stream with explicit close (a socket file, a pipe pair, a test fake)."""

    def read(self, size: int, /) -> bytes | None: ...

    def write(self, data: bytes, /) -> int | None: ...

    def close(self) -> None: ...


class _SocketStream:
    """Transport over a connected socket. close() shuts the socket down first, so a read blocked in another thread returns."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def read(self, size: int) -> bytes:
        return self._sock.recv(size)

    def write(self, data: bytes) -> int:
        return self._sock.send(data)

    def close(self) -> None:
        with contextlib.suppress(OSError):
            self._sock.shutdown(socket.SHUT_RDWR)
        self._sock.close()


class _LineReader:
    """Buffered newline-delimited reader on top of a transport."""

    def __init__(self, stream: Transport, max_line_bytes: int = MAX_LINE_BYTES) -> None:
        self._stream = stream
        self._max_line_bytes = max_line_bytes
        self._buf = bytearray()

    def readline(self) -> str:
        """Return the next line without its newline.

        Raises:
            TransportError: The read failed, the stream ended before a full line, or the line is too long.

        """
        while (idx := self._buf.find(b"\n")) < 0:
            if len(self._buf) > self._max_line_bytes:
                msg = f"Reply line exceeds {self._max_line_bytes} bytes."
                raise TransportError(msg)
            try:
                chunk = self._stream.read(_BUFSIZE)
            except (OSError, ValueError) as e:
                msg = f"Read failed: {e}"
                raise TransportError(msg) from e
            if not chunk:
                msg = "Connection closed by peer."
                raise TransportError(msg)
            self._buf += chunk
        line = bytes(self._buf[:idx])
        del self._buf[: idx + 1]
        return line.decode("utf-8", errors="replace")


class Connection:
    """One unixsock session: a writer and a buffered reader sharing a transport.

    Commands are strictly sequential. An internal lock is held for each command,
    so concurrent callers are serialized rather than interleaving on the wire.
    """

    def __init__(self, stream: Transport, *, max_line_bytes: int = MAX_LINE_BYTES) -> None:
        """Wrap an already open transport.

        Args:
            stream: Byte stream connected to the daemon. The connection owns it from now on.
            max_line_bytes: Longest reply line accepted; a longer one is a transport error.

        """
        self._stream = stream
        self._reader = _LineReader(stream, max_line_bytes)
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def open_unix(cls, path: Path | str, timeout: float | None = None) -> Self:
        """Connect to a Unix socket and wrap it.

        Args:
            path: Filesystem path of the daemon socket.
            timeout: Socket timeout in seconds; None blocks forever.

        Raises:
            TransportError: The socket could not be connected.

        """
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(timeout)
            sock.connect(str(path))
        except OSError as e:
            sock.close()
            logger.debug("Cannot connect to %s: %s", path, e)
            msg = f"Cannot connect to {path}: {e}"
            raise TransportError(msg) from e
        return cls(_SocketStream(sock))

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    def send(self, command: str) -> list[str]:
        """Send one command line and return the reply lines.

        Raises:
            ValueError: The command spans more than one line.
            TransportError: The stream failed; partial holds the lines read before the failure.
            ProtocolError: The daemon answered with a negative status.

        """
        if "\n" in command or "\r" in command:
            msg = f"Command must be a single line: {command!r}"
            raise ValueError(msg)

        with self._lock:
            if self._closed:
                msg = "Connection is closed."
                raise TransportError(msg)
            logger.debug("Command: %s", command)
            self._write_all((command + "\n").encode())

            status_line = self._reader.readline()
            try:
                num, status = parse_status(status_line)
            except ValueError as e:
                raise TransportError(str(e)) from e
            logger.debug("Status %d: %s", num, status)
            if num < 0:
                raise ProtocolError(status)

            lines: list[str] = []
            for _ in range(num):
                try:
                    lines.append(self._reader.readline())
                except TransportError as e:
                    raise TransportError(str(e), partial=lines) from e
            return lines

    def _write_all(self, data: bytes) -> None:
        """Write the whole buffer, looping over short writes."""
        view = memoryview(data)
        try:
            while view:
                written = self._stream.write(view)
                if written is None:
                    written = len(view)
                view = view[written:]
        except (OSError, ValueError) as e:
            msg = f"Write failed: {e}"
            raise TransportError(msg) from e

    def close(self) -> None:
        """Close the transport. Safe to call more than once.

        May be called from another thread to abort a blocked command, which then raises TransportError.
        """
        if self._closed:
            return
        self._closed = True
        self._stream.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None) -> None:
        self.close()
