"""Shared fixtures: an in-memory transport and a scripted daemon on a real Unix socket."""

import io
import socket
import tempfile
import threading
from collections.abc import Iterator
from pathlib import Path

import pytest


class FakeStream:
    """In-memory transport: reads come from a canned reply, writes are recorded."""

    def __init__(self, reply: bytes = b"", chunk_size: int | None = None) -> None:
        self._input = io.BytesIO(reply)
        self._chunk_size = chunk_size
        self.written = bytearray()
        self.closed = False
        self.close_calls = 0

    def read(self, size: int) -> bytes:
        if self._chunk_size is not None:
            size = min(size, self._chunk_size)
        return self._input.read(size)

    def write(self, data: bytes) -> int:
        self.written += data
        return len(data)

    def close(self) -> None:
        self.closed = True
        self.close_calls += 1


class FakeDaemon:
    """Answers command lines with scripted replies; unknown commands get "-1 Unknown command".

    A reply of None leaves the command unanswered.
    """

    def __init__(self, sock_path: Path) -> None:
        self.sock_path = sock_path
        self.replies: dict[str, str | None] = {}
        self.received: list[str] = []
        self._stop = threading.Event()
        self._server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._server.bind(str(sock_path))
        self._server.listen(8)
        self._server.settimeout(0.1)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._server.accept()
            except TimeoutError:
                continue
            except OSError:
                return
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        with conn, conn.makefile("rwb") as f:
            for raw in f:
                line = raw.decode().rstrip("\n")
                self.received.append(line)
                reply = self.replies.get(line, "-1 Unknown command\n")
                if reply is None:
                    continue
                f.write(reply.encode())
                f.flush()

    def close(self) -> None:
        self._stop.set()
        self._thread.join(timeout=2)
        self._server.close()


@pytest.fixture
def sock_dir() -> Iterator[Path]:
    """Short temporary directory: Unix socket paths are limited to ~100 bytes."""
    with tempfile.TemporaryDirectory(prefix="mbc") as d:
        yield Path(d)


@pytest.fixture
def daemon(sock_dir: Path) -> Iterator[FakeDaemon]:
    """Scripted daemon listening on a Unix socket."""
    d = FakeDaemon(sock_dir / "collectd.sock")
    yield d
    d.close()


@pytest.fixture
def make_stream() -> type[FakeStream]:
    """In-memory transport factory: make_stream(reply_bytes, chunk_size=None)."""
    return FakeStream
