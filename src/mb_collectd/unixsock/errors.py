"""Error taxonomy for the unixsock client.

Two kinds, never conflated:

- TransportError: the stream failed (write, read, connect, closed mid-frame, malformed status line).
  The connection is likely unusable.
- ProtocolError: the daemon rejected the command, or a reply line could not be parsed.
  The connection is still usable.
"""

from typing import Any


class CollectdError(Exception):
    """Base error for all unixsock client failures."""

    def __init__(self, message: str, *, partial: Any = None) -> None:
        """Initialize with a message and an optional partial result.

        Args:
            message: Human-readable error description.
            partial: Whatever was read or parsed before the failure, or None.

        """
        super().__init__(message)
        self.partial = partial


class TransportError(CollectdError):
    """The underlying stream failed."""


class ProtocolError(CollectdError):
    """The daemon rejected a command or its reply could not be parsed."""
