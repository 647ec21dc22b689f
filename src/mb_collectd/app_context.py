"""Application context shared across CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import typer

from mb_collectd.config import Config
from mb_collectd.output import Output
from mb_collectd.unixsock import CollectdClient, ProtocolError, TransportError


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared application state passed through Typer context."""

    out: Output
    cfg: Config

    @contextmanager
    def client(self) -> Iterator[CollectdClient]:
        """Open a client for one command; daemon and transport errors exit through Output."""
        try:
            with CollectdClient.open_unix(self.cfg.socket_path, timeout=self.cfg.timeout) as client:
                yield client
        except TransportError as e:
            self.out.print_error_and_exit("transport", str(e))
        except ProtocolError as e:
            self.out.print_error_and_exit("protocol", str(e))


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result
