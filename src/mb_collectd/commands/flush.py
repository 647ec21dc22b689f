"""Flush cached values."""

import typer

from mb_collectd.app_context import use_context


def flush(
    ctx: typer.Context,
    *,
    timeout_seconds: int = typer.Option(-1, "--timeout-seconds", help="Only flush data older than this (-1: everything)"),
    plugin: list[str] | None = typer.Option(None, "--plugin", "-p", help="Limit to a write plugin (repeatable)"),
    identifier: list[str] | None = typer.Option(None, "--identifier", "-i", help="Limit to an identifier (repeatable)"),
) -> None:
    """Flush cached values to the write plugins (FLUSH)."""
    app = use_context(ctx)
    with app.client() as client:
        client.flush(timeout_seconds, plugin or [], identifier or [])
    app.out.print_flushed()
