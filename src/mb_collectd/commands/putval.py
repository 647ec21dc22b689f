"""Submit values for an identifier."""

from datetime import UTC, datetime

import typer

from mb_collectd.app_context import use_context
from mb_collectd.commands.options import parse_options, parse_value


def putval(
    ctx: typer.Context,
    identifier: str = typer.Argument(help="Identifier, e.g. myhost/exec-app/gauge-queue"),
    values: list[str] = typer.Argument(help="One value per data source; U for undefined"),
    *,
    option: list[str] | None = typer.Option(None, "--option", "-o", help="Extra option key=value (repeatable)"),
    time: int | None = typer.Option(None, "--time", help="Unix timestamp of the values (default: now)"),
) -> None:
    """Submit values for an identifier (PUTVAL)."""
    app = use_context(ctx)
    options = parse_options(app.out, option)
    parsed = [parse_value(app.out, v) for v in values]
    timestamp = datetime.fromtimestamp(time, tz=UTC) if time is not None else None
    with app.client() as client:
        client.put_value(identifier, options, timestamp, *parsed)
    app.out.print_value_submitted(identifier)
