"""Query the current values of an identifier."""

import typer

from mb_collectd.app_context import use_context


def getval(ctx: typer.Context, identifier: str = typer.Argument(help="Identifier, e.g. myhost/cpu-0/cpu-idle")) -> None:
    """Show current values of an identifier (GETVAL)."""
    app = use_context(ctx)
    with app.client() as client:
        values = client.get_value(identifier)
    app.out.print_values(identifier, values)
