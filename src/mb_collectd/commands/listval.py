"""List identifiers known to the daemon."""

import typer

from mb_collectd.app_context import use_context


def listval(ctx: typer.Context) -> None:
    """List known identifiers with their last update time (LISTVAL)."""
    app = use_context(ctx)
    with app.client() as client:
        entries = client.list_values()
    app.out.print_list_values(entries)
