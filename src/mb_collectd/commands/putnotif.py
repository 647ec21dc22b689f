"""Submit a notification."""

import typer

from mb_collectd.app_context import use_context
from mb_collectd.commands.options import parse_options


def putnotif(
    ctx: typer.Context,
    message: str = typer.Argument(help="Notification message"),
    *,
    option: list[str] | None = typer.Option(None, "--option", "-o", help="Notification field key=value, e.g. severity=warning"),
) -> None:
    """Submit a notification (PUTNOTIF)."""
    app = use_context(ctx)
    options = parse_options(app.out, option)
    with app.client() as client:
        client.put_notification(options, message)
    app.out.print_notification_submitted()
