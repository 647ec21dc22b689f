"""Send a raw command line."""

import typer

from mb_collectd.app_context import use_context


def send(ctx: typer.Context, command: str = typer.Argument(help='Command line, e.g. \'GETVAL "myhost/load/load"\'')) -> None:
    """Send a raw command and print the reply lines."""
    app = use_context(ctx)
    if "\n" in command or "\r" in command:
        app.out.print_error_and_exit("invalid_argument", "Command must be a single line.")
    with app.client() as client:
        lines = client.send_command(command)
    app.out.print_lines(lines)
