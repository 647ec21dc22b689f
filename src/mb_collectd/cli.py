"""CLI entry point for mb-collectd."""

from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus
from pydantic import ValidationError

from mb_collectd.app_context import AppContext
from mb_collectd.commands.flush import flush
from mb_collectd.commands.getval import getval
from mb_collectd.commands.listval import listval
from mb_collectd.commands.putnotif import putnotif
from mb_collectd.commands.putval import putval
from mb_collectd.commands.send import send
from mb_collectd.config import Config
from mb_collectd.log import setup_logging
from mb_collectd.output import Output

app = TyperPlus(package_name="mb-collectd")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path.")] = None,
    socket_path: Annotated[Path | None, typer.Option("--socket", "-s", help="collectd unixsock socket path.")] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", help="Socket timeout in seconds.")] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Log protocol exchanges to stderr.")] = False,
) -> None:
    """Talk to a running collectd through its unixsock plugin."""
    out = Output(json_mode=json_output)
    try:
        cfg = Config.build(data_dir, socket_path=socket_path, timeout=timeout)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(part) for part in err["loc"])
        out.print_error_and_exit("invalid_argument", f"Invalid configuration: {field}: {err['msg']}")
    cfg.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(cfg.log_path, debug=debug)
    ctx.obj = AppContext(out=out, cfg=cfg)


# Queries
app.command(aliases=["g"])(getval)
app.command(aliases=["l"])(listval)

# Submissions
app.command()(putval)
app.command()(putnotif)
app.command()(flush)

# Raw passthrough
app.command()(send)
