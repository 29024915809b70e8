"""CLI entry point for graphjs."""

from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus
from pydantic import ValidationError

from graphjs.app_context import AppContext
from graphjs.commands.call import call
from graphjs.commands.login import login
from graphjs.commands.logout import logout
from graphjs.commands.profile import profile
from graphjs.commands.status import status
from graphjs.commands.whoami import whoami
from graphjs.config import Config
from graphjs.engine.session import SessionStore
from graphjs.log import setup_logging
from graphjs.output import Output

app = TyperPlus(package_name="graphjs-client")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path.")] = None,
    public_id: Annotated[str | None, typer.Option("--public-id", help="Application public id.")] = None,
    base_url: Annotated[str | None, typer.Option("--base-url", help="Service endpoint URL.")] = None,
    debug: Annotated[bool | None, typer.Option("--debug/--no-debug", help="Log request URLs and bodies.")] = None,
) -> None:
    """Talk to a GraphJS social-graph service from the terminal."""
    out = Output(json_mode=json_output)
    try:
        cfg = Config.build(data_dir, public_id=public_id, base_url=base_url, debug_logging=debug)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        out.print_error_and_exit("invalid_config", f"Invalid configuration: {field}: {first['msg']}")
    cfg.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(cfg.log_path, debug=cfg.client.debug_logging)
    ctx.obj = AppContext(out=out, cfg=cfg, store=SessionStore.load(cfg.session_path))


# Session
app.command()(login)
app.command()(logout)
app.command()(whoami)
app.command(aliases=["s"])(status)

# Data
app.command(aliases=["p"])(profile)
app.command(aliases=["c"])(call)
