"""Show the locally stored session."""

import typer

from graphjs.app_context import use_context
from graphjs.engine.session import SessionManager


def status(ctx: typer.Context) -> None:
    """Show the stored session without contacting the service."""
    app = use_context(ctx)
    app.out.print_session(SessionManager(app.store, app.cfg.client).session())
