"""Ask the service who the current session belongs to."""

import typer

from graphjs.app_context import use_context


def whoami(ctx: typer.Context) -> None:
    """Show the user id the service associates with the stored session."""
    app = use_context(ctx)
    result = app.run(lambda client: client.whoami())
    if (error := result.error) is not None:
        app.out.print_error_and_exit(error.code, error.reason)
    app.out.print_whoami(result.user_id)
