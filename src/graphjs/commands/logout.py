"""End the session on the service."""

import typer

from graphjs.app_context import use_context


def logout(ctx: typer.Context) -> None:
    """Log out and replace the session cookie with the logout marker."""
    app = use_context(ctx)
    result = app.run(lambda client: client.logout())
    if (error := result.error) is not None:
        app.out.print_error_and_exit(error.code, error.reason)
    app.out.print_logged_out()
