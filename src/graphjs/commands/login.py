"""Log in and store the session cookie."""

import typer

from graphjs.app_context import use_context


def login(ctx: typer.Context, username: str) -> None:
    """Log in with username and password (prompted)."""
    app = use_context(ctx)
    password = typer.prompt("Password", hide_input=True)
    result = app.run(lambda client: client.login(username, password))
    if not result.success or result.user_id is None:
        error = result.error
        app.out.print_error_and_exit(error.code if error else "login_failed", result.reason or "Login failed.")
    app.out.print_logged_in(result.user_id)
