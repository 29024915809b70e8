"""Show a user profile."""

import typer

from graphjs.app_context import use_context


def profile(
    ctx: typer.Context,
    user_id: str | None = typer.Argument(default=None, help="User id (defaults to the logged-in user)"),
) -> None:
    """Show a user profile."""
    app = use_context(ctx)
    result = app.run(lambda client: client.profile(user_id))
    if (error := result.error) is not None:
        app.out.print_error_and_exit(error.code, error.reason)
    if result.profile is None:
        app.out.print_error_and_exit("not_found", "Profile not returned.")
    app.out.print_profile(result.profile)
