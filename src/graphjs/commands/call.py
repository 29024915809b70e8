"""Invoke any operation by name."""

import typer

from graphjs.app_context import use_context
from graphjs.results import GenericResult


def _parse_params(pairs: list[str]) -> dict[str, str | None]:
    """Turn ``key=value`` arguments into a parameter dict.

    Raises:
        typer.BadParameter: An argument has no ``=``.

    """
    params: dict[str, str | None] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            msg = f"Expected key=value, got {pair!r}"
            raise typer.BadParameter(msg)
        params[key] = value
    return params


def call(
    ctx: typer.Context,
    operation: str,
    params: list[str] | None = typer.Argument(default=None, help="Parameters as key=value"),
) -> None:
    """Call an operation by name, e.g. ``call getThread id=42``."""
    app = use_context(ctx)
    query = _parse_params(params or [])
    result = app.run(lambda client: client.call(operation, GenericResult, query))
    if (error := result.error) is not None:
        app.out.print_error_and_exit(error.code, error.reason)
    app.out.print_call_result(operation, dict(result.model_extra or {}))
