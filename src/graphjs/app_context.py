"""Application context shared across CLI commands."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import typer

from graphjs.client import GraphJsClient
from graphjs.config import Config
from graphjs.engine.session import SessionStore
from graphjs.output import Output


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared application state passed through Typer context."""

    out: Output
    cfg: Config
    store: SessionStore

    def run[T](self, operation: Callable[[GraphJsClient], Awaitable[T]]) -> T:
        """Run an async operation against a client bound to the persisted session.

        The session store is written back afterwards, so cookies set by login or
        logout survive until the next command.
        """

        async def _run() -> T:
            async with GraphJsClient(self.cfg.client, store=self.store) as client:
                return await operation(client)

        try:
            return asyncio.run(_run())
        finally:
            self.store.save(self.cfg.session_path)


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result
