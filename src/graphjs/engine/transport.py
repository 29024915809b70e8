"""HTTP dispatch: one GET per operation, one RawResponse per request.

No retries, no caching, no redirects beyond httpx defaults. The cookie jar of the
session store is handed to httpx as-is, so cookies set by the client and by the
service live in the same place.
"""

import asyncio
import logging
from collections.abc import Callable, Generator
from dataclasses import dataclass
from typing import Any, Self

import httpx

from graphjs.config import ClientConfig
from graphjs.engine.request import PreparedRequest
from graphjs.engine.session import SessionStore
from graphjs.errors import TransportError

logger = logging.getLogger(__name__)

CANCELLED_REASON = "Request cancelled."


@dataclass(frozen=True)
class RawResponse:
    """What came back for one request: a transport error, or a status code with a body."""

    status_code: int | None = None
    body: bytes | None = None
    transport_error: str | None = None


class Dispatcher:
    """Sends prepared requests through a shared httpx client."""

    def __init__(self, cfg: ClientConfig, store: SessionStore, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize the dispatcher.

        Args:
            cfg: Client configuration (timeout, debug logging).
            store: Session store whose cookie jar is attached to every request.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.

        """
        self._cfg = cfg
        self._http = httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=cfg.request_timeout,
            cookies=store.jar,
            transport=transport,
        )

    async def send(self, request: PreparedRequest) -> RawResponse:
        """Issue the GET request. Network failures are returned, not raised."""
        if self._cfg.debug_logging:
            logger.debug("Request: %s", request.url)
        else:
            logger.debug("Request: %s", request.operation)
        try:
            resp = await self._http.get(request.url)
        except httpx.HTTPError as e:
            logger.warning("Request %s failed: %r", request.operation, e)
            return RawResponse(transport_error=str(e) or type(e).__name__)
        if self._cfg.debug_logging:
            logger.debug("Response: %d %s", resp.status_code, resp.text)
        else:
            logger.debug("Response: %s %d", request.operation, resp.status_code)
        return RawResponse(status_code=resp.status_code, body=resp.content)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class PendingCall[T]:
    """Handle to an in-flight operation: await it for the result, or cancel it.

    A cancelled call resolves to the failure built by ``on_cancel`` with a
    TransportError instead of raising CancelledError at the awaiting caller.
    """

    def __init__(
        self,
        future: asyncio.Future[T],
        on_cancel: Callable[[TransportError], T],
        callback: Callable[[T], None] | None = None,
    ) -> None:
        """Initialize the handle.

        Args:
            future: Task (or already resolved future) producing the result.
            on_cancel: Builds the failure result reported after cancellation.
            callback: Optional continuation invoked with the result once done.

        """
        self._future = future
        self._on_cancel = on_cancel
        if callback is not None:
            future.add_done_callback(lambda f: callback(self._outcome(f)))

    @staticmethod
    def resolved(result: T, callback: Callable[[T], None] | None = None) -> "PendingCall[T]":
        """Handle for a result known without any network call. Needs a running loop."""
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        future.set_result(result)
        return PendingCall(future, lambda _: result, callback)

    def cancel(self) -> bool:
        """Cancel the call. Return False if it already completed."""
        return self._future.cancel()

    def done(self) -> bool:
        """Check whether the call has completed (including by cancellation)."""
        return self._future.done()

    def _outcome(self, future: asyncio.Future[T]) -> T:
        if future.cancelled():
            return self._on_cancel(TransportError(CANCELLED_REASON))
        return future.result()

    async def _wait(self) -> T:
        try:
            return await self._future
        except asyncio.CancelledError:
            current = asyncio.current_task()
            # Only absorb cancellation of the call itself, never of the awaiting task
            if not self._future.cancelled() or (current is not None and current.cancelling()):
                raise
            return self._outcome(self._future)

    def __await__(self) -> Generator[Any, None, T]:
        return self._wait().__await__()
