"""Error classifier: decides the failure category of a RawResponse before decoding."""

import logging

from graphjs.engine.transport import RawResponse
from graphjs.errors import ServerError, TransportError

logger = logging.getLogger(__name__)


def classify(raw: RawResponse) -> bytes:
    """Return the body of a successful response.

    No status code counts as success unless a transport error was reported.

    Raises:
        TransportError: The call did not complete (no status code).
        ServerError: Status >= 400. The message is the response body text, or the
            transport error description when one was reported as well.

    """
    if raw.status_code is None:
        if raw.transport_error is not None:
            raise TransportError(raw.transport_error)
        return raw.body or b""

    if raw.status_code >= 400:
        if raw.transport_error is not None:
            message = raw.transport_error
        else:
            message = (raw.body or b"").decode("utf-8", errors="replace")
        logger.error("Server error %d: %s", raw.status_code, message)
        raise ServerError(message, raw.status_code)

    return raw.body or b""
