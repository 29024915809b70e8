"""Error taxonomy shared by the request/response engine and the results."""


class GraphJsError(Exception):
    """Base error for every failure the client can report."""

    code = "error"

    def __init__(self, message: str) -> None:
        """Initialize with a human-readable message.

        Args:
            message: Human-readable error description.

        """
        super().__init__(message)
        self.message = message

    @property
    def reason(self) -> str:
        """Text placed into the ``reason`` field of a failure result."""
        return self.message


class InvalidInputError(GraphJsError):
    """Client-side validation failure, detected before any network call."""

    code = "invalid_input"


class TransportError(GraphJsError):
    """The HTTP call did not complete (connection, timeout, cancellation)."""

    code = "transport"


class ServerError(GraphJsError):
    """The service answered with HTTP status >= 400."""

    code = "server_error"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize with the response body text and the HTTP status."""
        super().__init__(message)
        self.status_code = status_code


class DecodeFailure(GraphJsError):
    """Response body did not match the expected result shape."""

    code = "decode_failure"

    def __init__(self, operation: str, detail: str) -> None:
        """Initialize with the operation that produced the body.

        Args:
            operation: Operation name, kept for diagnosing protocol drift.
            detail: What went wrong while decoding.

        """
        super().__init__(f"Cannot parse response for {operation}: {detail}")
        self.operation = operation
        self.detail = detail

    @property
    def reason(self) -> str:
        """Decode details are for logs; callers see a generic reason."""
        return "Cannot parse response"


class ApplicationFailure(GraphJsError):
    """Well-formed response with ``success: false``."""

    code = "application_failure"
