"""Request builder: operation name + parameters → URL.

GET {base_url}/{operation}?public_id={public_id}&{key}={value}...
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx

from graphjs.config import ClientConfig
from graphjs.errors import InvalidInputError


@dataclass(frozen=True)
class OperationRequest:
    """An operation name with its parameters; None values are left out of the query."""

    operation: str
    params: Mapping[str, str | None] = field(default_factory=dict)


@dataclass(frozen=True)
class PreparedRequest:
    """Validated request, ready for the dispatcher."""

    operation: str
    url: httpx.URL


def build_request(cfg: ClientConfig, request: OperationRequest) -> PreparedRequest:
    """Validate parameters and build the request URL.

    Raises:
        InvalidInputError: An ``email`` parameter does not contain ``@``, or the
            operation name cannot be part of a URL.

    """
    query: list[tuple[str, str]] = [("public_id", cfg.public_id)]
    for key, value in request.params.items():
        if value is None:
            continue
        if key == "email" and "@" not in value:
            raise InvalidInputError("Valid email required.")
        query.append((key, value))

    try:
        url = httpx.URL(cfg.base_url.rstrip("/") + "/" + request.operation, params=query)
    except httpx.InvalidURL as e:
        raise InvalidInputError(f"Invalid operation name: {request.operation!r}") from e
    return PreparedRequest(operation=request.operation, url=url)
