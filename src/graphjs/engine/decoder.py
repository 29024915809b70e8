"""Result decoder: raw JSON body → typed result.

The service is loose about how it encodes some fields. A result type lists those
fields in its ``fallbacks`` class attribute, each with an ordered set of candidate
keys; everything else is handled by the pydantic model itself.

Create:   {"success": true, "comment_id": "c1"}        → CreateResult(id="c1")
Members:  {"success": true, "following": []}           → MembersResult(members={})
Failure:  {"success": false}                           → reason="Cannot parse response"
"""

import functools
import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from graphjs.errors import DecodeFailure

if TYPE_CHECKING:
    from graphjs.results import CallResult

logger = logging.getLogger(__name__)

UNPARSEABLE_REASON = "Cannot parse response"


def _none() -> None:
    return None


@dataclass(frozen=True)
class Fallback:
    """Ordered candidate keys for one result field.

    The first candidate present in the payload (with a non-null value) is used.
    With ``tolerant`` set, a value that does not validate for the field yields the
    default instead of failing the decode. No candidate present → default.
    """

    candidates: tuple[str, ...]
    default: Callable[[], Any] = _none
    tolerant: bool = False

    def extract(self, payload: Mapping[str, Any], adapter: TypeAdapter[Any]) -> Any:
        """Pick the value for the field from the payload."""
        for key in self.candidates:
            if payload.get(key) is None:
                continue
            if not self.tolerant:
                return payload[key]
            try:
                return adapter.validate_python(payload[key])
            except ValidationError:
                logger.debug("Key %r has unexpected shape, using default", key)
                return self.default()
        return self.default()


@functools.cache
def _field_adapter(result_type: type["CallResult"], name: str) -> TypeAdapter[Any]:
    """Validator for a single field of a result type."""
    return TypeAdapter(result_type.model_fields[name].annotation)


def decode_result[R: CallResult](result_type: type[R], data: bytes, operation: str) -> R:
    """Decode a response body into ``result_type``.

    Raises:
        DecodeFailure: Body is not a JSON object with a boolean ``success``, or a
            field does not match its type after the fallback rules ran.

    """
    try:
        payload = json.loads(data)
    except (ValueError, RecursionError) as e:
        raise DecodeFailure(operation, f"body is not JSON ({e})") from e
    if not isinstance(payload, dict) or not isinstance(payload.get("success"), bool):
        raise DecodeFailure(operation, "payload has no boolean 'success'")

    fields: dict[str, Any] = dict(payload)
    # A failure must carry a reason; a malformed one degrades instead of failing
    if not payload["success"] and not isinstance(payload.get("reason"), str):
        fields["reason"] = UNPARSEABLE_REASON
    for name, rule in result_type.fallbacks.items():
        fields[name] = rule.extract(payload, _field_adapter(result_type, name))

    try:
        return result_type.model_validate(fields)
    except ValidationError as e:
        locations = ", ".join(".".join(str(part) for part in err["loc"]) for err in e.errors())
        raise DecodeFailure(operation, f"invalid fields: {locations}") from e
