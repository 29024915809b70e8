"""Typed result envelopes, one per response shape.

Every result carries ``success`` and ``reason``; ``reason`` is set whenever
``success`` is false. Operation-specific fields default to empty values so that
any result type can represent a failure.
"""

from collections.abc import Mapping
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from graphjs.engine.decoder import Fallback
from graphjs.errors import ApplicationFailure, GraphJsError
from graphjs.models import ContentComment, DirectMessage, ForumThread, Group, Member, StarsStatEntry, ThreadMessage, UserProfile


class CallResult(BaseModel):
    """Outcome of an operation that returns nothing beyond success/failure."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Fields whose wire key varies, resolved by the decoder before validation
    fallbacks: ClassVar[Mapping[str, Fallback]] = {}

    success: bool = False
    reason: str | None = None

    _error: GraphJsError | None = PrivateAttr(default=None)

    @classmethod
    def failure(cls, error: GraphJsError) -> Self:
        """Build a failed result that remembers the error behind it."""
        result = cls(success=False, reason=error.reason)
        result._error = error
        return result

    @property
    def error(self) -> GraphJsError | None:
        """Error behind a failed result, None on success.

        Well-formed ``success: false`` responses report an ApplicationFailure.
        """
        if self.success:
            return None
        if self._error is not None:
            return self._error
        return ApplicationFailure(self.reason or "Operation failed.")

    def ensure_success(self) -> Self:
        """Return self, or raise the error if the operation failed.

        Raises:
            GraphJsError: The failure category (InvalidInputError, TransportError,
                ServerError, DecodeFailure or ApplicationFailure).

        """
        error = self.error
        if error is not None:
            raise error
        return self


class CreateResult(CallResult):
    """Id of a newly created entity (thread, message, group, comment, content)."""

    fallbacks: ClassVar[Mapping[str, Fallback]] = {"id": Fallback(("id", "comment_id"))}

    id: str | None = None


class CountResult(CallResult):
    count: int = 0


class RegisterResult(CallResult):
    user_id: str | None = Field(default=None, alias="id")


class LoginResult(CallResult):
    user_id: str | None = Field(default=None, alias="id")


class ProfileResult(CallResult):
    profile: UserProfile | None = None


class ThreadResult(CallResult):
    title: str | None = None
    messages: list[ThreadMessage] = Field(default_factory=list)


class ThreadsResult(CallResult):
    threads: list[ForumThread] = Field(default_factory=list)


class FeedTokenResult(CallResult):
    token: str | None = None


class MembersResult(CallResult):
    """Member listing. Depending on the operation the payload sits under
    ``members``, ``following`` or ``followers``; an empty listing arrives as ``[]``.
    """

    fallbacks: ClassVar[Mapping[str, Fallback]] = {
        "members": Fallback(("members", "following", "followers"), default=dict, tolerant=True),
    }

    members: dict[str, Member] = Field(default_factory=dict)


class DirectMessageResult(CallResult):
    message: DirectMessage | None = None


class DirectMessagesResult(CallResult):
    messages: dict[str, DirectMessage] = Field(default_factory=dict)


class GroupsResult(CallResult):
    groups: list[Group] = Field(default_factory=list)


class GroupResult(CallResult):
    group: Group | None = None


class GroupMembersResult(CallResult):
    member_ids: list[str] = Field(default_factory=list, alias="members")


class IsStarredResult(CallResult):
    count: int = 0
    starred_by_me: bool | None = Field(default=None, alias="starred")


class StarsStatResult(CallResult):
    """Star statistics keyed by page URL."""

    pages: dict[str, StarsStatEntry] = Field(default_factory=dict)


class CommentsResult(CallResult):
    """Comments keyed by comment id."""

    comments: dict[str, ContentComment] = Field(default_factory=dict)

    @field_validator("comments", mode="before")
    @classmethod
    def _unflatten(cls, value: Any) -> Any:
        """Merge ``[{id1: c1}, {id2: c2}, ...]`` into one mapping, last write wins."""
        if not isinstance(value, list):
            return value
        merged: dict[str, Any] = {}
        for entry in value:
            if not isinstance(entry, dict):
                msg = f"comment entry must be an object, got {type(entry).__name__}"
                raise ValueError(msg)  # noqa: TRY004
            merged.update(entry)
        return merged


class ContentResult(CallResult):
    content: str | None = Field(default=None, alias="contents")


class GenericResult(CallResult):
    """Result of an operation without a dedicated type; extra payload keys are kept in ``model_extra``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")
