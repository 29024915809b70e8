"""Entity records returned by the service, and the date codecs they rely on.

Timestamps arrive in two encodings:

- epoch seconds, usually as a numeric string (``"1536070130"``), sometimes as a JSON number;
- calendar dates as ``MM/DD/YYYY`` (birthdays; the same format is sent back by ``setProfile``).

Both decode to a timezone-aware UTC ``datetime``. A value that does not parse decodes to None
instead of failing the whole record.
"""

import re
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

# re.ASCII keeps \d to 0-9, so non-ASCII digits are never accepted
_EPOCH_SECONDS = re.compile(r"[+-]?\d+", re.ASCII)
_CALENDAR_DATE = re.compile(r"(\d{2})/(\d{2})/(\d{4})", re.ASCII)


def parse_epoch_seconds(value: Any) -> datetime | None:
    """Decode seconds since the Unix epoch (base-10 string or number) to UTC, or None."""
    if isinstance(value, datetime) or value is None:
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not _EPOCH_SECONDS.fullmatch(text):
            return None
        seconds: float = int(text, 10)
    elif isinstance(value, int | float):
        seconds = value
    else:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def parse_calendar_date(value: Any) -> datetime | None:
    """Decode an ``MM/DD/YYYY`` string to midnight UTC of that day, or None."""
    if isinstance(value, datetime) or value is None:
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if not isinstance(value, str):
        return None
    match = _CALENDAR_DATE.fullmatch(value.strip())
    if match is None:
        return None
    month, day, year = (int(group, 10) for group in match.groups())
    try:
        return datetime(year, month, day, tzinfo=UTC)
    except ValueError:
        return None


def format_calendar_date(value: date) -> str:
    """Encode a date (or datetime) as ``MM/DD/YYYY``."""
    return f"{value.month:02d}/{value.day:02d}/{value.year:04d}"


def _blank_to_none(value: Any) -> Any:
    """Empty strings stand for "not set" on the wire."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _lenient_int(value: Any) -> int:
    """Counters are sometimes numeric strings; anything unparseable counts as zero."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _EPOCH_SECONDS.fullmatch(value.strip()):
        return int(value.strip(), 10)
    return 0


EpochTime = Annotated[datetime | None, BeforeValidator(parse_epoch_seconds)]
CalendarDate = Annotated[datetime | None, BeforeValidator(parse_calendar_date)]
OptionalUrl = Annotated[str | None, BeforeValidator(_blank_to_none)]
LenientInt = Annotated[int, BeforeValidator(_lenient_int)]


class FeedType(StrEnum):
    """Activity feed flavours a feed token can be generated for."""

    WALL = "wall"
    TIMELINE = "timeline"


class _Entity(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class UserProfile(_Entity):
    """Public profile of a user."""

    username: str
    email: str
    join_time: EpochTime = Field(default=None, alias="jointime")
    avatar: OptionalUrl = None
    birthday: CalendarDate = None
    about: str | None = None
    follower_count: int = 0
    following_count: int = 0
    membership_count: int = 0


class ForumThread(_Entity):
    """Forum thread header, as listed by ``getThreads``."""

    id: str
    title: str
    author_id: str = Field(alias="author")
    created_at: EpochTime = Field(default=None, alias="timestamp")
    contributors: dict[str, UserProfile] = Field(default_factory=dict)


class Member(_Entity):
    """Short user record used by member, follower and following listings."""

    username: str
    avatar: OptionalUrl = None


class ThreadMessage(_Entity):
    """Single post inside a forum thread."""

    id: str
    author_id: str = Field(alias="author")
    content: str
    created_at: EpochTime = Field(default=None, alias="timestamp")


class DirectMessage(_Entity):
    """Direct message. ``from`` is empty for outgoing messages, ``to`` for incoming ones."""

    from_user_id: str | None = Field(default=None, alias="from")
    to_user_id: str | None = Field(default=None, alias="to")
    content: str | None = Field(default=None, alias="message")
    is_read: bool = False
    sent_time: EpochTime = Field(default=None, alias="timestamp")


class Group(_Entity):
    """User group."""

    id: str
    title: str
    description: str
    creator_id: str = Field(alias="creator")
    cover: OptionalUrl = None
    members_count: LenientInt = Field(default=0, alias="count")
    member_ids: list[str] = Field(default_factory=list, alias="members")


class StarsStatEntry(_Entity):
    """Star counter of one starred page."""

    title: str
    stars: int = Field(default=0, alias="star_count")


class ContentComment(_Entity):
    """Comment attached to a content URL."""

    content: str
    create_time: EpochTime = Field(default=None, alias="createTime")
    author_id: str = Field(alias="author")
