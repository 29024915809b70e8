"""Tests for the result decoder and its fallback rules."""

import json

import pytest

from graphjs.engine.decoder import UNPARSEABLE_REASON, decode_result
from graphjs.errors import DecodeFailure
from graphjs.results import (
    CallResult,
    CommentsResult,
    ContentResult,
    CreateResult,
    GenericResult,
    GroupResult,
    IsStarredResult,
    LoginResult,
    MembersResult,
    ThreadResult,
)


def _body(payload):
    return json.dumps(payload).encode()


class TestEnvelope:
    """success / reason baseline."""

    def test_success(self):
        """Plain success decodes with no reason."""
        result = decode_result(CallResult, _body({"success": True}), "follow")
        assert result.success is True
        assert result.reason is None

    def test_failure_with_reason(self):
        """Application failure keeps the server's reason."""
        result = decode_result(CallResult, _body({"success": False, "reason": "Not allowed."}), "follow")
        assert result.success is False
        assert result.reason == "Not allowed."

    def test_failure_without_reason_degrades(self):
        """success=false with no reason gets the generic reason instead of failing."""
        result = decode_result(CallResult, _body({"success": False}), "follow")
        assert result.success is False
        assert result.reason == UNPARSEABLE_REASON

    def test_missing_success(self):
        """No success key is a hard failure tagged with the operation."""
        with pytest.raises(DecodeFailure) as exc_info:
            decode_result(CallResult, _body({"id": "x"}), "startThread")
        assert exc_info.value.operation == "startThread"
        assert exc_info.value.reason == "Cannot parse response"

    def test_non_boolean_success(self):
        """success must be a boolean."""
        with pytest.raises(DecodeFailure):
            decode_result(CallResult, _body({"success": "true"}), "follow")

    def test_not_json(self):
        """Non-JSON body fails."""
        with pytest.raises(DecodeFailure):
            decode_result(CallResult, b"<html>oops</html>", "follow")

    def test_not_an_object(self):
        """JSON array at top level fails."""
        with pytest.raises(DecodeFailure):
            decode_result(CallResult, _body([1, 2]), "follow")

    def test_empty_body(self):
        """Empty body fails."""
        with pytest.raises(DecodeFailure):
            decode_result(CallResult, b"", "follow")

    def test_deeply_nested_body(self):
        """Nesting too deep for the JSON parser is a decode failure, not a crash."""
        with pytest.raises(DecodeFailure) as exc_info:
            decode_result(CallResult, b"[" * 200_000 + b"]" * 200_000, "getThreads")
        assert exc_info.value.reason == "Cannot parse response"


class TestCreateId:
    """id → comment_id fallback."""

    def test_id(self):
        """id is used when present."""
        result = decode_result(CreateResult, _body({"success": True, "id": "abc"}), "startThread")
        assert result.success is True
        assert result.reason is None
        assert result.id == "abc"

    def test_comment_id(self):
        """comment_id is used when id is absent."""
        result = decode_result(CreateResult, _body({"success": True, "comment_id": "xyz"}), "addComment")
        assert result.success is True
        assert result.id == "xyz"

    def test_id_preferred_over_comment_id(self):
        """id wins when both are present."""
        result = decode_result(CreateResult, _body({"success": True, "id": "a", "comment_id": "b"}), "addComment")
        assert result.id == "a"

    def test_neither(self):
        """No id at all decodes to None, not an error."""
        result = decode_result(CreateResult, _body({"success": True}), "startThread")
        assert result.success is True
        assert result.id is None


class TestMembers:
    """members / following / followers fallback."""

    MEMBER = {"username": "alice", "avatar": "https://example.org/a.png"}

    def test_members_key(self):
        """members object decodes to an id → Member mapping."""
        result = decode_result(MembersResult, _body({"success": True, "members": {"u1": self.MEMBER}}), "getMembers")
        assert set(result.members) == {"u1"}
        assert result.members["u1"].username == "alice"

    def test_following_key(self):
        """following is used when members is absent."""
        result = decode_result(MembersResult, _body({"success": True, "following": {"u2": self.MEMBER}}), "getFollowing")
        assert set(result.members) == {"u2"}

    def test_followers_key(self):
        """followers is used when members and following are absent."""
        result = decode_result(MembersResult, _body({"success": True, "followers": {"u3": self.MEMBER}}), "getFollowers")
        assert set(result.members) == {"u3"}

    def test_empty_array_is_empty_mapping(self):
        """[] instead of an object decodes to an empty mapping."""
        result = decode_result(MembersResult, _body({"success": True, "following": []}), "getFollowing")
        assert result.success is True
        assert result.members == {}

    def test_empty_array_keeps_declared_success(self):
        """Shape tolerance does not force success either way."""
        result = decode_result(MembersResult, _body({"success": False, "reason": "No.", "followers": []}), "getFollowers")
        assert result.success is False
        assert result.reason == "No."
        assert result.members == {}

    def test_first_present_key_wins(self):
        """Candidate keys are checked in order."""
        payload = {"success": True, "members": [], "followers": {"u3": self.MEMBER}}
        result = decode_result(MembersResult, _body(payload), "getMembers")
        assert result.members == {}

    def test_no_key(self):
        """No candidate key at all gives an empty mapping."""
        result = decode_result(MembersResult, _body({"success": True}), "getMembers")
        assert result.members == {}

    def test_blank_avatar(self):
        """Empty avatar string decodes to None."""
        payload = {"success": True, "members": {"u1": {"username": "bob", "avatar": ""}}}
        result = decode_result(MembersResult, _body(payload), "getMembers")
        assert result.members["u1"].avatar is None


class TestComments:
    """Flattened comment list."""

    def test_unflatten(self):
        """Single-entry mappings are merged into one mapping."""
        payload = {
            "success": True,
            "comments": [
                {"c1": {"content": "hi", "author": "u1", "createTime": "1536070130"}},
                {"c2": {"content": "yo", "author": "u2", "createTime": "1536070190"}},
            ],
        }
        result = decode_result(CommentsResult, _body(payload), "getComments")
        assert set(result.comments) == {"c1", "c2"}
        assert result.comments["c2"].author_id == "u2"
        assert result.comments["c1"].create_time is not None
        assert result.comments["c1"].create_time.year == 2018

    def test_last_write_wins(self):
        """A duplicate id keeps the later entry."""
        payload = {
            "success": True,
            "comments": [
                {"c1": {"content": "first", "author": "u1", "createTime": "1"}},
                {"c1": {"content": "second", "author": "u1", "createTime": "2"}},
            ],
        }
        result = decode_result(CommentsResult, _body(payload), "getComments")
        assert result.comments["c1"].content == "second"

    def test_empty_list(self):
        """No comments decodes to an empty mapping."""
        result = decode_result(CommentsResult, _body({"success": True, "comments": []}), "getComments")
        assert result.comments == {}

    def test_unparseable_time_is_none(self):
        """A bad timestamp leaves the rest of the comment usable."""
        payload = {"success": True, "comments": [{"c1": {"content": "hi", "author": "u1", "createTime": "soon"}}]}
        result = decode_result(CommentsResult, _body(payload), "getComments")
        assert result.comments["c1"].create_time is None
        assert result.comments["c1"].content == "hi"

    def test_entry_not_an_object(self):
        """A non-object entry is a decode failure."""
        with pytest.raises(DecodeFailure):
            decode_result(CommentsResult, _body({"success": True, "comments": ["c1"]}), "getComments")


class TestAliases:
    """Wire names that differ from field names."""

    def test_login_user_id(self):
        """Login id maps to user_id."""
        result = decode_result(LoginResult, _body({"success": True, "id": "u1"}), "login")
        assert result.user_id == "u1"

    def test_content_contents(self):
        """Private content arrives under 'contents'."""
        result = decode_result(ContentResult, _body({"success": True, "contents": "secret"}), "getPrivateContent")
        assert result.content == "secret"

    def test_is_starred(self):
        """starred maps to starred_by_me."""
        result = decode_result(IsStarredResult, _body({"success": True, "count": 3, "starred": True}), "isStarred")
        assert result.count == 3
        assert result.starred_by_me is True

    def test_thread_messages(self):
        """Thread messages decode epoch-second strings."""
        payload = {
            "success": True,
            "title": "Hello",
            "messages": [{"id": "m1", "author": "u1", "content": "first", "timestamp": "0"}],
        }
        result = decode_result(ThreadResult, _body(payload), "getThread")
        assert result.title == "Hello"
        assert result.messages[0].author_id == "u1"
        assert result.messages[0].created_at is not None
        assert result.messages[0].created_at.year == 1970

    def test_group(self):
        """Group counters are numeric strings; members default to empty."""
        payload = {
            "success": True,
            "group": {"id": "g1", "title": "T", "description": "D", "creator": "u1", "cover": "", "count": "7"},
        }
        result = decode_result(GroupResult, _body(payload), "getGroup")
        assert result.group is not None
        assert result.group.members_count == 7
        assert result.group.member_ids == []
        assert result.group.cover is None

    def test_wrong_field_type(self):
        """A field of the wrong type outside the fallback rules is a decode failure."""
        with pytest.raises(DecodeFailure) as exc_info:
            decode_result(GroupResult, _body({"success": True, "group": "g1"}), "getGroup")
        assert "group" in exc_info.value.detail

    def test_generic_keeps_extra(self):
        """GenericResult keeps payload keys it does not know."""
        result = decode_result(GenericResult, _body({"success": True, "token": "t", "n": 2}), "anything")
        assert result.model_extra == {"token": "t", "n": 2}
