"""Asynchronous client for the GraphJS social-graph service.

Every operation goes through one pipeline:

    build request → send → classify status → decode body → (login/logout) update session

and comes back as a typed result; failures of any kind are failed results, never
exceptions. Operations return a PendingCall, which is awaited for the result and
can be cancelled:

    async with GraphJsClient(ClientConfig(public_id="...")) as client:
        result = await client.login("johndoe", "secret")
        if result.success:
            profile = await client.profile()
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from datetime import date
from typing import Self

import httpx

from graphjs.config import ClientConfig
from graphjs.engine.classifier import classify
from graphjs.engine.decoder import decode_result
from graphjs.engine.request import OperationRequest, PreparedRequest, build_request
from graphjs.engine.session import SessionManager, SessionStore
from graphjs.engine.transport import Dispatcher, PendingCall
from graphjs.errors import GraphJsError, InvalidInputError
from graphjs.models import FeedType, format_calendar_date
from graphjs.results import (
    CallResult,
    CommentsResult,
    ContentResult,
    CountResult,
    CreateResult,
    DirectMessageResult,
    DirectMessagesResult,
    FeedTokenResult,
    GroupMembersResult,
    GroupResult,
    GroupsResult,
    IsStarredResult,
    LoginResult,
    MembersResult,
    ProfileResult,
    RegisterResult,
    StarsStatResult,
    ThreadResult,
    ThreadsResult,
)

logger = logging.getLogger(__name__)

type Params = Mapping[str, str | None]


class GraphJsClient:
    """Client bound to one public id, one base URL and one session store.

    Not safe for concurrent login/logout: both write the shared cookie store.
    """

    def __init__(
        self,
        cfg: ClientConfig,
        *,
        store: SessionStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            cfg: Validated client configuration.
            store: Session store to use; a fresh, empty one if omitted.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.

        """
        self._cfg = cfg
        self.store = store if store is not None else SessionStore()
        self.session = SessionManager(self.store, cfg)
        self._dispatcher = Dispatcher(cfg, self.store, transport=transport)

    @property
    def config(self) -> ClientConfig:
        """Configuration the client was built with."""
        return self._cfg

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._dispatcher.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # --- Generic pipeline ---

    def call[R: CallResult](
        self,
        operation: str,
        result_type: type[R],
        params: Params | None = None,
        *,
        callback: Callable[[R], None] | None = None,
    ) -> PendingCall[R]:
        """Start an operation and return a handle to its typed result.

        Parameter validation happens right away: an invalid email never reaches the
        network and the handle resolves immediately. Must be called from a running
        event loop.
        """
        try:
            prepared = build_request(self._cfg, OperationRequest(operation, params or {}))
        except InvalidInputError as e:
            logger.info("Rejected %s before sending: %s", operation, e)
            return PendingCall.resolved(result_type.failure(e), callback)

        task = asyncio.get_running_loop().create_task(self._execute(prepared, result_type))
        return PendingCall(task, result_type.failure, callback)

    async def _execute[R: CallResult](self, prepared: PreparedRequest, result_type: type[R]) -> R:
        """Send, classify and decode one request."""
        raw = await self._dispatcher.send(prepared)
        try:
            body = classify(raw)
            result = decode_result(result_type, body, prepared.operation)
        except GraphJsError as e:
            logger.warning("%s failed (%s): %s", prepared.operation, e.code, e)
            return result_type.failure(e)

        if result.success:
            self._update_session(prepared.operation, result)
        return result

    def _update_session(self, operation: str, result: CallResult) -> None:
        """Apply a successful login or logout to the session."""
        if operation == "login" and isinstance(result, LoginResult):
            if result.user_id is None:
                logger.warning("Login succeeded without a user id, session left unchanged")
                return
            self.session.on_login_success(result.user_id)
        elif operation == "logout":
            self.session.on_logout_success()

    def _subject(self, user_id: str | None) -> str | None:
        """Explicit user id, or the logged-in user."""
        return user_id if user_id is not None else self.session.current_identity()

    # --- Account ---

    def signup(self, username: str, email: str, password: str) -> PendingCall[RegisterResult]:
        """Register a new account."""
        return self.call("signup", RegisterResult, {"username": username, "email": email, "password": password})

    def login(self, username: str, password: str) -> PendingCall[LoginResult]:
        """Log in; on success the session cookie is set."""
        return self.call("login", LoginResult, {"username": username, "password": password})

    def whoami(self) -> PendingCall[LoginResult]:
        return self.call("whoami", LoginResult)

    def logout(self) -> PendingCall[CallResult]:
        """Log out; on success the session cookie is replaced by the logout marker."""
        return self.call("logout", CallResult)

    def reset_password(self, email: str) -> PendingCall[CallResult]:
        return self.call("resetPassword", CallResult, {"email": email})

    def verify_password_reset(self, email: str, code: str) -> PendingCall[CallResult]:
        return self.call("verifyReset", CallResult, {"email": email, "code": code})

    # --- Profile ---

    def profile(self, user_id: str | None = None) -> PendingCall[ProfileResult]:
        """Fetch a profile, the logged-in user's by default."""
        return self.call("getProfile", ProfileResult, {"id": self._subject(user_id)})

    def set_profile(
        self,
        *,
        email: str | None = None,
        about: str | None = None,
        avatar: str | None = None,
        birthday: date | None = None,
        username: str | None = None,
        password: str | None = None,
    ) -> PendingCall[CallResult]:
        """Update the logged-in user's profile; only the given fields are sent."""
        params = {
            "email": email,
            "about": about,
            "avatar": avatar,
            "birthday": format_calendar_date(birthday) if birthday is not None else None,
            "username": username,
            "password": password,
        }
        return self.call("setProfile", CallResult, params)

    def generate_feed_token(self, feed_type: FeedType, user_id: str | None = None) -> PendingCall[FeedTokenResult]:
        return self.call("generateFeedToken", FeedTokenResult, {"type": feed_type.value, "id": self._subject(user_id)})

    # --- Forum ---

    def start_thread(self, title: str, message: str) -> PendingCall[CreateResult]:
        return self.call("startThread", CreateResult, {"title": title, "message": message})

    def reply_thread(self, thread_id: str, message: str) -> PendingCall[CreateResult]:
        return self.call("reply", CreateResult, {"id": thread_id, "message": message})

    def get_thread(self, thread_id: str) -> PendingCall[ThreadResult]:
        return self.call("getThread", ThreadResult, {"id": thread_id})

    def threads(self) -> PendingCall[ThreadsResult]:
        return self.call("getThreads", ThreadsResult)

    def delete_forum_post(self, post_id: str) -> PendingCall[CallResult]:
        return self.call("deleteForumPost", CallResult, {"id": post_id})

    def edit_forum_post(self, post_id: str, content: str) -> PendingCall[CallResult]:
        return self.call("editForumPost", CallResult, {"id": post_id, "content": content})

    # --- Members and follow graph ---

    def members(self) -> PendingCall[MembersResult]:
        """List all members of the network."""
        return self.call("getMembers", MembersResult)

    def followers(self, user_id: str | None = None) -> PendingCall[MembersResult]:
        """List followers, of the logged-in user by default."""
        return self.call("getFollowers", MembersResult, {"id": self._subject(user_id)})

    def following(self, user_id: str | None = None) -> PendingCall[MembersResult]:
        """List followed users, of the logged-in user by default."""
        return self.call("getFollowing", MembersResult, {"id": self._subject(user_id)})

    def follow(self, followee_id: str) -> PendingCall[CallResult]:
        return self.call("follow", CallResult, {"id": followee_id})

    def unfollow(self, followee_id: str) -> PendingCall[CallResult]:
        return self.call("unfollow", CallResult, {"id": followee_id})

    # --- Direct messages ---

    def send_direct_message(self, to_user_id: str, message: str) -> PendingCall[CreateResult]:
        return self.call("sendMessage", CreateResult, {"to": to_user_id, "message": message})

    def send_anonymous_message(self, sender: str, to_user_id: str, message: str) -> PendingCall[CreateResult]:
        """Send a message without being logged in; ``sender`` is a free-form name or email."""
        return self.call("sendAnonymousMessage", CreateResult, {"sender": sender, "to": to_user_id, "message": message})

    def count_unread_messages(self) -> PendingCall[CountResult]:
        return self.call("countUnreadMessages", CountResult)

    def inbox(self) -> PendingCall[DirectMessagesResult]:
        return self.call("getInbox", DirectMessagesResult)

    def outbox(self) -> PendingCall[DirectMessagesResult]:
        return self.call("getOutbox", DirectMessagesResult)

    def get_conversation(self, with_user_id: str) -> PendingCall[DirectMessagesResult]:
        return self.call("getConversation", DirectMessagesResult, {"with": with_user_id})

    def conversations(self) -> PendingCall[DirectMessagesResult]:
        """Latest message of every conversation, keyed by the other user's id."""
        return self.call("getConversations", DirectMessagesResult)

    def get_message(self, message_id: str) -> PendingCall[DirectMessageResult]:
        return self.call("getMessage", DirectMessageResult, {"msgid": message_id})

    # --- Groups ---

    def create_group(self, title: str, description: str) -> PendingCall[CreateResult]:
        return self.call("createGroup", CreateResult, {"title": title, "description": description})

    def set_group(
        self,
        group_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        cover: str | None = None,
    ) -> PendingCall[CallResult]:
        """Update a group; only the given fields are sent."""
        params = {"id": group_id, "title": title, "description": description, "cover": cover}
        return self.call("setGroup", CallResult, params)

    def join_group(self, group_id: str) -> PendingCall[CallResult]:
        return self.call("join", CallResult, {"id": group_id})

    def leave_group(self, group_id: str) -> PendingCall[CallResult]:
        return self.call("leave", CallResult, {"id": group_id})

    def list_memberships(self, user_id: str | None = None) -> PendingCall[GroupsResult]:
        """Groups a user belongs to, the logged-in user by default."""
        return self.call("listMemberships", GroupsResult, {"id": self._subject(user_id)})

    def groups(self) -> PendingCall[GroupsResult]:
        return self.call("listGroups", GroupsResult)

    def get_group(self, group_id: str) -> PendingCall[GroupResult]:
        return self.call("getGroup", GroupResult, {"id": group_id})

    def list_members(self, group_id: str) -> PendingCall[GroupMembersResult]:
        return self.call("listMembers", GroupMembersResult, {"id": group_id})

    # --- Stars ---

    def star(self, url: str) -> PendingCall[CountResult]:
        """Star a content URL; the result holds the new star count."""
        return self.call("star", CountResult, {"url": url})

    def unstar(self, url: str) -> PendingCall[CallResult]:
        return self.call("unstar", CallResult, {"url": url})

    def is_starred(self, url: str) -> PendingCall[IsStarredResult]:
        return self.call("isStarred", IsStarredResult, {"url": url})

    def starred_content(self) -> PendingCall[StarsStatResult]:
        return self.call("getStarredContent", StarsStatResult)

    def my_stars(self) -> PendingCall[StarsStatResult]:
        return self.call("getMyStarredContent", StarsStatResult)

    # --- Comments ---

    def add_comment(self, url: str, content: str) -> PendingCall[CreateResult]:
        return self.call("addComment", CreateResult, {"url": url, "content": content})

    def edit_comment(self, comment_id: str, content: str) -> PendingCall[CallResult]:
        return self.call("editComment", CallResult, {"id": comment_id, "content": content})

    def comments(self, url: str) -> PendingCall[CommentsResult]:
        return self.call("getComments", CommentsResult, {"url": url})

    def delete_comment(self, comment_id: str) -> PendingCall[CallResult]:
        return self.call("removeComment", CallResult, {"comment_id": comment_id})

    # --- Private content ---

    def add_private_content(self, data: str) -> PendingCall[CreateResult]:
        return self.call("addPrivateContent", CreateResult, {"data": data})

    def get_private_content(self, content_id: str) -> PendingCall[ContentResult]:
        return self.call("getPrivateContent", ContentResult, {"id": content_id})

    def edit_private_content(self, content_id: str, data: str) -> PendingCall[CallResult]:
        return self.call("editPrivateContent", CallResult, {"id": content_id, "data": data})

    def delete_private_content(self, content_id: str) -> PendingCall[CallResult]:
        return self.call("deletePrivateContent", CallResult, {"id": content_id})
