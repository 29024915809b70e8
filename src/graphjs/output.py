"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201  # output layer, print() is how results reach the terminal

import json
import sys
from typing import Any, NoReturn

import typer

from graphjs.engine.session import Session
from graphjs.models import UserProfile


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def _success(self, data: dict[str, Any], message: str) -> None:
        """Print a success result in JSON or human-readable format."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}, default=str))
        else:
            print(message)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
        raise typer.Exit(code=1)

    # --- Session ---

    def print_logged_in(self, user_id: str) -> None:
        """Print login confirmation."""
        self._success({"user_id": user_id}, f"Logged in as {user_id}.")

    def print_logged_out(self) -> None:
        """Print logout confirmation."""
        self._success({}, "Logged out.")

    def print_whoami(self, user_id: str | None) -> None:
        """Print the user the service sees for the current session."""
        self._success({"user_id": user_id}, user_id or "Not logged in.")

    def print_session(self, session: Session) -> None:
        """Print the locally stored session state."""
        if session.identity_id is not None:
            expires = session.expires_at.isoformat() if session.expires_at else "never"
            message = f"Session: {session.identity_id} (expires {expires})."
        elif session.explicitly_logged_out:
            message = "Session: logged out."
        else:
            message = "Session: none."
        self._success(
            {
                "identity_id": session.identity_id,
                "expires_at": session.expires_at,
                "explicitly_logged_out": session.explicitly_logged_out,
            },
            message,
        )

    # --- Data ---

    def print_profile(self, profile: UserProfile) -> None:
        """Print a user profile."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": profile.model_dump(mode="json")}))
            return
        print(f"{profile.username} <{profile.email}>")
        if profile.about:
            print(profile.about)
        if profile.birthday is not None:
            print(f"Birthday: {profile.birthday.date().isoformat()}")
        print(f"Followers: {profile.follower_count}, following: {profile.following_count}, groups: {profile.membership_count}")

    def print_call_result(self, operation: str, data: dict[str, Any]) -> None:
        """Print the payload of a generic operation call."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}, default=str))
            return
        print(f"{operation}: ok")
        for key, value in data.items():
            print(f"  {key}: {json.dumps(value, default=str)}")
