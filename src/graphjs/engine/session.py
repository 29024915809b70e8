"""Client-side session: the cookie store and the manager that owns the identity.

Login sets the identity cookie (``graphjs_<key>_id``, 10 minutes) and drops the
logout marker. Logout drops the identity cookie and sets the marker
(``graphjs_<key>_session_off=true``, no expiry), so the service can tell
"logged out" from "never logged in".

The store is shared by all in-flight requests of a client and has no lock:
callers must not run login and logout concurrently on the same client.
"""

import contextlib
import json
import logging
import os
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from http.cookiejar import Cookie, CookieJar
from pathlib import Path

from graphjs.config import ClientConfig

logger = logging.getLogger(__name__)

# Lifetime of the identity cookie set on login
COOKIE_TTL_SECONDS = 600


def cookie_domain(host: str) -> str:
    """Domain to store cookies under so that the jar sends them back to ``host``.

    http.cookiejar matches dotless hosts (e.g. ``localhost``) as ``<host>.local``.
    """
    return host if "." in host else f"{host}.local"


@dataclass(frozen=True)
class Session:
    """Read-only snapshot of the session state."""

    identity_id: str | None = None
    cookie_value: str | None = None
    expires_at: datetime | None = None
    explicitly_logged_out: bool = False


class SessionStore:
    """Cookie jar owned by one client and handed to its HTTP transport."""

    def __init__(self, jar: CookieJar | None = None) -> None:
        """Initialize the store.

        Args:
            jar: Existing cookie jar to share; a fresh one is created if omitted.

        """
        self.jar = jar if jar is not None else CookieJar()

    def get(self, name: str) -> Cookie | None:
        """Return the unexpired cookie with the given name, if any."""
        for cookie in self.jar:
            if cookie.name == name and not cookie.is_expired():
                return cookie
        return None

    def set(self, name: str, value: str, *, domain: str, expires: float | None = None) -> None:
        """Store a cookie under path ``/``. Without ``expires`` it never expires."""
        cookie = Cookie(
            version=0,
            name=name,
            value=value,
            port=None,
            port_specified=False,
            domain=domain,
            domain_specified=False,
            domain_initial_dot=False,
            path="/",
            path_specified=True,
            secure=False,
            expires=int(expires) if expires is not None else None,
            discard=False,
            comment=None,
            comment_url=None,
            rest={},
        )
        self.jar.set_cookie(cookie)

    def delete(self, name: str) -> None:
        """Remove every cookie with the given name, whatever its domain or path."""
        for cookie in list(self.jar):
            if cookie.name == name:
                with contextlib.suppress(KeyError):
                    self.jar.clear(cookie.domain, cookie.path, cookie.name)

    # --- Persistence ---

    def save(self, path: Path) -> None:
        """Write unexpired cookies to a JSON file atomically, owner-only permissions."""
        cookies = [
            {"name": c.name, "value": c.value, "domain": c.domain, "expires": c.expires}
            for c in self.jar
            if not c.is_expired() and c.value is not None
        ]
        tmp_path = path.with_suffix(".tmp")
        data = (json.dumps({"cookies": cookies}, indent=2) + "\n").encode()
        # Identity cookie authenticates the user, keep it private
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, data)
        finally:
            os.close(fd)
        tmp_path.replace(path)

    @staticmethod
    def load(path: Path) -> "SessionStore":
        """Read a store written by ``save``; a missing or unreadable file gives an empty store."""
        store = SessionStore()
        if not path.is_file():
            return store
        try:
            entries = json.loads(path.read_text())["cookies"]
        except (OSError, ValueError, KeyError, TypeError):
            logger.warning("Ignoring unreadable session file %s", path)
            return store
        now = time.time()
        for entry in entries:
            expires = entry.get("expires")
            if expires is not None and expires <= now:
                continue
            store.set(entry["name"], entry["value"], domain=entry["domain"], expires=expires)
        return store


class SessionManager:
    """Owns the logged-in identity; the only writer of the session cookies."""

    def __init__(self, store: SessionStore, cfg: ClientConfig) -> None:
        """Initialize the manager, picking up an identity cookie already in the store.

        Args:
            store: Cookie store shared with the transport.
            cfg: Client configuration (provides host and cookie names).

        """
        self._store = store
        self._cfg = cfg
        cookie = store.get(cfg.identity_cookie_name)
        self._identity_id: str | None = cookie.value if cookie is not None else None

    def on_login_success(self, identity_id: str) -> None:
        """Set the identity cookie for 10 minutes and remove a stale logout marker."""
        self._store.set(
            self._cfg.identity_cookie_name,
            identity_id,
            domain=cookie_domain(self._cfg.host),
            expires=time.time() + COOKIE_TTL_SECONDS,
        )
        self._store.delete(self._cfg.session_off_cookie_name)
        self._identity_id = identity_id
        logger.info("Logged in as %s", identity_id)

    def on_logout_success(self) -> None:
        """Remove the identity cookie and mark the session as explicitly ended."""
        self._store.delete(self._cfg.identity_cookie_name)
        self._store.set(self._cfg.session_off_cookie_name, "true", domain=cookie_domain(self._cfg.host))
        self._identity_id = None
        logger.info("Logged out")

    def current_identity(self) -> str | None:
        """Identity from the last successful login, None after logout."""
        return self._identity_id

    def session(self) -> Session:
        """Snapshot of the current session state."""
        cookie = self._store.get(self._cfg.identity_cookie_name)
        expires_at = None
        if cookie is not None and cookie.expires is not None:
            expires_at = datetime.fromtimestamp(cookie.expires, tz=UTC)
        return Session(
            identity_id=self._identity_id,
            cookie_value=cookie.value if cookie is not None else None,
            expires_at=expires_at,
            explicitly_logged_out=self._store.get(self._cfg.session_off_cookie_name) is not None,
        )
