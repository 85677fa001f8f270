"""Email/password authentication backed by the store.

Sign-in exchanges credentials for a session token kept in ``auth_sessions``.
Pages never read auth state from globals: the app builds an ``AuthContext``
for each run and passes it down, and ``AuthProvider`` owns the one
session-change subscription for that run.
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from core.services import (
    DBConnection,
    StoreError,
    delete_rows,
    insert_rows,
    select_rows,
)

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

PBKDF2_ITERATIONS = 240_000


class AuthError(Exception):
    """Sign-in refused; the message is shown on the login form."""


@dataclass(frozen=True)
class AuthSession:
    token: str
    email: str
    name: str
    expires_at: datetime

    @property
    def expired(self) -> bool:
        return datetime.now(timezone.utc) >= self.expires_at


@dataclass(frozen=True)
class AuthContext:
    session: Optional[AuthSession] = None
    loading: bool = False

    @property
    def authenticated(self) -> bool:
        return self.session is not None


AuthCallback = Callable[[str, Optional[AuthSession]], None]


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Salted PBKDF2-SHA256 hash as ``pbkdf2$iterations$salt$hex``."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), PBKDF2_ITERATIONS
    ).hex()
    return f"pbkdf2${PBKDF2_ITERATIONS}${salt}${digest}"


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, iterations, salt, digest = stored.split("$")
    except (AttributeError, ValueError):
        return False
    if scheme != "pbkdf2":
        return False
    candidate = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), int(iterations)
    ).hex()
    return hmac.compare_digest(candidate, digest)


def create_user(conn: DBConnection, email: str, password: str, name: str) -> None:
    """Provision a login account (see utils/create_user.py)."""
    email = (email or "").strip().lower()
    if not email or not password or not name:
        raise ValueError("Email, password and name are required")
    insert_rows(
        conn,
        "users",
        [{"email": email, "password_hash": hash_password(password), "name": name, "is_active": True}],
        returning=["id"],
    )


class Subscription:
    def __init__(self, service: "AuthService", key: int):
        self._service = service
        self._key = key
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._service._listeners.pop(self._key, None)
            self.active = False


class AuthService:
    """Credential exchange, session lookup, sign-out and change notifications."""

    def __init__(self, conn: DBConnection, session_days: int = 7):
        self.conn = conn
        self.session_days = session_days
        self._listeners: Dict[int, AuthCallback] = {}
        self._next_key = 0

    # -- subscriptions ------------------------------------------------------

    def on_auth_state_change(self, callback: AuthCallback) -> Subscription:
        key = self._next_key
        self._next_key += 1
        self._listeners[key] = callback
        return Subscription(self, key)

    def _notify(self, event: str, session: Optional[AuthSession]) -> None:
        for callback in list(self._listeners.values()):
            callback(event, session)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    # -- sessions -----------------------------------------------------------

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        email = (email or "").strip().lower()
        if not email or not password:
            raise AuthError("Email and password are required")

        users = select_rows(
            self.conn,
            "users",
            ["email", "password_hash", "name", "is_active"],
            filters=[("email", "eq", email)],
            limit=1,
        )
        if users.empty:
            logger.info("Sign-in refused for unknown account %s", email)
            raise AuthError("Invalid login credentials")
        user = users.iloc[0]
        if not verify_password(password, str(user["password_hash"])):
            logger.info("Sign-in refused for %s: bad password", email)
            raise AuthError("Invalid login credentials")
        if not bool(user["is_active"]):
            raise AuthError("This account is disabled")

        expires_at = datetime.now(timezone.utc) + timedelta(days=self.session_days)
        session = AuthSession(
            token=secrets.token_urlsafe(32),
            email=email,
            name=str(user["name"]),
            expires_at=expires_at,
        )
        insert_rows(
            self.conn,
            "auth_sessions",
            [{"token": session.token, "user_email": email, "expires_at": expires_at.isoformat()}],
            returning=["id"],
        )
        logger.info("Signed in %s", email)
        self._notify(SIGNED_IN, session)
        return session

    def get_session(self, token: Optional[str]) -> Optional[AuthSession]:
        """Session for ``token``; None if unknown or expired."""
        if not token:
            return None
        rows = select_rows(
            self.conn,
            "auth_sessions",
            ["token", "user_email", "expires_at"],
            filters=[("token", "eq", token)],
            limit=1,
        )
        if rows.empty:
            return None
        row = rows.iloc[0]
        users = select_rows(
            self.conn,
            "users",
            ["name", "is_active"],
            filters=[("email", "eq", row["user_email"])],
            limit=1,
        )
        if users.empty or not bool(users.iloc[0]["is_active"]):
            return None
        session = AuthSession(
            token=token,
            email=str(row["user_email"]),
            name=str(users.iloc[0]["name"]),
            expires_at=datetime.fromisoformat(str(row["expires_at"])),
        )
        if session.expired:
            delete_rows(self.conn, "auth_sessions", [("token", "eq", token)])
            return None
        return session

    def sign_out(self, token: Optional[str]) -> None:
        if token:
            try:
                delete_rows(self.conn, "auth_sessions", [("token", "eq", token)])
            except StoreError:
                # The local sign-out still happens; the token simply expires
                logger.warning("Could not revoke session token on sign-out")
        self._notify(SIGNED_OUT, None)


class AuthProvider:
    """Resolve the session for one view and own its subscription.

    Use as a context manager; the subscription is always released on exit::

        with AuthProvider(service, token) as provider:
            render(conn, provider.context)
    """

    def __init__(self, service: AuthService, token: Optional[str] = None):
        self.service = service
        self.token = token
        self.context = AuthContext(session=None, loading=True)
        self._subscription: Optional[Subscription] = None

    def _on_change(self, event: str, session: Optional[AuthSession]) -> None:
        self.context = AuthContext(session=session, loading=False)
        self.token = session.token if session else None

    def __enter__(self) -> "AuthProvider":
        self._subscription = self.service.on_auth_state_change(self._on_change)
        try:
            session = self.service.get_session(self.token)
        except Exception:
            self.close()
            raise
        self.context = AuthContext(session=session, loading=False)
        if session is None:
            self.token = None
        return self

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
