from datetime import datetime, timedelta, timezone

import pytest

from core.auth import (
    SIGNED_IN,
    SIGNED_OUT,
    AuthContext,
    AuthError,
    AuthProvider,
    AuthService,
    create_user,
    hash_password,
    verify_password,
)
from core.services import StoreError, select_rows, update_rows


def test_password_hash_round_trip():
    stored = hash_password("hunter2")
    assert stored.startswith("pbkdf2$")
    assert verify_password("hunter2", stored)
    assert not verify_password("hunter3", stored)


def test_hash_uses_fresh_salt():
    assert hash_password("same") != hash_password("same")


@pytest.mark.parametrize("stored", ["", "plain-text", "md5$1$a$b", None])
def test_verify_rejects_malformed_hashes(stored):
    assert not verify_password("x", stored)


def test_create_user_requires_fields(conn):
    with pytest.raises(ValueError):
        create_user(conn, "", "pw", "Name")


def test_duplicate_user_is_store_error(conn):
    create_user(conn, "a@b.co", "pw", "A")
    with pytest.raises(StoreError):
        create_user(conn, "A@B.co", "pw2", "A2")


def test_sign_in_creates_session(auth):
    session = auth.sign_in_with_password(" owner@example.com ", "s3cret-pass")
    assert session.email == "owner@example.com"
    assert session.name == "Sam"
    assert not session.expired

    restored = auth.get_session(session.token)
    assert restored is not None
    assert restored.email == session.email


@pytest.mark.parametrize(
    "email, password",
    [("owner@example.com", "wrong"), ("nobody@example.com", "s3cret-pass")],
)
def test_bad_credentials(auth, email, password):
    with pytest.raises(AuthError, match="Invalid login credentials"):
        auth.sign_in_with_password(email, password)


def test_blank_credentials(auth):
    with pytest.raises(AuthError):
        auth.sign_in_with_password("", "")


def test_disabled_account(conn, auth):
    update_rows(conn, "users", {"is_active": False}, [("email", "eq", "owner@example.com")])
    with pytest.raises(AuthError, match="disabled"):
        auth.sign_in_with_password("owner@example.com", "s3cret-pass")


def test_unknown_token(auth):
    assert auth.get_session("not-a-token") is None
    assert auth.get_session(None) is None


def test_expired_session_is_dropped(conn, auth):
    session = auth.sign_in_with_password("owner@example.com", "s3cret-pass")
    past = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()
    update_rows(conn, "auth_sessions", {"expires_at": past}, [("token", "eq", session.token)])

    assert auth.get_session(session.token) is None
    assert select_rows(conn, "auth_sessions").empty


def test_sign_out_revokes_token(conn, auth):
    session = auth.sign_in_with_password("owner@example.com", "s3cret-pass")
    auth.sign_out(session.token)
    assert auth.get_session(session.token) is None


def test_listeners_are_notified_until_unsubscribed(auth):
    seen = []
    subscription = auth.on_auth_state_change(lambda event, session: seen.append(event))
    session = auth.sign_in_with_password("owner@example.com", "s3cret-pass")
    auth.sign_out(session.token)
    assert seen == [SIGNED_IN, SIGNED_OUT]

    subscription.unsubscribe()
    subscription.unsubscribe()
    auth.sign_out(None)
    assert seen == [SIGNED_IN, SIGNED_OUT]
    assert auth.listener_count == 0


def test_auth_context_defaults():
    ctx = AuthContext()
    assert not ctx.authenticated
    assert not ctx.loading


def test_provider_resolves_session_and_releases_subscription(auth):
    session = auth.sign_in_with_password("owner@example.com", "s3cret-pass")
    provider = AuthProvider(auth, session.token)
    assert provider.context.loading

    with provider:
        assert auth.listener_count == 1
        assert provider.context.authenticated
        assert provider.context.session.email == "owner@example.com"
        auth.sign_out(provider.token)
        assert not provider.context.authenticated
        assert provider.token is None

    assert auth.listener_count == 0


def test_provider_with_stale_token(auth):
    with AuthProvider(auth, "stale") as provider:
        assert not provider.context.authenticated
        assert provider.token is None
    assert auth.listener_count == 0


def test_provider_releases_subscription_on_error(auth):
    with pytest.raises(RuntimeError):
        with AuthProvider(auth, None):
            raise RuntimeError("page blew up")
    assert auth.listener_count == 0


def test_services_do_not_share_listeners(conn):
    first = AuthService(conn)
    second = AuthService(conn)
    first.on_auth_state_change(lambda *_: None)
    assert second.listener_count == 0


def test_store_failure_during_session_lookup(conn, auth):
    session = auth.sign_in_with_password("owner@example.com", "s3cret-pass")
    conn.execute("DROP TABLE auth_sessions")
    conn.commit()

    with pytest.raises(StoreError, match="auth_sessions"):
        with AuthProvider(auth, session.token):
            pass
    assert auth.listener_count == 0
