from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import jwt

from saas_admin_sdk.auth_store import AuthSession, AuthStore, token_expired
from saas_admin_sdk.exceptions import AuthError
from saas_admin_sdk.models import SessionData

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _token(expires_at: datetime | None) -> str:
    claims = {"sub": "admin-1"}
    if expires_at is not None:
        claims["exp"] = int(expires_at.timestamp())
    return jwt.encode(claims, "not-a-real-secret", algorithm="HS256")


def test_token_expired_reads_exp_claim() -> None:
    assert token_expired(_token(NOW + timedelta(hours=1)), now=NOW) is False
    assert token_expired(_token(NOW - timedelta(seconds=1)), now=NOW) is True
    assert token_expired(_token(None), now=NOW) is False


def test_token_expired_treats_garbage_as_expired() -> None:
    assert token_expired("not-a-jwt", now=NOW) is True
    assert token_expired(None, now=NOW) is True


def test_store_round_trip(tmp_path) -> None:
    store = AuthStore(base_dir=tmp_path)
    store.save(SessionData(token="abc", user={"email": "root@example.com"}, is_authenticated=True))

    loaded = store.load()

    assert loaded is not None
    assert loaded.token == "abc"
    assert loaded.is_authenticated is True
    assert '"isAuthenticated": true' in (tmp_path / "session.json").read_text()


def test_store_discards_corrupt_file(tmp_path) -> None:
    (tmp_path / "session.json").write_text("{not json")
    store = AuthStore(base_dir=tmp_path)

    assert store.load() is None
    assert not (tmp_path / "session.json").exists()


def test_restore_drops_expired_session(tmp_path) -> None:
    store = AuthStore(base_dir=tmp_path)
    session = AuthSession(store)
    session.establish(_token(NOW - timedelta(minutes=5)), {"email": "root@example.com"})

    fresh = AuthSession(store)

    assert fresh.restore(now=NOW) is False
    assert fresh.is_authenticated is False
    assert store.load() is None


def test_restore_keeps_valid_session(tmp_path) -> None:
    store = AuthStore(base_dir=tmp_path)
    token = _token(NOW + timedelta(hours=2))
    AuthSession(store).establish(token, {"email": "root@example.com"})

    fresh = AuthSession(store)

    assert fresh.restore(now=NOW) is True
    assert fresh.token == token
    assert fresh.user == {"email": "root@example.com"}


def test_auth_error_logs_out(tmp_path) -> None:
    store = AuthStore(base_dir=tmp_path)
    session = AuthSession(store)
    session.establish("token", None)

    session.handle_auth_error(AuthError(code="UNAUTHORIZED", message="expired", details=None, trace_id=None, status_code=401))

    assert session.is_authenticated is False
    assert store.load() is None
