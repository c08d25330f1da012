from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jose import jwt
from jose.exceptions import JWTError
from platformdirs import user_data_dir

from .exceptions import ApiError
from .models import SessionData


def token_expired(token: str | None, now: datetime | None = None) -> bool:
    """Early-logout check on the unverified ``exp`` claim; never used for authorization."""
    if not token:
        return True
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return True
    exp = claims.get("exp")
    if exp is None:
        return False
    try:
        expires_at = datetime.fromtimestamp(float(exp), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return True
    return expires_at <= (now or datetime.now(timezone.utc))


@dataclass
class AuthStore:
    app_name: str = "saas-admin-console"
    filename: str = "session.json"
    base_dir: Path | None = None

    def _path(self) -> Path:
        base = self.base_dir or Path(user_data_dir(self.app_name, "SaaSAdmin"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def save(self, session: SessionData) -> None:
        path = self._path()
        path.write_text(json.dumps(session.model_dump(by_alias=True), indent=2))
        try:
            path.chmod(0o600)
        except OSError:
            pass

    def load(self) -> SessionData | None:
        path = self._path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text())
            return SessionData.model_validate(data)
        except ValueError:
            self.clear()
            return None

    def clear(self) -> None:
        path = self._path()
        if path.exists():
            path.unlink()


@dataclass
class AuthSession:
    store: AuthStore
    token: str | None = None
    user: dict[str, Any] | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def restore(self, now: datetime | None = None) -> bool:
        stored = self.store.load()
        if stored is None or not stored.is_authenticated:
            return False
        if token_expired(stored.token, now):
            self.logout()
            return False
        self.token = stored.token
        self.user = stored.user
        return True

    def establish(self, token: str, user: dict[str, Any] | None = None) -> None:
        self.token = token
        self.user = user
        self.store.save(SessionData(token=token, user=user, is_authenticated=True))

    def logout(self) -> None:
        self.token = None
        self.user = None
        self.store.clear()

    def handle_auth_error(self, error: ApiError) -> None:
        self.logout()
