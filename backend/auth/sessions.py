"""Server-side session storage.

A session links an opaque random token to the user id and role captured at
login. Sessions live for a fixed window from issuance; nothing extends them.
The store is created once per application and handed to request handlers
through ``backend.auth.dependencies.get_session_store``. Creating a session
also drops every expired one, so the map never outgrows the live logins.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Lock

from backend.models.user import Role


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SessionData:
    user_id: int
    role: Role
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or _utcnow()) >= self.expires_at


class SessionStore:
    def __init__(self, ttl: timedelta):
        if ttl <= timedelta(0):
            raise ValueError("Session TTL must be positive.")
        self.ttl = ttl
        self._sessions: dict[str, SessionData] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, user_id: int, role: Role, now: datetime | None = None) -> tuple[str, SessionData]:
        issued_at = now or _utcnow()
        session = SessionData(user_id=user_id, role=role, expires_at=issued_at + self.ttl)
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._drop_expired(issued_at)
            self._sessions[token] = session
        return token, session

    def get(self, token: str, now: datetime | None = None) -> SessionData | None:
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if session.is_expired(now):
                del self._sessions[token]
                return None
            return session

    def revoke(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def revoke_user(self, user_id: int) -> int:
        with self._lock:
            tokens = [token for token, session in self._sessions.items() if session.user_id == user_id]
            for token in tokens:
                del self._sessions[token]
        return len(tokens)

    def purge_expired(self, now: datetime | None = None) -> int:
        with self._lock:
            return self._drop_expired(now or _utcnow())

    def _drop_expired(self, now: datetime) -> int:
        # Caller holds self._lock.
        expired = [token for token, session in self._sessions.items() if session.is_expired(now)]
        for token in expired:
            del self._sessions[token]
        return len(expired)
