from datetime import datetime, timezone

import jwt

from backend.core import config


def create_session_cookie(session_id: str, expires_at: datetime) -> str:
    payload = {"sid": session_id, "exp": expires_at, "iat": datetime.now(timezone.utc)}
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_session_cookie(token: str) -> str:
    """Return the session id carried by a signed cookie.

    Raises ``jwt.PyJWTError`` for expired, tampered or malformed values.
    """
    payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    session_id = payload.get("sid")
    if not isinstance(session_id, str) or not session_id:
        raise jwt.InvalidTokenError("Session cookie has no session id")
    return session_id
