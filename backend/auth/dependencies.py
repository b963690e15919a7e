import logging
from collections.abc import Iterable

import jwt
from fastapi import Depends, Request

from backend.auth import jwt_handler
from backend.auth.sessions import SessionData, SessionStore
from backend.core import config
from backend.core.errors import Forbidden, NotAuthenticated
from backend.models.user import Role

logger = logging.getLogger(__name__)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_session_id(request: Request) -> str | None:
    cookie = request.cookies.get(config.SESSION_COOKIE_NAME)
    if not cookie:
        return None
    try:
        return jwt_handler.decode_session_cookie(cookie)
    except jwt.PyJWTError:
        return None


def get_current_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> SessionData | None:
    session_id = get_session_id(request)
    if session_id is None:
        return None
    return store.get(session_id)


def authorize(session: SessionData, allowed_roles: Iterable[Role]) -> bool:
    """Admin passes every gate; everyone else needs a listed role."""
    return session.role == Role.ADMIN or session.role in set(allowed_roles)


def require_roles(*roles: Role):
    allowed_roles = frozenset(roles)

    def dependency(session: SessionData | None = Depends(get_current_session)) -> SessionData:
        if session is None:
            raise NotAuthenticated()
        if not authorize(session, allowed_roles):
            logger.info(
                'Denied user %s with role %s; requires one of %s',
                session.user_id,
                session.role.value,
                sorted(role.value for role in allowed_roles),
            )
            raise Forbidden()
        return session

    return dependency


require_authenticated = require_roles(*Role)
