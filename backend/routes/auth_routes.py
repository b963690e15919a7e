from datetime import datetime

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.auth import authenticator, jwt_handler
from backend.auth.dependencies import get_session_id, get_session_store, require_authenticated
from backend.auth.sessions import SessionData, SessionStore
from backend.core import config
from backend.database import get_db
from backend.models.user import Role

router = APIRouter(tags=['auth'])

MAX_USERNAME_LENGTH = 64

DASHBOARDS = {
    Role.TEACHER: '/teachers',
    Role.PARENT: '/parents',
    Role.ADMIN: '/admin',
}


class SignUpRequest(BaseModel):
    username: str
    role: Role
    password: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Username is required.')
        if len(normalized) > MAX_USERNAME_LENGTH:
            raise ValueError(f'Username must be {MAX_USERNAME_LENGTH} characters or fewer.')
        return normalized

    @field_validator('role', mode='before')
    @classmethod
    def normalize_role(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError('Password is required.')
        return value


class SignUpResponse(BaseModel):
    id: int
    username: str
    role: Role


class LoginRequest(BaseModel):
    username: str
    password: str


class SessionResponse(BaseModel):
    user_id: int
    role: Role
    expires_at: datetime
    dashboard: str


def _session_response(session: SessionData) -> SessionResponse:
    return SessionResponse(
        user_id=session.user_id,
        role=session.role,
        expires_at=session.expires_at,
        dashboard=DASHBOARDS[session.role],
    )


@router.post('/signup', response_model=SignUpResponse, status_code=status.HTTP_201_CREATED)
def signup(data: SignUpRequest, db: Session = Depends(get_db)):
    user_id = authenticator.sign_up(db, data.username, data.role, data.password)
    return SignUpResponse(id=user_id, username=data.username, role=data.role)


@router.post('/login', response_model=SessionResponse)
def login(
    data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    token, session = authenticator.login(db, store, data.username, data.password)
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=jwt_handler.create_session_cookie(token, session.expires_at),
        max_age=int(store.ttl.total_seconds()),
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite='lax',
    )
    return _session_response(session)


@router.post('/logout', status_code=status.HTTP_204_NO_CONTENT)
def logout(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
):
    authenticator.logout(store, get_session_id(request))
    response.delete_cookie(config.SESSION_COOKIE_NAME)


@router.get('/me', response_model=SessionResponse)
def me(session: SessionData = Depends(require_authenticated)):
    return _session_response(session)
