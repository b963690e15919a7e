import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.passwords import hash_password, verify_password
from backend.auth.sessions import SessionData, SessionStore
from backend.core import config
from backend.core.errors import DuplicateUser, Forbidden, InvalidCredentials, StoreError
from backend.models.user import Role, User

logger = logging.getLogger(__name__)

SELF_SIGNUP_ROLES = frozenset({Role.TEACHER, Role.PARENT})

_dummy_hash: str | None = None


def _dummy_password_hash() -> str:
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password('not-a-real-password')
    return _dummy_hash


def normalize_username(username: str) -> str:
    return username.strip()


def create_user(db: Session, username: str, role: Role, password: str) -> User:
    username = normalize_username(username)

    try:
        existing = db.query(User.id).filter(User.username == username).first()
        if existing is not None:
            raise DuplicateUser()

        user = User(username=username, role=role.value, hashed_password=hash_password(password))
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateUser() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to create user %r', username)
        raise StoreError() from exc


def sign_up(db: Session, username: str, role: Role, password: str) -> int:
    if role not in SELF_SIGNUP_ROLES and not config.ALLOW_ADMIN_SIGNUP:
        logger.info('Rejected self sign-up of %r with role %s', username, role.value)
        raise Forbidden('This role cannot be chosen at sign-up.')

    user = create_user(db, username, role, password)
    logger.info('User %s (%s) signed up as %s', user.id, user.username, user.role)
    return user.id


def login(db: Session, store: SessionStore, username: str, password: str) -> tuple[str, SessionData]:
    username = normalize_username(username)

    try:
        user = db.query(User).filter(User.username == username).first()
    except SQLAlchemyError as exc:
        logger.exception('Failed to load user %r for login', username)
        raise StoreError() from exc

    if user is None:
        verify_password(password, _dummy_password_hash())
        raise InvalidCredentials()

    if not verify_password(password, user.hashed_password):
        logger.info('Failed login for user %s', user.id)
        raise InvalidCredentials()

    try:
        role = Role((user.role or '').strip().lower())
    except ValueError as exc:
        logger.warning('User %s has unrecognized role %r', user.id, user.role)
        raise Forbidden('User role is not recognized.') from exc

    token, session = store.create(user.id, role)
    logger.info('User %s logged in as %s', user.id, role.value)
    return token, session


def logout(store: SessionStore, token: str | None) -> None:
    if token:
        store.revoke(token)
