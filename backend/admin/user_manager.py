import logging

from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.admin import mailer
from backend.auth.authenticator import create_user
from backend.auth.passwords import generate_password
from backend.auth.sessions import SessionStore
from backend.core.errors import StoreError
from backend.models.user import Role, User

logger = logging.getLogger(__name__)


def add_user(
    db: Session,
    username: str,
    role: Role,
    email: str,
    background_tasks: BackgroundTasks,
) -> User:
    password = generate_password()
    user = create_user(db, username, role, password)
    logger.info('Admin created user %s (%s) as %s', user.id, user.username, user.role)

    # Delivery runs after the response; its failure leaves the account in place.
    background_tasks.add_task(mailer.send_credentials_email, email, user.username, password)
    return user


def delete_user(db: Session, user_id: int, store: SessionStore | None = None) -> None:
    try:
        deleted = db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to delete user %s', user_id)
        raise StoreError() from exc

    if deleted:
        logger.info('Deleted user %s', user_id)
        if store is not None:
            store.revoke_user(user_id)
    else:
        logger.info('Delete requested for absent user %s', user_id)


def list_users(db: Session) -> list[User]:
    try:
        return db.query(User).order_by(User.id.asc()).all()
    except SQLAlchemyError as exc:
        logger.exception('Failed to list users')
        raise StoreError() from exc


def ensure_bootstrap_admin(db: Session, username: str, password: str) -> User | None:
    """Create the configured admin account on a database that lacks it."""
    if not username or not password:
        return None

    try:
        existing = db.query(User).filter(User.username == username.strip()).first()
    except SQLAlchemyError as exc:
        raise StoreError() from exc
    if existing is not None:
        return None

    user = create_user(db, username, Role.ADMIN, password)
    logger.info('Created bootstrap admin %s (%s)', user.id, user.username)
    return user
