from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.admin import user_manager
from backend.auth.dependencies import get_session_store, require_roles
from backend.auth.sessions import SessionData, SessionStore
from backend.database import get_db
from backend.models.user import Role

router = APIRouter(tags=['admin'])

require_admin = require_roles(Role.ADMIN)


class AddUserRequest(BaseModel):
    username: str
    role: Role
    email: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Username is required.')
        return normalized

    @field_validator('role', mode='before')
    @classmethod
    def normalize_role(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if '@' not in normalized or normalized.startswith('@') or normalized.endswith('@'):
            raise ValueError('A valid email address is required.')
        return normalized


class UserResponse(BaseModel):
    id: int
    username: str
    role: str

    class Config:
        from_attributes = True


class AdminDashboardResponse(BaseModel):
    user_id: int
    users: list[UserResponse]


@router.get('/admin', response_model=AdminDashboardResponse)
def admin_dashboard(
    session: SessionData = Depends(require_admin),
    db: Session = Depends(get_db),
):
    users = user_manager.list_users(db)
    return AdminDashboardResponse(
        user_id=session.user_id,
        users=[UserResponse.model_validate(user) for user in users],
    )


@router.post('/admin/add-user', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def add_user(
    data: AddUserRequest,
    background_tasks: BackgroundTasks,
    session: SessionData = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return user_manager.add_user(db, data.username, data.role, data.email, background_tasks)


@router.post('/admin/delete-user/{user_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    session: SessionData = Depends(require_admin),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    user_manager.delete_user(db, user_id, store)
