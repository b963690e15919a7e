"""User model definitions."""

import enum

from sqlalchemy import Column, Integer, String
from backend.database import Base


class Role(str, enum.Enum):
    TEACHER = "teacher"
    PARENT = "parent"
    ADMIN = "admin"


class User(Base):
    """Represents a portal account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False)  # teacher/parent/admin
