"""Homework upload metadata."""

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Integer, String
from backend.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HomeworkRecord(Base):
    """One uploaded homework file within a (grade level, subject) partition."""
    __tablename__ = "homework_records"

    id = Column(Integer, primary_key=True)
    grade_level = Column(Integer, nullable=False)
    subject = Column(String, nullable=False)
    upload_date = Column(Date, nullable=False)
    file_path = Column(String, nullable=False)
    original_file_name = Column(String, nullable=False)
    content_sha256 = Column(String(64))
    created_at = Column(DateTime, default=_utcnow)
