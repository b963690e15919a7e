import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.core.errors import StoreError
from backend.homework.partitions import PartitionKey
from backend.models.homework import HomeworkRecord

logger = logging.getLogger(__name__)


def append_record(
    db: Session,
    key: PartitionKey,
    *,
    upload_date: date,
    file_path: str,
    original_file_name: str,
    content_sha256: str | None = None,
) -> HomeworkRecord:
    record = HomeworkRecord(
        grade_level=key.grade_level,
        subject=key.subject,
        upload_date=upload_date,
        file_path=file_path,
        original_file_name=original_file_name,
        content_sha256=content_sha256,
    )
    try:
        db.add(record)
        db.commit()
        db.refresh(record)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to append homework record to %s', key.label)
        raise StoreError() from exc
    return record


def list_records(db: Session, key: PartitionKey) -> list[HomeworkRecord]:
    try:
        return db.query(HomeworkRecord).filter(
            HomeworkRecord.grade_level == key.grade_level,
            HomeworkRecord.subject == key.subject,
        ).order_by(HomeworkRecord.upload_date.desc(), HomeworkRecord.id.desc()).all()
    except SQLAlchemyError as exc:
        logger.exception('Failed to list homework records for %s', key.label)
        raise StoreError() from exc


def find_by_file_path(db: Session, file_path: str) -> HomeworkRecord | None:
    try:
        return db.query(HomeworkRecord).filter(
            HomeworkRecord.file_path == file_path,
        ).order_by(HomeworkRecord.id.desc()).first()
    except SQLAlchemyError as exc:
        logger.exception('Failed to look up homework record for a download')
        raise StoreError() from exc
