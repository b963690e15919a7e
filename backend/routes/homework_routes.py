from datetime import date

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_roles
from backend.auth.sessions import SessionData
from backend.core import config
from backend.core.errors import StoreError
from backend.database import ensure_homework_schema, get_db
from backend.homework import repository
from backend.homework.downloads import PDF_MEDIA_TYPE, resolve_download_path
from backend.homework.partitions import PartitionKey
from backend.homework.uploads import accept_upload
from backend.models.user import Role

router = APIRouter(tags=['homework'])


class HomeworkRecordResponse(BaseModel):
    id: int
    grade_level: int
    subject: str
    upload_date: date
    file_path: str
    original_file_name: str

    class Config:
        from_attributes = True


class DownloadRequest(BaseModel):
    file_path: str = Field(alias='filePath', min_length=1)

    class Config:
        populate_by_name = True


def ensure_database_ready() -> None:
    try:
        ensure_homework_schema()
    except SQLAlchemyError as exc:
        raise StoreError() from exc


@router.post(
    '/upload-homework/{grade_level}/{subject}',
    response_model=HomeworkRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
def upload_homework(
    grade_level: int,
    subject: str,
    upload_date: date = Form(..., alias='uploadDate'),
    homework_file: UploadFile = File(..., alias='homeworkFile'),
    session: SessionData = Depends(require_roles(Role.TEACHER)),
    db: Session = Depends(get_db),
):
    key = PartitionKey.parse(grade_level, subject)
    ensure_database_ready()

    return accept_upload(
        db,
        key,
        homework_file,
        upload_date,
        app_root=config.APP_ROOT,
        upload_dir=config.UPLOAD_DIR,
    )


@router.get('/download-homework/{grade_level}/{subject}', response_model=list[HomeworkRecordResponse])
def list_homework(
    grade_level: int,
    subject: str,
    session: SessionData = Depends(require_roles(Role.PARENT)),
    db: Session = Depends(get_db),
):
    key = PartitionKey.parse(grade_level, subject)
    ensure_database_ready()

    return repository.list_records(db, key)


@router.post('/download-homework', response_class=FileResponse)
def download_homework(
    data: DownloadRequest,
    session: SessionData = Depends(require_roles(Role.PARENT)),
    db: Session = Depends(get_db),
):
    path = resolve_download_path(data.file_path, app_root=config.APP_ROOT, upload_dir=config.UPLOAD_DIR)
    ensure_database_ready()

    record = repository.find_by_file_path(db, data.file_path.strip())
    filename = record.original_file_name if record is not None else path.name
    return FileResponse(path, media_type=PDF_MEDIA_TYPE, filename=filename)
