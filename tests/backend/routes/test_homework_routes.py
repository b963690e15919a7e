import io
from datetime import date, datetime, timedelta, timezone

import pytest
from fastapi.responses import FileResponse
from pydantic import ValidationError
from starlette.datastructures import Headers, UploadFile

from backend.auth.sessions import SessionData
from backend.core.errors import Forbidden, InvalidPartition, NotFound, UnsupportedMediaType
from backend.models.user import Role
from backend.routes.homework_routes import (
    DownloadRequest,
    download_homework,
    list_homework,
    upload_homework,
)

PDF_BYTES = b'%PDF-1.4\n%%EOF\n'


@pytest.fixture(autouse=True)
def _skip_schema_checks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('backend.routes.homework_routes.ensure_database_ready', lambda: None)


def _session(role: Role) -> SessionData:
    return SessionData(user_id=1, role=role, expires_at=datetime.now(timezone.utc) + timedelta(hours=1))


def _pdf(filename: str = 'week1.pdf', content: bytes = PDF_BYTES, content_type: str = 'application/pdf'):
    return UploadFile(file=io.BytesIO(content), filename=filename, headers=Headers({'content-type': content_type}))


def _upload(db, grade_level=1, subject='mathematics', upload_date=date(2026, 1, 5), homework_file=None):
    return upload_homework(
        grade_level=grade_level,
        subject=subject,
        upload_date=upload_date,
        homework_file=homework_file or _pdf(),
        session=_session(Role.TEACHER),
        db=db,
    )


def test_download_request_accepts_camel_case_alias() -> None:
    assert DownloadRequest(filePath='uploads/a.pdf').file_path == 'uploads/a.pdf'
    assert DownloadRequest(file_path='uploads/a.pdf').file_path == 'uploads/a.pdf'


def test_download_request_requires_a_path() -> None:
    with pytest.raises(ValidationError):
        DownloadRequest(filePath='')


def test_upload_then_list_for_partition(portal_db, upload_root) -> None:
    record = _upload(portal_db)

    listing = list_homework(grade_level=1, subject='mathematics', session=_session(Role.PARENT), db=portal_db)

    assert [item.id for item in listing] == [record.id]
    assert (upload_root / record.file_path).exists()


def test_upload_accepts_subject_spelling_variants(portal_db, upload_root) -> None:
    record = _upload(portal_db, grade_level=3, subject='Social-Studies')

    assert record.subject == 'social_studies'


def test_upload_rejects_invalid_partition_before_writing(portal_db, upload_root) -> None:
    with pytest.raises(InvalidPartition):
        _upload(portal_db, grade_level=5, subject='mathematics')

    assert list((upload_root / 'uploads').iterdir()) == []


def test_non_pdf_upload_leaves_partition_empty(portal_db, upload_root) -> None:
    with pytest.raises(UnsupportedMediaType):
        _upload(portal_db, homework_file=_pdf('notes.docx', b'PK\x03\x04', 'application/msword'))

    listing = list_homework(grade_level=1, subject='mathematics', session=_session(Role.PARENT), db=portal_db)
    assert len(listing) == 0


def test_list_homework_is_newest_first(portal_db, upload_root) -> None:
    _upload(portal_db, upload_date=date(2026, 1, 5), homework_file=_pdf('old.pdf', PDF_BYTES + b'old'))
    _upload(portal_db, upload_date=date(2026, 2, 5), homework_file=_pdf('new.pdf', PDF_BYTES + b'new'))

    listing = list_homework(grade_level=1, subject='mathematics', session=_session(Role.ADMIN), db=portal_db)

    assert [item.original_file_name for item in listing] == ['new.pdf', 'old.pdf']


def test_list_homework_rejects_invalid_partition(portal_db) -> None:
    with pytest.raises(InvalidPartition):
        list_homework(grade_level=1, subject='music', session=_session(Role.PARENT), db=portal_db)


def test_download_streams_pdf_with_original_name(portal_db, upload_root) -> None:
    record = _upload(portal_db, homework_file=_pdf('fractions.pdf'))

    response = download_homework(
        DownloadRequest(filePath=record.file_path),
        session=_session(Role.PARENT),
        db=portal_db,
    )

    assert isinstance(response, FileResponse)
    assert response.media_type == 'application/pdf'
    assert str(response.path) == str((upload_root / record.file_path).resolve())
    assert 'fractions.pdf' in response.headers['content-disposition']


def test_download_missing_file_is_not_found(portal_db, upload_root) -> None:
    with pytest.raises(NotFound):
        download_homework(DownloadRequest(filePath='uploads/missing.pdf'), session=_session(Role.PARENT), db=portal_db)


def test_download_outside_upload_directory_is_forbidden(portal_db, upload_root) -> None:
    (upload_root / 'homework_portal.db').write_bytes(b'SQLite format 3\x00')

    with pytest.raises(Forbidden):
        download_homework(DownloadRequest(filePath='homework_portal.db'), session=_session(Role.PARENT), db=portal_db)

    with pytest.raises(Forbidden):
        download_homework(
            DownloadRequest(filePath='uploads/../homework_portal.db'),
            session=_session(Role.PARENT),
            db=portal_db,
        )
