"""Homework file intake.

Uploads are stored content-addressed as ``<sha256>.pdf`` inside the upload
directory, so two different files sent under the same name never replace each
other. The client's file name is kept on the metadata row for display and for
the download ``Content-Disposition``. Bytes are staged in a sibling directory
and only moved into the upload directory once complete, so a download can
never see a partial file.

The file write and the metadata insert are separate steps. A failed insert
leaves the stored file behind without a record; nothing removes it.
"""

import hashlib
import logging
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import BinaryIO, Protocol

from sqlalchemy.orm import Session

from backend.core import config
from backend.core.errors import InvalidUpload, StoreError, UnsupportedMediaType, UploadTooLarge
from backend.homework import repository
from backend.homework.partitions import PartitionKey
from backend.models.homework import HomeworkRecord

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = 'application/pdf'
CHUNK_SIZE = 1024 * 1024


class IncomingFile(Protocol):
    filename: str | None
    content_type: str | None
    file: BinaryIO


def sanitize_filename(name: str | None) -> str:
    return Path(str(name or '').replace('\\', '/')).name.strip()


def staging_dir_for(upload_dir: Path) -> Path:
    # Sibling of the upload directory: same filesystem, outside the download root.
    return upload_dir.parent / f'.{upload_dir.name}-staging'


def _write_content_addressed(source: BinaryIO, upload_dir: Path, max_bytes: int) -> tuple[Path, str]:
    staging_dir = staging_dir_for(upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    staging_dir.mkdir(parents=True, exist_ok=True)
    digest = hashlib.sha256()
    size = 0

    with tempfile.NamedTemporaryFile(dir=staging_dir, suffix='.part', delete=False) as handle:
        temp_path = Path(handle.name)
        try:
            while True:
                chunk = source.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise UploadTooLarge()
                digest.update(chunk)
                handle.write(chunk)
        except Exception:
            handle.close()
            temp_path.unlink(missing_ok=True)
            raise

    content_sha256 = digest.hexdigest()
    stored_path = upload_dir / f'{content_sha256}.pdf'
    os.replace(temp_path, stored_path)
    return stored_path, content_sha256


def accept_upload(
    db: Session,
    key: PartitionKey,
    upload: IncomingFile,
    upload_date: date,
    *,
    app_root: Path,
    upload_dir: Path,
    max_bytes: int | None = None,
) -> HomeworkRecord:
    if upload.content_type != PDF_MEDIA_TYPE:
        logger.info('Rejected %r upload to %s', upload.content_type, key.label)
        raise UnsupportedMediaType()

    original_file_name = sanitize_filename(upload.filename)
    if not original_file_name:
        raise InvalidUpload()

    limit = config.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes
    try:
        stored_path, content_sha256 = _write_content_addressed(upload.file, upload_dir, limit)
    except UploadTooLarge:
        logger.info('Rejected oversized upload %r to %s', original_file_name, key.label)
        raise

    file_path = Path(os.path.relpath(stored_path, app_root)).as_posix()
    try:
        record = repository.append_record(
            db,
            key,
            upload_date=upload_date,
            file_path=file_path,
            original_file_name=original_file_name,
            content_sha256=content_sha256,
        )
    except StoreError:
        logger.warning('Stored %s for %s but its record was not saved', file_path, key.label)
        raise

    logger.info('Accepted %r for %s as record %s', original_file_name, key.label, record.id)
    return record
