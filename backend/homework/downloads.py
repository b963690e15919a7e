import logging
from pathlib import Path

from backend.core.errors import Forbidden, NotFound

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = 'application/pdf'


def resolve_download_path(requested_path: str, *, app_root: Path, upload_dir: Path) -> Path:
    """Map a client-supplied relative path to a stored file.

    The path is resolved against ``app_root`` and must land inside
    ``upload_dir`` after symlinks and ``..`` segments are collapsed. Only
    ``.pdf`` files are served, since every stored upload carries that suffix.
    """
    requested = (requested_path or '').strip()
    if not requested or '\x00' in requested:
        raise NotFound()

    resolved = (app_root / requested).resolve()
    if not resolved.is_relative_to(upload_dir.resolve()):
        logger.warning('Blocked download outside the upload directory: %r', requested)
        raise Forbidden()

    if resolved.suffix.lower() != '.pdf':
        logger.info('Download target %r is not a stored PDF', requested)
        raise NotFound()

    if not resolved.is_file():
        logger.info('Download target %r does not exist', requested)
        raise NotFound()

    return resolved
