import pytest

from backend.core.errors import Forbidden, NotFound
from backend.homework.downloads import resolve_download_path


@pytest.fixture
def stored_file(tmp_path):
    upload_dir = tmp_path / 'uploads'
    upload_dir.mkdir()
    stored = upload_dir / 'abc.pdf'
    stored.write_bytes(b'%PDF-1.4\n')
    (tmp_path / 'secrets.env').write_text('JWT_SECRET_KEY=hunter2\n')
    return stored


def _resolve(root, requested):
    return resolve_download_path(requested, app_root=root, upload_dir=root / 'uploads')


def test_resolves_file_inside_upload_directory(tmp_path, stored_file) -> None:
    assert _resolve(tmp_path, 'uploads/abc.pdf') == stored_file.resolve()


def test_missing_file_is_not_found(tmp_path, stored_file) -> None:
    with pytest.raises(NotFound):
        _resolve(tmp_path, 'uploads/missing.pdf')


def test_upload_directory_itself_is_not_found(tmp_path, stored_file) -> None:
    with pytest.raises(NotFound):
        _resolve(tmp_path, 'uploads')


@pytest.mark.parametrize('requested', ['', '   ', 'uploads/abc.pdf\x00.txt'])
def test_blank_or_malformed_paths_are_not_found(tmp_path, stored_file, requested: str) -> None:
    with pytest.raises(NotFound):
        _resolve(tmp_path, requested)


@pytest.mark.parametrize(
    'requested',
    [
        'secrets.env',
        'uploads/../secrets.env',
        '../../../../etc/passwd',
        '/etc/passwd',
        'uploads/../../outside.pdf',
    ],
)
def test_paths_escaping_upload_directory_are_forbidden(tmp_path, stored_file, requested: str) -> None:
    with pytest.raises(Forbidden):
        _resolve(tmp_path, requested)


def test_symlink_pointing_outside_is_forbidden(tmp_path, stored_file) -> None:
    link = tmp_path / 'uploads' / 'link.pdf'
    try:
        link.symlink_to(tmp_path / 'secrets.env')
    except OSError:
        pytest.skip('symlinks not supported')

    with pytest.raises(Forbidden):
        _resolve(tmp_path, 'uploads/link.pdf')


def test_upload_directory_prefix_sibling_is_forbidden(tmp_path, stored_file) -> None:
    sibling = tmp_path / 'uploads-archive'
    sibling.mkdir()
    (sibling / 'old.pdf').write_bytes(b'%PDF-1.4\n')

    with pytest.raises(Forbidden):
        _resolve(tmp_path, 'uploads-archive/old.pdf')


@pytest.mark.parametrize('name', ['tmpa1b2c3.part', 'notes.txt', 'abc'])
def test_non_pdf_files_inside_upload_directory_are_not_found(tmp_path, stored_file, name: str) -> None:
    (tmp_path / 'uploads' / name).write_bytes(b'%PDF-1.4\npartial')

    with pytest.raises(NotFound):
        _resolve(tmp_path, f'uploads/{name}')
