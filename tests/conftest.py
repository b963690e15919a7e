import os
from datetime import timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from backend.auth.sessions import SessionStore  # noqa: E402
from backend.core import config  # noqa: E402
from backend.database import Base  # noqa: E402
from backend.models.homework import HomeworkRecord  # noqa: E402
from backend.models.user import User  # noqa: E402


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=[User.__table__, HomeworkRecord.__table__])
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine, tables=[HomeworkRecord.__table__, User.__table__])
        engine.dispose()


@pytest.fixture
def portal_db(db_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore(ttl=timedelta(minutes=60))


@pytest.fixture
def upload_root(tmp_path, monkeypatch: pytest.MonkeyPatch):
    upload_dir = tmp_path / 'uploads'
    upload_dir.mkdir()
    monkeypatch.setattr(config, 'APP_ROOT', tmp_path)
    monkeypatch.setattr(config, 'UPLOAD_DIR', upload_dir)
    return tmp_path
