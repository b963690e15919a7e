from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from backend.core import config


def _connect_args(url: str) -> dict:
    if url.startswith('sqlite'):
        return {'check_same_thread': False}
    return {}


engine = create_engine(config.DATABASE_URL, connect_args=_connect_args(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_homework_schema_checked = False


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_homework_schema() -> None:
    global _homework_schema_checked

    if _homework_schema_checked:
        return

    with _schema_lock:
        if _homework_schema_checked:
            return

        inspector = inspect(engine)

        if 'homework_records' not in inspector.get_table_names():
            _homework_schema_checked = True
            return

        with engine.begin() as connection:
            connection.execute(
                text(
                    'CREATE INDEX IF NOT EXISTS idx_homework_partition_date '
                    'ON homework_records(grade_level, subject, upload_date)'
                )
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_homework_file_path ON homework_records(file_path)')
            )

        _homework_schema_checked = True
