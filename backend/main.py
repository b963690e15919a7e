import logging
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from backend.admin import user_manager
from backend.auth.sessions import SessionStore
from backend.core import config
from backend.core.errors import PortalError
from backend.database import Base, SessionLocal, engine, ensure_homework_schema
from backend.models import homework, user  # noqa: F401  registers tables on Base
from backend.routes import admin_routes, auth_routes, dashboard_routes, homework_routes

app = FastAPI(title='Homework Portal API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.state.session_store = SessionStore(ttl=timedelta(minutes=config.SESSION_TTL_MINUTES))

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    config.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)

    try:
        Base.metadata.create_all(bind=engine)
        ensure_homework_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')
        return

    db = SessionLocal()
    try:
        user_manager.ensure_bootstrap_admin(db, config.BOOTSTRAP_ADMIN_USERNAME, config.BOOTSTRAP_ADMIN_PASSWORD)
    except PortalError:
        logger.exception('Could not create the bootstrap admin account.')
    finally:
        db.close()


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={'detail': exc.detail, 'code': exc.code})


@app.get('/')
def root():
    return {'status': 'Homework Portal API Running'}


app.include_router(auth_routes.router)
app.include_router(dashboard_routes.router)
app.include_router(homework_routes.router)
app.include_router(admin_routes.router)
