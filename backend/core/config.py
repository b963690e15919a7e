import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    return int(value)


APP_ENV = os.getenv("APP_ENV", "development")

APP_ROOT = Path(os.getenv("APP_ROOT", Path(__file__).resolve().parents[2]))
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", APP_ROOT / "uploads"))
MAX_UPLOAD_BYTES = _get_int(os.getenv("MAX_UPLOAD_BYTES"), 10 * 1024 * 1024)

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{APP_ROOT / 'homework_portal.db'}")

MIN_BCRYPT_ROUNDS = 10
BCRYPT_ROUNDS = max(MIN_BCRYPT_ROUNDS, _get_int(os.getenv("BCRYPT_ROUNDS"), MIN_BCRYPT_ROUNDS))

SESSION_TTL_MINUTES = _get_int(os.getenv("SESSION_TTL_MINUTES"), 60)
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "portal_session")
SESSION_COOKIE_SECURE = _get_bool(os.getenv("SESSION_COOKIE_SECURE"), default=False)

DEFAULT_JWT_SECRET_KEY = "change-me-insecure-development-secret"
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET_KEY)
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

ALLOW_ADMIN_SIGNUP = _get_bool(os.getenv("ALLOW_ADMIN_SIGNUP"), default=False)
BOOTSTRAP_ADMIN_USERNAME = os.getenv("BOOTSTRAP_ADMIN_USERNAME", "")
BOOTSTRAP_ADMIN_PASSWORD = os.getenv("BOOTSTRAP_ADMIN_PASSWORD", "")

SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = _get_int(os.getenv("SMTP_PORT"), 587)
SMTP_USERNAME = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_START_TLS = _get_bool(os.getenv("SMTP_START_TLS"), default=True)
MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@homework-portal.local")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == DEFAULT_JWT_SECRET_KEY:
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if SESSION_TTL_MINUTES <= 0:
        raise RuntimeError("SESSION_TTL_MINUTES must be positive.")
