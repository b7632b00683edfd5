import logging
import os
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Absolute path to project root
BASE_DIR = Path(__file__).resolve().parent.parent.parent


def _build_database_url() -> str:
    """
    Determine the database URL.

    - Prefer DATABASE_URL from the environment (production).
    - Fallback to a local SQLite file for development.
    - Normalize legacy postgres:// URLs to SQLAlchemy's postgresql+psycopg2://.
    """
    url = os.getenv("DATABASE_URL", "sqlite:///./local.db").strip()

    if url.startswith("postgres://"):
        # SQLAlchemy 2.x expects a driver-qualified URL
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)

    return url


DATABASE_URL = _build_database_url()

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # Needed for SQLite when used with FastAPI's threadpool
    connect_args = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, connect_args=connect_args, future=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def db_diagnostics() -> dict:
    """Backend, password-free URL and, for a file-backed SQLite, the file's state."""
    url = engine.url
    info = {
        "backend": url.get_backend_name(),
        "url": url.render_as_string(hide_password=True),
    }
    if info["backend"] != "sqlite":
        info.update(host=url.host, port=url.port, database=url.database, drivername=url.drivername)
    elif url.database not in (None, "", ":memory:"):
        db_path = Path(url.database).resolve()
        exists = db_path.exists()
        info.update(
            sqlite_path=str(db_path),
            sqlite_exists=exists,
            sqlite_size_bytes=db_path.stat().st_size if exists else 0,
        )
    return info


def log_db_diagnostics() -> None:
    """Log db_diagnostics() once at startup."""
    try:
        info = db_diagnostics()
    except OSError as exc:
        # Never crash app on logging
        logger.warning("[DB] Failed to log DB diagnostics: %r", exc)
        return

    logger.info("[DB] Using database backend=%s url=%s", info["backend"], info["url"])
    if "sqlite_path" in info:
        logger.info("[DB] SQLite path=%s exists=%s size_bytes=%s",
                    info["sqlite_path"], info["sqlite_exists"], info["sqlite_size_bytes"])
