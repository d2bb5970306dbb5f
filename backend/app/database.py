import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import DATABASE_URL

logger = logging.getLogger(__name__)


def _normalize_database_url(url: str) -> str:
    # Allow simpler `.env` values like `mysql://...` and upgrade to the driver form.
    return url.replace("mysql://", "mysql+pymysql://", 1) if url.startswith("mysql://") else url


def _set_sqlite_pragmas(dbapi_connection, connection_record):  # noqa: ANN001
    try:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL;")
        # Membership and job rows reference organizations/users; keep SQLite honest about it.
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.execute("PRAGMA busy_timeout=30000;")
        cursor.close()
    except Exception as e:
        logger.warning("Failed to set SQLite pragmas: %s", e)


def build_engine(url: str) -> Engine:
    """Create an engine for `url` with the per-dialect settings the API relies on."""
    url = _normalize_database_url((url or "").strip())
    kwargs = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        # Needed for SQLite when used with FastAPI/uvicorn (multiple threads).
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}

    new_engine = create_engine(url, **kwargs)
    if url.startswith("sqlite"):
        event.listen(new_engine, "connect", _set_sqlite_pragmas)
    return new_engine


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        # Never hand a half-written transaction back to the pool.
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind: Engine | None = None):
    # Import models so they register with SQLAlchemy metadata before create_all.
    from . import models  # noqa: F401

    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info("Database ready (%s): %s", target.url.render_as_string(hide_password=True), ", ".join(sorted(Base.metadata.tables)))
