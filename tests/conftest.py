import os
import sys
from pathlib import Path

import bcrypt
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker


# Ensure `import backend.app...` works regardless of where pytest is run from.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Must be set before anything imports backend.app.config (test modules import services at collection).
os.environ["DISABLE_DOTENV"] = "1"
os.environ.setdefault("SECRET_KEY", "test-secret-key")


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("db") / "test.sqlite3"


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch: pytest.MonkeyPatch):
    """Cheap hashes keep the suite fast; the algorithm is unchanged."""
    original = bcrypt.gensalt
    monkeypatch.setattr(bcrypt, "gensalt", lambda *args, **kwargs: original(rounds=4))


@pytest.fixture()
def app(test_db_path: Path) -> FastAPI:
    """
    Create a FastAPI app wired to a temporary SQLite DB.

    We intentionally do NOT import `app.main` so the startup hook never touches the dev database.
    """
    os.environ["DATABASE_URL"] = f"sqlite+pysqlite:///{test_db_path}"

    from backend.app import database as db

    engine = db.build_engine(os.environ["DATABASE_URL"])
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Patch the shared database module so router dependencies use the test DB.
    db.engine = engine
    db.SessionLocal = TestingSessionLocal

    from backend.app import models  # noqa: F401

    db.Base.metadata.drop_all(bind=engine)
    db.init_db(bind=engine)

    from backend.app.api import application as application_api
    from backend.app.api import auth as auth_api
    from backend.app.api import dashboard as dashboard_api
    from backend.app.api import job as job_api
    from backend.app.api import organization as organization_api
    from backend.app.utils.error_handlers import register_exception_handlers

    fastapi_app = FastAPI()
    fastapi_app.include_router(auth_api.router)
    fastapi_app.include_router(organization_api.router)
    fastapi_app.include_router(job_api.router)
    fastapi_app.include_router(application_api.router)
    fastapi_app.include_router(dashboard_api.router)
    register_exception_handlers(fastapi_app)

    yield fastapi_app

    engine.dispose()


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    # raise_server_exceptions=False so 500 handlers are exercised like in production.
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def db_session(app: FastAPI):
    """
    Direct SQLAlchemy session bound to the same temporary SQLite DB used by the test app.
    """
    from backend.app.database import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
