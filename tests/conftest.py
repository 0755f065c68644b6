import os
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


# Ensure `import backend.app...` works regardless of where pytest is run from.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Must be set before anything imports backend.app.config: the module-level app in
# backend.app.main is built on import and should not touch the dev DB or uploads.
_SCRATCH = Path(tempfile.mkdtemp(prefix="jobboard-tests-"))
os.environ["DISABLE_DOTENV"] = "1"
os.environ["DATABASE_URL"] = f"sqlite+pysqlite:///{_SCRATCH / 'unused.sqlite3'}"
os.environ["UPLOAD_DIR"] = str(_SCRATCH / "uploads")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("APP_ENV", "test")


@pytest.fixture()
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def session_factory(tmp_path: Path):
    from backend.app import models  # noqa: F401
    from backend.app.database import Base

    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'test.sqlite3'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        engine.dispose()


@pytest.fixture()
def app(session_factory, upload_dir: Path) -> FastAPI:
    """
    FastAPI app wired to a throwaway SQLite DB and upload directory.

    The store handles are injected, so the module-level app never touches them.
    """
    from backend.app.main import create_app

    return create_app(session_factory=session_factory, upload_dir=str(upload_dir))


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def db_session(session_factory):
    """
    Direct SQLAlchemy session bound to the same temporary SQLite DB used by the test app.
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
