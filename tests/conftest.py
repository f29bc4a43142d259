"""Shared pytest fixtures for projects API test suites."""

from collections.abc import Callable
from collections.abc import Generator
from pathlib import Path
import os
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("PROJECTS_ENV", "test")
os.environ.setdefault("PROJECTS_DATABASE_URL", "sqlite+pysqlite:///:memory:")

from app.core.config import Settings  # noqa: E402
from app.db.base import get_db_session  # noqa: E402
from app.db.models import Base  # noqa: E402

TEST_SETTINGS = Settings(
    environment="test",
    database_url="sqlite+pysqlite:///:memory:",
    log_level="WARNING",
    default_page_limit=10,
)


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine shared across the threadpool via a static pool."""
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, class_=Session)


@pytest.fixture
def db_session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client_factory(session_factory: sessionmaker) -> Callable[[Settings], TestClient]:
    """Build API test clients for given settings, backed by the in-memory database."""
    from app.main import create_app

    def override_session() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def build(settings: Settings = TEST_SETTINGS) -> TestClient:
        app = create_app(settings)
        app.dependency_overrides[get_db_session] = override_session
        return TestClient(app)

    return build


@pytest.fixture
def client(client_factory: Callable[[Settings], TestClient]) -> Generator[TestClient, None, None]:
    """Provide an API test client backed by the in-memory database."""
    with client_factory(TEST_SETTINGS) as test_client:
        yield test_client
