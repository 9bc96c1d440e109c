import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from backend.main import app
from backend.config.db import get_db
from backend.domains.shared.db_base import Base
from backend.domains.board.models import Board  # noqa: F401  (registers the table)
from backend.domains.board.repository import SqlAlchemyBoardRepository

# In-memory SQLite shared across connections, so Unit of Work sessions see the same data
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Override the get_db dependency to use the test database
def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    # Fresh tables for every test
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Session:
    """Fixture to provide a database session for each test."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture
def client() -> TestClient:
    """Fixture to provide a test client for the FastAPI application."""
    return TestClient(app)


@pytest.fixture
def make_thread(client: TestClient):
    """Factory posting a thread and returning the created thread document."""
    def _make(board: str, text: str = "hello", password: str = "p1") -> dict:
        response = client.post(
            f"/api/threads/{board}",
            json={"text": text, "delete_password": password},
        )
        assert response.status_code == 200
        return response.json()
    return _make


@pytest.fixture
def make_reply(client: TestClient):
    """Factory posting a reply and returning the board document from the response."""
    def _make(board: str, thread_id: str, text: str = "hi", password: str = "p2") -> dict:
        response = client.post(
            f"/api/replies/{board}",
            json={"thread_id": thread_id, "text": text, "delete_password": password},
        )
        assert response.status_code == 200
        return response.json()
    return _make


def _database_down(*args, **kwargs):
    raise OperationalError("SELECT boards", {}, Exception("database is unavailable"))


@pytest.fixture
def break_storage(monkeypatch):
    """Make a board repository method fail at the database from now on."""
    def _break(method: str = "get_by_name") -> None:
        monkeypatch.setattr(SqlAlchemyBoardRepository, method, _database_down)
    return _break
