import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db.base import Base
from db.deps import get_db
from main import app
from models.table_snapshot import TableSnapshot  # noqa: F401
from services.columns import blank_cells
from services.row_store import CheckStatus, Row, new_row_id
from services.workspace import drop_workspaces


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db_session, monkeypatch):
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)

    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    drop_workspaces()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        drop_workspaces()


@pytest.fixture
def make_row():
    def _make(row_id=None, status=CheckStatus.UNVERIFIED, **cells):
        values = blank_cells()
        values.update(cells)
        return Row(id=row_id or new_row_id(), check_status=status).with_changes(values).with_status(status)

    return _make
