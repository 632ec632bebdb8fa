import pytest
from fastapi.testclient import TestClient

from app.core.session_store import SessionStore, session_store
from app.main import app


@pytest.fixture(autouse=True)
def _reset_session_store():
    session_store.clear()
    yield
    session_store.clear()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(max_sessions=100)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)
