import os

# Point the app at a private in-memory database before anything imports it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi.testclient import TestClient

from main import app
from shiori.core.config import Base, SessionLocal, engine
from shiori.services import diary_dates


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh tables for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def set_today(monkeypatch):
    """Move the server's idea of "today" to the given YYYY-MM-DD."""

    def _set(day: str):
        monkeypatch.setattr(diary_dates, "get_current_date", lambda: day)

    return _set


@pytest.fixture
def register(client):
    def _register(username="alice", email="alice@x.com", password="secret1"):
        response = client.post(
            "/api/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def auth_headers(register):
    token = register()["token"]
    return {"Authorization": f"Bearer {token}"}
