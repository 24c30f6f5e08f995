"""
pytest configuration and fixtures.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from exercise_tracker.config import Settings
from exercise_tracker.main import create_app


@pytest.fixture
def settings() -> Settings:
    """In-memory store, fresh for every test."""
    return Settings(
        database_url="sqlite://",
        host="127.0.0.1",
        port=0,
        timezone="UTC",
        log_level="WARNING",
    )


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """Test client with the application lifespan (store) running."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(client: TestClient):
    """Factory registering a user and returning its JSON."""
    def _make_user(username: str = "fcc_test") -> dict:
        response = client.post("/api/users", json={"username": username})
        assert response.status_code == 200
        return response.json()

    return _make_user


@pytest.fixture
def add_exercise(client: TestClient):
    """Factory logging an exercise for a user id and returning the response."""
    def _add_exercise(user_id: str, **fields):
        body = {"description": "run", "duration": 10}
        body.update(fields)
        return client.post(f"/api/users/{user_id}/exercises", json=body)

    return _add_exercise
