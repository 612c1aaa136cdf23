"""Shared test fixtures for pytest."""

import os
from datetime import datetime, timedelta, timezone

# Must be set before app.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("COOKIE_SECURE", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from app.core.rate_limit import limiter
from app.main import create_app


STRONG_PASSWORD = "Secr3t!pass"


def registration(email: str, user_type: str = "client", first: str = "Ada", last: str = "Lovelace") -> dict:
    return {
        "userType": user_type,
        "first": first,
        "last": last,
        "email1": email,
        "dob": "2008-04-01",
        "email2": email,
        "password": STRONG_PASSWORD,
        "confirm": STRONG_PASSWORD,
    }


def soon(minutes: int = 0) -> str:
    """An ISO timestamp that is always on or after the start of today (UTC)."""
    return (datetime.now(timezone.utc) + timedelta(minutes=minutes)).isoformat()


@pytest.fixture
def app():
    """A fresh app over its own in-memory SQLite database."""
    limiter.reset()
    return create_app(database_url="sqlite://", cookie_secure=False)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(app):
    """Register a user and return (user_id, client logged in as that user)."""
    clients = []

    def _make(email: str, user_type: str = "client", first: str = "Ada", last: str = "Lovelace"):
        test_client = TestClient(app)
        test_client.__enter__()
        clients.append(test_client)
        response = test_client.post("/users/register", json=registration(email, user_type, first, last))
        assert response.status_code == 200, response.text
        return response.json()["userId"], test_client

    yield _make

    for test_client in clients:
        test_client.__exit__(None, None, None)
