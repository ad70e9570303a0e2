"""
Pytest fixtures: test clients per environment, seeded stores.
"""

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from uuid import NAMESPACE_URL, uuid5

import pytest
from fastapi.testclient import TestClient

from core.config import get_settings
from main import create_app
from models.schemas import User
from services.user_store import InMemoryUserStore

SEED_ID = "550e8400-e29b-41d4-a716-446655440000"
MISSING_ID = "00000000-0000-0000-0000-000000000000"
UUID4_PATTERN = r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"


@pytest.fixture(autouse=True)
def test_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Fresh settings per test; NODE_ENV=test unless a fixture overrides it."""
    for var in ("NODE_ENV", "CORS_ORIGINS", "LOG_LEVEL", "PORT", "FASTIFY_CLOSE_GRACE_DELAY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("NODE_ENV", "test")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _client_for(env: str, monkeypatch: pytest.MonkeyPatch, **extra_env: str) -> TestClient:
    monkeypatch.setenv("NODE_ENV", env)
    for key, value in extra_env.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    return TestClient(create_app())


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Test client with default app and seeded store."""
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def dev_client(monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    with _client_for("development", monkeypatch) as c:
        yield c


@pytest.fixture
def prod_client(monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    with _client_for("production", monkeypatch, CORS_ORIGINS="https://app.example.com") as c:
        yield c


def make_user(name: str, email: str, role: str = "user", minutes_ago: int = 0) -> User:
    return User(
        id=uuid5(NAMESPACE_URL, email),
        name=name,
        email=email,
        role=role,
        created_at=datetime(2024, 1, 1, tzinfo=UTC) - timedelta(minutes=minutes_ago),
    )


@pytest.fixture
def team() -> list[User]:
    return [
        make_user("Alice Admin", "alice@example.com", "admin", minutes_ago=30),
        make_user("bob builder", "bob@example.com", "user", minutes_ago=20),
        make_user("Carol Guest", "carol@corp.example.org", "guest", minutes_ago=10),
        make_user("Dave", "dave@example.com", "user", minutes_ago=0),
    ]


@pytest.fixture
def team_client(team: list[User]) -> Iterator[TestClient]:
    """Client whose store holds only the `team` fixture users."""
    with TestClient(create_app(store=InMemoryUserStore(seed=team))) as c:
        yield c
