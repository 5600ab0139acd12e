"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from datetime import date
from pathlib import Path
from typing import Any

# Test-safe settings, applied before the app reads its configuration
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CACHE_BACKEND"] = "memory"
os.environ["EVENTS_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import get_settings
from domain.queries.candidate_filter import years_before
from domain.services.profile_service import utc_today
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.cache.memory_store import InMemoryCacheStore
from infrastructure.database.models import Base
from infrastructure.database.session import create_session_factory
from infrastructure.resources import Resources

# Test database URL (SQLite in memory, one shared connection per engine)
TEST_DATABASE_URL = "sqlite+aiosqlite://"


class RecordingPublisher:
    """Event publisher that keeps every published event in memory."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    async def publish(self, topic: str, key: str, payload: dict[str, Any]) -> None:
        self.events.append((topic, key, payload))

    def of_type(self, event_type: str) -> list[dict[str, Any]]:
        return [payload for _, _, payload in self.events if payload["type"] == event_type]


def years_ago(years: int) -> date:
    """A birth date giving an age of exactly ``years`` today (UTC)."""
    return years_before(utc_today(), years)


def registration_payload(**overrides: Any) -> dict[str, Any]:
    """A valid registration body; keyword arguments replace top-level fields."""
    payload: dict[str, Any] = {
        "email": "alex@example.com",
        "password": "Sup3r$ecret",
        "display_name": "Alex",
        "birth_date": years_ago(30).isoformat(),
        "gender": "FEMALE",
        "photos": [{"url": "https://cdn.example.com/p/alex.jpg", "is_primary": True}],
        "preferences": {
            "gender_preferences": ["MALE", "FEMALE"],
            "min_age": 18,
            "max_age": 60,
            "max_distance_km": None,
            "show_me": True,
        },
        "location": None,
        "bio": "Climber",
        "interests": ["climbing", "baking"],
    }
    payload.update(overrides)
    return payload


async def register(client: AsyncClient, **overrides: Any) -> tuple[dict[str, str], dict[str, Any]]:
    """Register through the API; returns auth headers and the profile body."""
    response = await client.post("/api/v1/auth/register", json=registration_payload(**overrides))
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    headers = {"Authorization": f"Bearer {data['access_token']}"}
    return headers, data["profile"]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return create_session_factory(engine)


@pytest.fixture
def cache_store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def resources(
    engine: AsyncEngine,
    session_factory: async_sessionmaker[AsyncSession],
    cache_store: InMemoryCacheStore,
    publisher: RecordingPublisher,
) -> Resources:
    """Resources wired to the test database, in-memory cache and recorder."""
    return Resources(
        settings=get_settings(),
        engine=engine,
        session_factory=session_factory,
        cache_store=cache_store,
        event_publisher=publisher,
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Auth provider sharing the application's signing key."""
    return JWTAuthProvider.from_settings(get_settings())


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth, no backing resources)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def app(resources: Resources) -> FastAPI:
    """Application with test resources installed in place of the lifespan."""
    from main import create_app

    app = create_app(get_settings())
    app.state.resources = resources
    return app


@pytest.fixture
async def api_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client backed by the test database."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
