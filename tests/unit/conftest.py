"""Shared fixtures for unit tests."""

from datetime import date
from typing import Any
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from core.exceptions import CacheUnavailableError
from domain.entities.profile import Gender, GeoPoint, Photo, Preferences, Profile

TODAY = date(2026, 6, 15)


class FakeUnitOfWork:
    """Fake Unit of Work with a profile repository mock for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.committed = False
        self.rolled_back = False
        self.entered = 0

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        self.entered += 1
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class FakeCacheStore:
    """Dict-backed cache store that can be switched into a failing state."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}
        self.failing = False

    def _check(self, operation: str) -> None:
        if self.failing:
            raise CacheUnavailableError(operation, "connection refused")

    async def get(self, key: str) -> bytes | None:
        self._check("get")
        return self.data.get(key)

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        self._check("set")
        self.data[key] = value
        self.ttls[key] = ttl_seconds

    async def delete(self, key: str) -> None:
        self._check("delete")
        self.data.pop(key, None)

    async def ping(self) -> bool:
        return not self.failing


def make_profile(**overrides: Any) -> Profile:
    """A valid, stored profile; keyword arguments replace fields."""
    fields: dict[str, Any] = {
        "id": str(uuid4()),
        "email": "sam@example.com",
        "password_hash": "",
        "display_name": "Sam",
        "birth_date": date(1996, 3, 2),
        "gender": Gender.FEMALE,
        "interests": ["hiking"],
        "photos": [Photo(url="https://cdn.example.com/p/sam.jpg", is_primary=True)],
        "location": GeoPoint(longitude=13.405, latitude=52.52),
        "preferences": Preferences(
            gender_preferences={Gender.MALE},
            min_age=25,
            max_age=35,
            max_distance_km=10.0,
        ),
        "version": 1,
    }
    fields.update(overrides)
    return Profile(**fields)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def cache() -> FakeCacheStore:
    return FakeCacheStore()


@pytest.fixture
def profile_id() -> str:
    """A random profile ID."""
    return str(uuid4())


@pytest.fixture
def other_id() -> str:
    """A random profile ID distinct from profile_id."""
    return str(uuid4())
