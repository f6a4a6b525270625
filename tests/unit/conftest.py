"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.user import UserProfile


class FakeUnitOfWork:
    """Fake Unit of Work with a mocked user repository."""

    def __init__(self) -> None:
        self.users = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class FakeProfileCache:
    """Dict-backed cache that records every call."""

    def __init__(self) -> None:
        self.entries: dict[str, UserProfile] = {}
        self.puts: list[str] = []
        self.invalidated: list[str] = []

    async def get(self, user_id: str) -> UserProfile | None:
        return self.entries.get(user_id)

    async def put(self, user: UserProfile) -> None:
        self.entries[user.user_id] = user
        self.puts.append(user.user_id)

    async def invalidate(self, user_id: str) -> None:
        self.entries.pop(user_id, None)
        self.invalidated.append(user_id)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> str:
    """Identity subject used as the record key."""
    return "sub-1234"


@pytest.fixture
def cache() -> FakeProfileCache:
    return FakeProfileCache()


@pytest.fixture
def gateway() -> AsyncMock:
    """Mocked IUserGateway."""
    return AsyncMock()
