"""
Pytest configuration and fixtures for feedtags tests.

Behavioural tests run against a throwaway SQLite file per test. Foreign
keys are switched on by the engine, so cascades and the functional
unique index on tag titles behave as they do on PostgreSQL.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from feedtags.config.database import DatabaseManager
from feedtags.config.settings import Settings
from tests.factories.entry_factory import FeedSeed, seed_feed

RunInSession = Callable[[Callable[[AsyncSession], Awaitable[Any]]], Awaitable[Any]]


@pytest.fixture
def mock_settings() -> Settings:
    """Settings pointing at an in-memory database."""
    return Settings(database_url="sqlite+aiosqlite:///:memory:", log_level="debug")


@pytest.fixture
def mock_session() -> MagicMock:
    """AsyncSession double with awaitable I/O methods."""
    session = MagicMock(spec=AsyncSession)
    session.add = MagicMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """URL of a fresh SQLite file for this test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'feedtags-test.db'}"


@pytest.fixture
async def test_db_manager(database_url: str) -> AsyncGenerator[DatabaseManager, None]:
    """DatabaseManager bound to the test database, tables created."""
    manager = DatabaseManager(database_url)
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest.fixture
def session_factory(test_db_manager: DatabaseManager) -> async_sessionmaker[AsyncSession]:
    return test_db_manager.get_session_factory()


@pytest.fixture
def run(test_db_manager: DatabaseManager) -> RunInSession:
    """
    Run one operation as its own unit of work, like a single request.

    Commits on success; rolls back and re-raises on failure.
    """

    async def _run(operation: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        result = None
        async for session in test_db_manager.get_session():
            result = await operation(session)
        return result

    return _run


@pytest.fixture
async def seeded(session_factory: async_sessionmaker[AsyncSession]) -> FeedSeed:
    """Two users and a handful of entries; no tags yet."""
    async with session_factory() as session:
        return await seed_feed(session)
