"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: explicit pagination settings, isolated from the environment
    - Document Fixtures: in-memory documents with deliberate sort ties
    - Database Fixtures: SQLAlchemy engine and session on in-memory SQLite
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from keyset_connection.core.settings import PaginationSettings, get_pagination_settings
from tests.fixtures.models import Article, Base

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

BASE_TIME = datetime(2025, 1, 15, 10, 30)


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Drop cached settings so environment changes in one test don't leak."""
    get_pagination_settings.cache_clear()
    yield
    get_pagination_settings.cache_clear()


@pytest.fixture
def settings() -> PaginationSettings:
    """Pagination settings with the library defaults, ignoring .env files."""
    return PaginationSettings(
        _env_file=None,
        default_limit=50,
        max_limit=100,
        require_limit=False,
        tiebreak_field="id",
        concurrent_queries=True,
    )


# ============================================================================
# Document Fixtures
# ============================================================================


@pytest.fixture
def documents() -> list[dict[str, Any]]:
    """Ten documents; scores repeat so only ``id`` makes the order total.

    score = id % 3: 1, 2, 0, 1, 2, 0, 1, 2, 0, 1 for ids 1..10
    """
    return [
        {
            "id": i,
            "title": f"Article {i}",
            "score": i % 3,
            "published_at": BASE_TIME + timedelta(hours=i // 2),
        }
        for i in range(1, 11)
    ]


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine with in-memory SQLite."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create async database session with tables created and dropped around the test."""
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def articles(db_session: AsyncSession, documents: list[dict[str, Any]]) -> list[Article]:
    """Persist the shared documents as articles."""
    rows = [
        Article(
            id=doc["id"],
            title=doc["title"],
            author="alice" if doc["id"] % 2 else "bob",
            score=doc["score"],
            published_at=doc["published_at"],
        )
        for doc in documents
    ]
    db_session.add_all(rows)
    await db_session.commit()
    return rows
