"""Shared fixtures for storefront tests."""

import os

# Settings are read at import time; point the app at an in-process database.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from storefront.catalog.models import Category
from storefront.domain.value_objects import CategoryNode
from storefront.infrastructure.database import Base


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory database with the schema applied."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Database session for a single test."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded_categories(session: AsyncSession) -> dict[str, Category]:
    """Store a small tree.

    Apparel (0)
        Shirts (0)
        Shoes (1)
    Electronics (1)
        Audio (0)
    """
    apparel = Category(id="apparel", name="Apparel", slug="apparel", sort_order=0)
    electronics = Category(id="electronics", name="Electronics", slug="electronics", sort_order=1)
    shirts = Category(id="shirts", parent_id="apparel", name="Shirts", slug="shirts", sort_order=0)
    shoes = Category(id="shoes", parent_id="apparel", name="Shoes", slug="shoes", sort_order=1)
    audio = Category(id="audio", parent_id="electronics", name="Audio", slug="audio", sort_order=0)
    session.add_all([apparel, electronics, shirts, shoes, audio])
    await session.commit()
    return {c.id: c for c in (apparel, electronics, shirts, shoes, audio)}


@pytest.fixture
def nodes() -> list[CategoryNode]:
    """Flat snapshot used across engine tests.

    A (0)
        A1 (0)
        A2 (1)
            A2a (0)
    B (1)
        B1 (0)
    C (2)
    """
    return [
        CategoryNode(id="A", name="A", sort_order=0),
        CategoryNode(id="A1", parent_id="A", name="A1", sort_order=0),
        CategoryNode(id="A2", parent_id="A", name="A2", sort_order=1),
        CategoryNode(id="A2a", parent_id="A2", name="A2a", sort_order=0),
        CategoryNode(id="B", name="B", sort_order=1),
        CategoryNode(id="B1", parent_id="B", name="B1", sort_order=0),
        CategoryNode(id="C", name="C", sort_order=2),
    ]
