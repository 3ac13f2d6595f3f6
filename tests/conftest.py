"""Shared pytest fixtures for all test suites."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from twintravel.app.config import Settings
from twintravel.app.db.context import TwinContext
from twintravel.app.db.engine import create_schema
from twintravel.app.db.inmemory import InMemoryDocumentStore
from twintravel.app.travels.documents import TravelDocumentRepository
from twintravel.app.travels.editor import NestedEditor
from twintravel.app.travels.query import TravelQueryEngine
from twintravel.app.travels.repository import TravelRepository
from twintravel.app.travels.subquery import ItineraryReader


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults, independent of the environment."""
    return Settings(
        database_url=None,
        default_page_size=20,
        max_page_size=100,
        write_retry_attempts=3,
        default_currency="USD",
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Fresh in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def ctx() -> TwinContext:
    """Context for the twin under test."""
    return TwinContext(twin_id="twin-a")


@pytest.fixture
def other_ctx() -> TwinContext:
    """Context for a second, unrelated twin."""
    return TwinContext(twin_id="twin-b")


@pytest.fixture
def repository(store: InMemoryDocumentStore, settings: Settings) -> TravelRepository:
    """Travel repository over the in-memory store."""
    return TravelRepository(store, settings=settings)


@pytest.fixture
def editor(store: InMemoryDocumentStore, settings: Settings) -> NestedEditor:
    """Nested editor over the in-memory store."""
    return NestedEditor(store, settings=settings)


@pytest.fixture
def reader(store: InMemoryDocumentStore) -> ItineraryReader:
    """Itinerary projection reader over the in-memory store."""
    return ItineraryReader(store)


@pytest.fixture
def query_engine(store: InMemoryDocumentStore, settings: Settings) -> TravelQueryEngine:
    """Travel listing engine over the in-memory store."""
    return TravelQueryEngine(store, settings=settings)


@pytest.fixture
def documents(store: InMemoryDocumentStore, settings: Settings) -> TravelDocumentRepository:
    """Travel document repository over the in-memory store."""
    return TravelDocumentRepository(store, settings=settings)


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Async SQLite engine with the document table created.

    Usage:
        @pytest.mark.asyncio
        async def test_something(sqlite_engine):
            store = SqlDocumentStore(sqlite_engine)
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'documents.db'}",
        poolclass=NullPool,
        echo=False,
    )
    await create_schema(engine)

    yield engine

    await engine.dispose()
