"""
Notekeep: Test Configuration (conftest.py)
===========================================

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:  AsyncMock session for pure service unit tests
    ├── db_engine:        SQLite (aiosqlite) engine with the schema created
    ├── db_session:       AsyncSession on db_engine for store-level tests
    ├── api_app:          FastAPI app whose DB dependency uses db_engine
    ├── test_client:      httpx AsyncClient talking to api_app over ASGI
    ├── notes_api:        app.client.NotesAPI talking to api_app over ASGI
    ├── note_cache:       NoteCache in a temp directory
    └── make_note:        factory for ClientNote instances
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from itertools import count
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

# Settings are read at import time, so the environment is prepared before
# anything from the app package is imported
_TEST_DIR = tempfile.mkdtemp(prefix="notekeep_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/app.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["TRASH_RETENTION_DAYS"] = "30"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["NOTEKEEP_CACHE_PATH"] = f"{_TEST_DIR}/cache/notes.json"

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402

from app.client.api import NotesAPI  # noqa: E402
from app.client.cache import NoteCache  # noqa: E402
from app.client.models import ClientNote  # noqa: E402
from app.database import Base, get_db_session  # noqa: E402
from app.main import create_app  # noqa: E402
from app.models import note as note_model  # noqa: E402,F401


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError):
            await note_service.get_note(mock_db_session, some_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/notes.db")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def api_app(session_factory):
    """
    A fresh app per test (fresh rate limiter) backed by the test database.

    The override never commits after the handler, so every write the API
    reports as successful must have been committed by the store itself.
    """
    app = create_app()

    async def _test_session():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _test_session
    return app


@pytest_asyncio.fixture
async def test_client(api_app):
    """
    HTTPX AsyncClient routed straight to the app (no server process).

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/notes")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=api_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def notes_api(api_app):
    api = NotesAPI("http://test", transport=ASGITransport(app=api_app))
    yield api
    await api.close()


@pytest.fixture
def note_cache(tmp_path):
    return NoteCache(tmp_path / "cache" / "notes.json")


@pytest.fixture
def make_note():
    """
    Factory for ClientNote objects with sensible defaults.

    Each call gets a fresh id and an updated_at one minute after the previous
    note's, so creation order and date order agree unless overridden.
    """
    ids = count(1)
    base = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def _make(title="Note", **fields):
        n = next(ids)
        created = fields.pop("created_at", base + timedelta(minutes=n))
        return ClientNote(
            id=fields.pop("id", f"note-{n}"),
            title=title,
            created_at=created,
            updated_at=fields.pop("updated_at", created),
            **fields,
        )

    return _make
