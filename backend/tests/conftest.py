"""
LeafNotes Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the whole test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for failure paths (no real DB)
    ├── db_engine:       async engine on a fresh SQLite file under tmp_path
    │   └── db_session:  a real AsyncSession for service-level tests
    ├── app:             FastAPI app whose get_db_session uses db_engine
    │   └── test_client: HTTPX AsyncClient over ASGITransport
    │       └── api:     NotesApi bound to test_client
    └── make_note / make_folder: NoteResponse / FolderResponse builders
"""

import os
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before any leafnotes import: settings and the engine are built at import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from leafnotes.client.api import NotesApi  # noqa: E402
from leafnotes.database import Base, get_db_session  # noqa: E402
from leafnotes.main import create_app  # noqa: E402
import leafnotes.models  # noqa: E402,F401
from leafnotes.schemas.folder import FolderResponse, FolderSummary  # noqa: E402
from leafnotes.schemas.note import NoteResponse  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Mock async database session.

    Usage:
        async def test_failure(mock_db_session):
            mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception())
            with pytest.raises(DatabaseError):
                await note_service.list_notes(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """SQLite file database built from the ORM metadata, private to one test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'leafnotes_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Real session; tests commit explicitly when they need to."""
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory):
    """Fresh app per test, with get_db_session pointed at the test database."""
    application = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    Async HTTP client talking to the app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def api(test_client):
    return NotesApi(client=test_client)


# ══════════════════════════════════════════════════════════════════════════
# Model Builders (client-side tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_folder():
    def build(name: str = "Work", note_count: int = 0, folder_id: Optional[UUID] = None):
        now = datetime.now(timezone.utc)
        return FolderResponse(
            id=folder_id or uuid4(),
            name=name,
            created_at=now,
            updated_at=now,
            note_count=note_count,
        )

    return build


@pytest.fixture
def make_note():
    def build(
        title: str = "Untitled",
        content: str = "",
        folder: Optional[FolderResponse] = None,
        share_token: Optional[str] = None,
        note_id: Optional[UUID] = None,
    ):
        now = datetime.now(timezone.utc)
        summary = None
        if folder is not None:
            summary = FolderSummary(
                id=folder.id,
                name=folder.name,
                created_at=folder.created_at,
                updated_at=folder.updated_at,
            )
        return NoteResponse(
            id=note_id or uuid4(),
            title=title,
            content=content,
            folder_id=folder.id if folder is not None else None,
            folder=summary,
            share_token=share_token,
            created_at=now,
            updated_at=now,
        )

    return build
