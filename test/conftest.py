"""
Pytest configuration and fixtures for Site Widgets tests
"""

import os
import tempfile
from collections.abc import AsyncGenerator
from datetime import timedelta

# Settings are read at import time, so point uploads at a scratch directory first
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="sitewidgets-uploads-"))
os.environ.pop("REDIS_URL", None)

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from sitewidgets.auth import create_access_token  # noqa: E402
from sitewidgets.blocks.registry import block_registry, register_builtin_blocks  # noqa: E402
from sitewidgets.database import Base, get_db  # noqa: E402
from sitewidgets.services.working_copy_store import InMemoryWorkingCopyStore, get_working_copy_store  # noqa: E402

register_builtin_blocks(block_registry)


@pytest.fixture(scope="function")
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """
    Fresh SQLite database file per test.

    Each test gets its own engine so requests and assertions never share a
    connection-level transaction.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture(scope="function")
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Database session for seeding and assertions."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def working_copy_store() -> InMemoryWorkingCopyStore:
    return InMemoryWorkingCopyStore(ttl_seconds=600)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Redirect file storage into the test's temporary directory."""
    from sitewidgets.services import file_service

    directory = tmp_path / "uploads"
    directory.mkdir()
    monkeypatch.setattr(file_service, "UPLOAD_DIR", directory)
    return directory


@pytest.fixture
async def client(session_factory, working_copy_store) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against a fresh app wired to the test database."""
    from main import create_app

    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def override_get_working_copy_store():
        return working_copy_store

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_working_copy_store] = override_get_working_copy_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def _bearer(sub: str, role: str) -> dict:
    token = create_access_token(data={"sub": sub, "role": role}, expires_delta=timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> dict:
    """Authentication headers for an admin"""
    return _bearer("admin@example.com", "admin")


@pytest.fixture
def editor_headers() -> dict:
    """Authentication headers for an authenticated user without an admin role"""
    return _bearer("editor@example.com", "editor")
