"""Shared fixtures: a throwaway sqlite database and an HTTP client bound to the app."""
import os
import tempfile

import httpx
import pytest

# Must be set before core.config is imported anywhere
_TMPDIR = tempfile.mkdtemp(prefix="inventory-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMPDIR}/inventory.db"
os.environ["IMAGE_STORE"] = "database"
os.environ["PUBLIC_BASE_URL"] = ""


@pytest.fixture
async def db_engine():
    from db.database import Base, create_db_and_tables, engine

    await create_db_and_tables()
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    # pooled aiosqlite connections are bound to this test's event loop
    await engine.dispose()


@pytest.fixture
async def session(db_engine):
    from db.database import async_session_maker

    async with async_session_maker() as s:
        yield s


@pytest.fixture
async def client(db_engine):
    from main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def png_bytes():
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 256
