"""
Shared fixtures: every test gets its own file-backed SQLite database.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from changestore import ChangeStore, init_changestore


@pytest.fixture
def database_url(tmp_path) -> str:
    """SQLite URL for a fresh database file."""
    return f"sqlite+aiosqlite:///{tmp_path / 'changes.db'}"


@pytest_asyncio.fixture
async def engine(database_url):
    """Async engine, disposed after the test."""
    engine = create_async_engine(database_url)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def store(engine) -> ChangeStore:
    """Store with the `changes` table created."""
    return await init_changestore(engine)
