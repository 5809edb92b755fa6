"""
Pytest configuration and fixtures for Shoptrack tests.
"""

import os

# Must be set before shoptrack.config caches its settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./shoptrack_test.db")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

import shoptrack.models  # noqa: F401
from shoptrack.main import app
from shoptrack.database import get_session
from shoptrack.models import Project


def _enable_sqlite_savepoints(engine) -> None:
    """
    Let SQLAlchemy own transaction boundaries on SQLite so SAVEPOINT
    (session.begin_nested) behaves as it does on PostgreSQL.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Create a test database engine on a fresh database file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'shoptrack.db'}", echo=False)
    _enable_sqlite_savepoints(engine)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_maker(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def test_session(session_maker):
    """Create a test database session."""
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_maker):
    """Create an async test client with test database."""

    async def override_get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def fetch_project(session: AsyncSession, project_no: str) -> Project | None:
    """Read a project bypassing any stale copy in the identity map."""
    result = await session.execute(
        select(Project)
        .where(Project.project_no == project_no)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


@pytest.fixture
def load_project():
    return fetch_project
