"""Shared test fixtures: in-memory SQLite DB, async session, test client."""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import coursemint.models  # noqa: F401
from coursemint.core.notifier import get_notifier
from coursemint.dependencies import get_db
from coursemint.main import app
from coursemint.models.base import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def _set_sqlite_pragma(dbapi_connection, connection_record):
    # Foreign keys are off by default in SQLite.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class RecordingNotifier:
    """Collects notifications instead of logging them."""

    def __init__(self) -> None:
        self.sent: list[tuple[uuid.UUID, str, str]] = []

    def notify(self, user_id: uuid.UUID, kind: str, message: str) -> None:
        self.sent.append((user_id, kind, message))

    def kinds(self) -> list[str]:
        return [kind for _, kind, _ in self.sent]


@pytest_asyncio.fixture
async def test_engine():
    """Fresh in-memory database per test, tables created up front."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncSession:
    """Yield a test DB session."""
    factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, notifier: RecordingNotifier) -> AsyncClient:
    """Yield an httpx AsyncClient wired to the test DB and a recording notifier."""

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
