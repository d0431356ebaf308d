import contextlib
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.guest_messages.repository import orm_models as guest_message_models  # noqa: F401
from src.main import app
from src.models.base import BaseModel
from src.rsvp.repository import orm_models as rsvp_models  # noqa: F401


@pytest.fixture
def client_factory():
    """Build an AsyncClient against the app with the given dependency overrides."""

    @contextlib.asynccontextmanager
    async def factory(overrides: dict | None = None) -> AsyncIterator[AsyncClient]:
        app.dependency_overrides.update(overrides or {})
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest_asyncio.fixture
async def sqlite_session() -> AsyncIterator[AsyncSession]:
    """A session on a fresh in-memory SQLite database with all tables created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    session_maker = async_sessionmaker(engine, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()
