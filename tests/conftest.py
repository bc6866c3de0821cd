"""Shared pytest fixtures for all test suites."""

import uuid
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from backend.app.db.context import RequestContext
from backend.app.db.models import Base
from backend.app.models.plan import PlanRequest
from tests.factories import make_request

USER_A = uuid.UUID("00000000-0000-0000-0000-00000000000a")
USER_B = uuid.UUID("00000000-0000-0000-0000-00000000000b")


@pytest.fixture
def ctx() -> RequestContext:
    """Request context for user A."""
    return RequestContext(user_id=USER_A)


@pytest.fixture
def other_ctx() -> RequestContext:
    """Request context for user B."""
    return RequestContext(user_id=USER_B)


@pytest.fixture
def plan_request() -> PlanRequest:
    """American citizen driving Toronto -> New York City."""
    return make_request()


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory sqlite engine with the schema created.

    StaticPool keeps one connection so every session sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def sqlite_session(sqlite_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Async session bound to the in-memory sqlite engine."""
    async with AsyncSession(sqlite_engine, expire_on_commit=False) as session:
        yield session
