"""Service test fixtures — async DB, tenant headers, and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test session factory
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares one connection,
      so rows written through the client are visible to test_db
    - Counters use SQLite's INSERT … ON CONFLICT … RETURNING (SQLite 3.35+)
"""

from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

from iperformance.core.domain_types import CompanyDomain, TenantContext
from iperformance.db.base import Base
from iperformance.infrastructure.database import DatabaseSessionManager, get_db
import iperformance.infrastructure.database as db_module
import iperformance.models  # noqa: F401
from iperformance.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def tenant() -> TenantContext:
    return TenantContext(CompanyDomain("acme.com"), uuid4())


@pytest.fixture
def other_tenant() -> TenantContext:
    return TenantContext(CompanyDomain("globex.com"), uuid4())


def _headers(tenant: TenantContext) -> dict[str, str]:
    return {"X-Company-Domain": tenant.company_domain, "X-User-Id": str(tenant.user_id)}


@pytest.fixture
async def client(test_engine, test_session_factory, tenant):
    """FastAPI test client authenticated as `tenant`, DB dependency overridden."""
    async def override_get_db():
        manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
        manager.engine = test_engine
        manager._session_factory = test_session_factory
        async with manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=_headers(tenant),
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def headers_for():
    """Auth headers for an arbitrary tenant (cross-tenant tests)."""
    return _headers
