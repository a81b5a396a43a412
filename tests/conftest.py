from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import col

from leavedesk.config import get_settings
from leavedesk.db import connect_args, get_session
from leavedesk.main import app
from leavedesk.models import BalanceAuditEntry, EmployeeBalance, LeaveRequest, SQLModel
from leavedesk.services.employee import EmployeeInfo, InMemoryEmployeeService, set_employee_service

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture(scope="session")
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create a session-scoped async engine and ensure tables exist.

    In CI, Alembic migrations run before tests so create_all is a no-op.
    For local runs without prior migrations it serves as a fallback.
    Tests that need the database are skipped when PostgreSQL is unreachable.
    """
    settings = get_settings()
    _engine = create_async_engine(
        settings.database_url,
        connect_args=connect_args(settings),
    )
    try:
        async with _engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
    except (DBAPIError, OSError) as exc:
        await _engine.dispose()
        pytest.skip(f"PostgreSQL unavailable: {exc}")
    yield _engine
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a database session wrapped in a transaction that rolls back after each test."""
    async with engine.connect() as conn:
        txn = await conn.begin()
        session = AsyncSession(bind=conn, expire_on_commit=False)
        yield session
        await session.close()
        await txn.rollback()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def session_factory(engine: AsyncEngine) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Factory for independent sessions that really commit, for concurrency tests.

    Rows written for employees registered through ``employee_service`` are
    deleted afterwards.
    """
    yield async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def employee_service() -> Iterator[InMemoryEmployeeService]:
    """Install a fresh in-memory employee service for the test."""
    svc = InMemoryEmployeeService()
    set_employee_service(svc)
    yield svc
    set_employee_service(InMemoryEmployeeService())


@pytest.fixture
def make_employee(employee_service: InMemoryEmployeeService) -> Callable[..., EmployeeInfo]:
    """Register a new employee with the given entitlement and return it."""

    def _make(entitlement: int = 20, name: str = "Test Employee") -> EmployeeInfo:
        employee = EmployeeInfo(
            id=uuid.uuid4(),
            name=name,
            email=f"{name.lower().replace(' ', '.')}@example.com",
            department="Engineering",
            leave_entitlement_days=entitlement,
        )
        employee_service.seed(employee)
        return employee

    return _make


@pytest.fixture
async def committed_cleanup(
    session_factory: async_sessionmaker[AsyncSession],
    employee_service: InMemoryEmployeeService,
) -> AsyncIterator[None]:
    """Delete committed rows for every employee registered during the test."""
    yield
    employee_ids = [e.id for e in await employee_service.list_employees()]
    if not employee_ids:
        return
    async with session_factory() as session:
        await session.execute(delete(BalanceAuditEntry).where(col(BalanceAuditEntry.employee_id).in_(employee_ids)))
        await session.execute(delete(LeaveRequest).where(col(LeaveRequest.employee_id).in_(employee_ids)))
        await session.execute(delete(EmployeeBalance).where(col(EmployeeBalance.employee_id).in_(employee_ids)))
        await session.commit()
