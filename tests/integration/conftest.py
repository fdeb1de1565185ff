"""Integration test fixtures for database and HTTP client operations.

Tests run against a file-backed SQLite database with foreign keys enforced,
so delete ordering and unique constraints behave as in production. Every
session gets its own connection (NullPool); concurrent tests open one
session per racing request.
"""

from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

import src.rosterhub.models  # noqa: F401
from src.rosterhub.api.dependencies import get_db_session
from src.rosterhub.core.db import get_session
from src.rosterhub.main import app
from src.rosterhub.models import (
    Organization,
    OrganizationRole,
    OrganizationSubscription,
    User,
)
from tests.factories import (
    OrganizationFactory,
    OrganizationSubscriptionFactory,
    UserFactory,
    UserOrganizationRoleFactory,
)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def _enable_sqlite_constraints(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Fresh database per test with every table created."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'rosterhub-test.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 30},
    )
    event.listen(test_engine.sync_engine, "connect", _enable_sqlite_constraints)

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> SessionFactory:
    """Open an independent session on the test database."""
    return lambda: get_session(engine)


@pytest.fixture
async def db_session(session_factory: SessionFactory) -> AsyncGenerator[AsyncSession]:
    """Session for test setup and assertions. Tests commit explicitly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def organization(db_session: AsyncSession) -> Organization:
    org = OrganizationFactory.build()
    db_session.add(org)
    await db_session.commit()
    return org


@pytest.fixture
async def active_subscription(
    db_session: AsyncSession, organization: Organization
) -> OrganizationSubscription:
    subscription = OrganizationSubscriptionFactory.build(organization_id=organization.id)
    db_session.add(subscription)
    await db_session.commit()
    return subscription


@pytest.fixture
async def org_admin(db_session: AsyncSession, organization: Organization) -> User:
    """A user holding an active admin grant in ``organization``."""
    user = UserFactory.build()
    db_session.add(user)
    await db_session.flush()
    db_session.add(
        UserOrganizationRoleFactory.admin(user_id=user.id, organization_id=organization.id)
    )
    await db_session.commit()
    return user


@pytest.fixture
async def org_member(db_session: AsyncSession, organization: Organization) -> User:
    user = UserFactory.build()
    db_session.add(user)
    await db_session.flush()
    db_session.add(
        UserOrganizationRoleFactory.build(
            user_id=user.id,
            organization_id=organization.id,
            role=OrganizationRole.ACTIVE_MEMBER.value,
        )
    )
    await db_session.commit()
    return user


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to the test database."""

    async def _get_test_session() -> AsyncGenerator[AsyncSession]:
        async with get_session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = _get_test_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
