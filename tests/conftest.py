"""Pytest fixtures for testing."""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from uuid import UUID

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-for-hs256")

from orgtree.core.database import build_session_factory, get_db
from orgtree.core.security import create_access_token
from orgtree.main import app
from orgtree.models import (
    Base,
    MembershipStatus,
    OrganizationAdminModel,
    OrganizationMemberModel,
    OrganizationModel,
    UserModel,
)
from orgtree.repositories.join_parent_request_repository import (
    SqlAlchemyJoinParentRequestRepository,
)
from orgtree.repositories.notification_repository import SqlAlchemyNotificationRepository
from orgtree.repositories.organization_repository import SqlAlchemyOrganizationRepository
from orgtree.repositories.user_repository import SqlAlchemyUserRepository
from orgtree.services.join_parent_request_service import JoinParentRequestService
from orgtree.services.membership_service import MembershipService
from orgtree.services.notification_service import NotificationService
from orgtree.services.organization_service import OrganizationService

# In-memory SQLite shared by every session of one test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh schema for each test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_factory = build_session_factory(engine)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database dependency override.

    Args:
        db: Test database session

    Yields:
        AsyncClient configured for testing
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def org_repo(db: AsyncSession) -> SqlAlchemyOrganizationRepository:
    return SqlAlchemyOrganizationRepository(db)


@pytest_asyncio.fixture
async def organization_service(db: AsyncSession, org_repo) -> OrganizationService:
    return OrganizationService(org_repo, SqlAlchemyUserRepository(db), uow=db)


@pytest_asyncio.fixture
async def membership_service(db: AsyncSession, org_repo) -> MembershipService:
    return MembershipService(org_repo, SqlAlchemyUserRepository(db), uow=db)


@pytest_asyncio.fixture
async def join_parent_service(db: AsyncSession, org_repo) -> JoinParentRequestService:
    return JoinParentRequestService(
        org_repo,
        SqlAlchemyJoinParentRequestRepository(db),
        SqlAlchemyUserRepository(db),
        uow=db,
        notifier=NotificationService(org_repo, SqlAlchemyNotificationRepository(db)),
    )


async def create_user(
    db: AsyncSession,
    display_name: str = "Test User",
    is_superadmin: bool = False,
) -> UserModel:
    """User factory for creating test users.

    Args:
        db: Database session
        display_name: Display name
        is_superadmin: Platform-wide superadmin flag

    Returns:
        Created UserModel instance
    """
    user = UserModel(display_name=display_name, is_superadmin=is_superadmin)
    db.add(user)
    await db.commit()
    return user


async def create_org(
    db: AsyncSession,
    admin: UserModel,
    name: str,
    parent: OrganizationModel | None = None,
    archived: bool = False,
) -> OrganizationModel:
    """Organization factory writing rows directly, parent pointer included.

    Args:
        db: Database session
        admin: Creator, granted admin rights
        name: Unique organization name
        parent: Optional parent organization
        archived: Create the organization already archived

    Returns:
        Created OrganizationModel instance
    """
    now = datetime.now(UTC)
    org = OrganizationModel(
        name=name,
        description=f"{name} description",
        parent_id=parent.id if parent else None,
        created_by_id=admin.id,
        created_at=now,
        archived_at=now if archived else None,
    )
    db.add(org)
    await db.flush()
    db.add(OrganizationAdminModel(organization_id=org.id, user_id=admin.id))
    await db.commit()
    return org


async def add_member(
    db: AsyncSession,
    org: OrganizationModel,
    user: UserModel,
    status: MembershipStatus = MembershipStatus.ACCEPTED,
) -> OrganizationMemberModel:
    membership = OrganizationMemberModel(
        organization_id=org.id,
        user_id=user.id,
        status=status,
        created_at=datetime.now(UTC),
        accepted_at=datetime.now(UTC) if status == MembershipStatus.ACCEPTED else None,
    )
    db.add(membership)
    await db.commit()
    return membership


def auth_headers(user_id: UUID) -> dict[str, str]:
    """Bearer header carrying ``user_id`` as the token subject."""
    token = create_access_token({"sub": str(user_id)})
    return {"Authorization": f"Bearer {token}"}
