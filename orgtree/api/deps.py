"""FastAPI dependencies for caller identity and service construction."""
import hmac
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgtree.core.config import Settings
from orgtree.core.database import get_db
from orgtree.core.security import subject_user_id
from orgtree.models.user import UserModel
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

# HTTP Bearer token security scheme
security = HTTPBearer()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> UUID:
    """Get the calling user's id from the JWT ``sub`` claim.

    Args:
        credentials: HTTP Bearer credentials from request
        db: Database session

    Returns:
        Id of a known user

    Raises:
        HTTPException: 401 if token is invalid or the user does not exist
    """
    user_id = subject_user_id(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    result = await db.execute(select(UserModel.id).where(UserModel.id == user_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user_id


def get_organization_repository(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> SqlAlchemyOrganizationRepository:
    return SqlAlchemyOrganizationRepository(db, max_depth=settings.hierarchy_max_depth)


def get_user_repository(db: AsyncSession = Depends(get_db)) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(db)


def get_organization_service(
    db: AsyncSession = Depends(get_db),
    organizations: SqlAlchemyOrganizationRepository = Depends(get_organization_repository),
    users: SqlAlchemyUserRepository = Depends(get_user_repository),
) -> OrganizationService:
    return OrganizationService(organizations, users, uow=db)


def get_membership_service(
    db: AsyncSession = Depends(get_db),
    organizations: SqlAlchemyOrganizationRepository = Depends(get_organization_repository),
    users: SqlAlchemyUserRepository = Depends(get_user_repository),
) -> MembershipService:
    return MembershipService(organizations, users, uow=db)


def get_join_parent_request_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    organizations: SqlAlchemyOrganizationRepository = Depends(get_organization_repository),
    users: SqlAlchemyUserRepository = Depends(get_user_repository),
) -> JoinParentRequestService:
    """Wire the join-parent service; notifications follow ``notifications_enabled``."""
    notifier = None
    if settings.notifications_enabled:
        notifier = NotificationService(organizations, SqlAlchemyNotificationRepository(db))

    return JoinParentRequestService(
        organizations,
        SqlAlchemyJoinParentRequestRepository(db),
        users,
        uow=db,
        notifier=notifier,
    )


def require_metrics_access(
    authorization: str | None = Header(default=None),
    x_metrics_token: str | None = Header(default=None, alias="X-Metrics-Token"),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Guard the metrics scrape in production.

    Outside production the endpoint is open. In production it is hidden (404)
    until ``metrics_token`` is configured, and then requires that token as a
    bearer credential or an ``X-Metrics-Token`` header.

    Raises:
        HTTPException: 404 if no token is configured, 403 on a wrong token
    """
    if settings.environment != "production":
        return

    if not settings.metrics_token:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    scheme, _, credential = (authorization or "").partition(" ")
    token = credential.strip() if scheme.lower() == "bearer" else None
    token = token or x_metrics_token
    if not token or not hmac.compare_digest(token, settings.metrics_token):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
