"""SQLAlchemy models."""

from orgtree.models.base import Base, BaseModel
from orgtree.models.enums import (
    HandleAction,
    JoinParentRequestStatus,
    MembershipStatus,
    NotificationType,
)
from orgtree.models.join_parent_request import JoinParentRequestModel
from orgtree.models.notification import NotificationModel
from orgtree.models.organization import (
    OrganizationAdminModel,
    OrganizationMemberModel,
    OrganizationModel,
)
from orgtree.models.user import UserModel

__all__ = [
    "Base",
    "BaseModel",
    "HandleAction",
    "JoinParentRequestStatus",
    "MembershipStatus",
    "NotificationType",
    "UserModel",
    "OrganizationModel",
    "OrganizationAdminModel",
    "OrganizationMemberModel",
    "JoinParentRequestModel",
    "NotificationModel",
]
