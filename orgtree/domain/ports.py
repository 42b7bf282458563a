"""Protocol interfaces the use cases depend on.

Storage adapters in ``orgtree.repositories`` implement these structurally; the
service layer never touches storage-specific types.
"""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable
from uuid import UUID

from orgtree.domain.join_parent_request import JoinParentRequest
from orgtree.domain.membership import Membership
from orgtree.domain.notification import Notification
from orgtree.domain.organization import Organization


@runtime_checkable
class UnitOfWork(Protocol):
    """Transaction boundary of one use case (``AsyncSession`` satisfies it)."""

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


@runtime_checkable
class OrganizationRepository(Protocol):
    """Persistence of organizations, admin grants and membership rows."""

    @abstractmethod
    async def save(self, organization: Organization) -> Organization:
        """Insert a new organization and grant its creator admin rights."""
        ...

    @abstractmethod
    async def find_by_id(self, organization_id: UUID) -> Optional[Organization]:
        ...

    @abstractmethod
    async def find_by_ids(self, organization_ids: list[UUID]) -> list[Organization]:
        ...

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[Organization]:
        ...

    @abstractmethod
    async def find_by_parent_id(self, parent_id: UUID) -> list[Organization]:
        """Direct children, archived ones included."""
        ...

    @abstractmethod
    async def find_all_active(self, exclude_user_id: Optional[UUID] = None) -> list[Organization]:
        """Non-archived organizations, newest first.

        With ``exclude_user_id``, organizations where that user is an accepted
        member or has a pending request are left out.
        """
        ...

    @abstractmethod
    async def get_ancestor_ids(self, organization_id: UUID) -> list[UUID]:
        """Ids ordered [parent, grandparent, ...] as currently persisted."""
        ...

    @abstractmethod
    async def get_descendant_ids(self, organization_id: UUID) -> list[UUID]:
        """Every organization reachable downward, in breadth-first order."""
        ...

    @abstractmethod
    async def set_parent_id(self, organization_id: UUID, parent_id: UUID) -> None:
        ...

    @abstractmethod
    async def update(self, organization: Organization) -> Organization:
        """Persist name, description and archived state (never the parent)."""
        ...

    @abstractmethod
    async def is_user_member(self, user_id: UUID, organization_id: UUID) -> bool:
        """Accepted member of the organization or of any of its descendants."""
        ...

    @abstractmethod
    async def is_user_admin(self, user_id: UUID, organization_id: UUID) -> bool:
        ...

    @abstractmethod
    async def find_admin_user_ids(self, organization_id: UUID) -> list[UUID]:
        ...

    @abstractmethod
    async def find_admin_organizations_by_user_id(self, user_id: UUID) -> list[Organization]:
        ...

    @abstractmethod
    async def find_accepted_member_user_ids_including_descendants(
        self, organization_id: UUID
    ) -> list[UUID]:
        """Distinct accepted members of the organization and its whole subtree."""
        ...

    @abstractmethod
    async def count_accepted_members(self, organization_ids: list[UUID]) -> dict[UUID, int]:
        ...

    @abstractmethod
    async def find_membership(self, user_id: UUID, organization_id: UUID) -> Optional[Membership]:
        ...

    @abstractmethod
    async def find_memberships_by_user_id(self, user_id: UUID) -> list[Membership]:
        """All membership rows of a user, newest first."""
        ...

    @abstractmethod
    async def find_pending_memberships(self, organization_id: UUID) -> list[Membership]:
        """Pending rows of one organization, oldest first."""
        ...

    @abstractmethod
    async def find_pending_requests_by_user_id(self, user_id: UUID) -> list[Organization]:
        """Organizations where the user has a pending membership request."""
        ...

    @abstractmethod
    async def add_membership(self, membership: Membership) -> Membership:
        ...

    @abstractmethod
    async def update_membership(self, membership: Membership) -> Membership:
        ...

    @abstractmethod
    async def remove_user_from_organization(self, user_id: UUID, organization_id: UUID) -> None:
        """Delete the user's membership row."""
        ...


@runtime_checkable
class JoinParentRequestRepository(Protocol):
    """Persistence of join-parent requests."""

    @abstractmethod
    async def save(self, request: JoinParentRequest) -> JoinParentRequest:
        ...

    @abstractmethod
    async def find_by_id(self, request_id: UUID) -> Optional[JoinParentRequest]:
        ...

    @abstractmethod
    async def find_pending_by_child_org_id(self, child_org_id: UUID) -> Optional[JoinParentRequest]:
        ...

    @abstractmethod
    async def find_pending_by_parent_org_id(self, parent_org_id: UUID) -> list[JoinParentRequest]:
        ...

    @abstractmethod
    async def find_all_by_child_org_id(self, child_org_id: UUID) -> list[JoinParentRequest]:
        ...

    @abstractmethod
    async def find_all_by_parent_org_id(self, parent_org_id: UUID) -> list[JoinParentRequest]:
        ...

    @abstractmethod
    async def update(self, request: JoinParentRequest) -> JoinParentRequest:
        ...

    @abstractmethod
    async def delete(self, request_id: UUID) -> None:
        ...


@runtime_checkable
class UserRepository(Protocol):
    @abstractmethod
    async def is_superadmin(self, user_id: UUID) -> bool:
        ...


@runtime_checkable
class NotificationRepository(Protocol):
    @abstractmethod
    async def save_batch(self, notifications: list[Notification]) -> None:
        ...


@runtime_checkable
class NotificationTrigger(Protocol):
    """Side-effect hooks fired after a hierarchy change is committed."""

    @abstractmethod
    async def notify_join_parent_request_received(
        self, child_org_id: UUID, parent_org_id: UUID
    ) -> None:
        ...

    @abstractmethod
    async def notify_org_joined_parent(self, child_org_id: UUID, parent_org_id: UUID) -> None:
        ...
