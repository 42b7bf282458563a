"""Membership service: users requesting to join organizations."""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from orgtree.core.result import Result
from orgtree.core.structured_logging import log_json
from orgtree.domain.membership import Membership
from orgtree.domain.organization import Organization
from orgtree.domain.ports import OrganizationRepository, UnitOfWork, UserRepository
from orgtree.models.enums import HandleAction, MembershipStatus
from orgtree.services.authorization import can_administer
from orgtree.services.errors import OrganizationError
from orgtree.services.organization_service import OrganizationSummary, parent_summaries

logger = logging.getLogger(__name__)

_EXISTING_MEMBERSHIP_ERRORS = {
    MembershipStatus.ACCEPTED: OrganizationError.ALREADY_MEMBER,
    MembershipStatus.PENDING: OrganizationError.PENDING_REQUEST,
    MembershipStatus.REJECTED: OrganizationError.REJECTED_REQUEST,
}


@dataclass
class UserOrganization:
    organization: Organization
    membership: Membership
    parent: Optional[OrganizationSummary]

    @property
    def since(self) -> datetime:
        """When the membership reached its current status."""
        if self.membership.status == MembershipStatus.ACCEPTED:
            return self.membership.accepted_at or self.membership.created_at
        if self.membership.status == MembershipStatus.REJECTED:
            return self.membership.rejected_at or self.membership.created_at
        return self.membership.created_at


@dataclass
class UserOrganizations:
    member: list[UserOrganization]
    pending: list[UserOrganization]
    rejected: list[UserOrganization]


class MembershipService:
    """Join requests of individual users and their handling by org admins.

    A user may hold accepted memberships at several levels of one tree, but
    only one pending request within any ancestor/descendant chain.
    """

    def __init__(
        self,
        organizations: OrganizationRepository,
        users: UserRepository,
        uow: UnitOfWork,
    ):
        """Initialize membership service.

        Args:
            organizations: Organization repository (memberships live there)
            users: User repository (superadmin lookups)
            uow: Transaction boundary
        """
        self.organizations = organizations
        self.users = users
        self.uow = uow

    async def join_organization(self, user_id: UUID, organization_id: UUID) -> Result[Membership]:
        """Create a pending membership request.

        Args:
            user_id: Requesting user
            organization_id: Organization to join

        Returns:
            Result with the pending membership, or the first failed check
        """
        organization = await self.organizations.find_by_id(organization_id)
        if organization is None:
            return Result.fail(OrganizationError.NOT_FOUND)
        if organization.is_archived:
            return Result.fail(OrganizationError.ARCHIVED)

        existing = await self.organizations.find_membership(user_id, organization_id)
        if existing is not None:
            return Result.fail(_EXISTING_MEMBERSHIP_ERRORS[existing.status])

        if await self._has_pending_request_in_hierarchy(user_id, organization_id):
            return Result.fail(OrganizationError.PENDING_HIERARCHY_REQUEST)

        try:
            membership = await self.organizations.add_membership(
                Membership.request(organization_id, user_id)
            )
            await self.uow.commit()
        except IntegrityError:
            await self.uow.rollback()
            return Result.fail(OrganizationError.PENDING_REQUEST)

        log_json(
            logger,
            logging.INFO,
            "membership.requested",
            organization_id=str(organization_id),
            user_id=str(user_id),
        )
        return Result.ok(membership)

    async def cancel_join_request(self, user_id: UUID, organization_id: UUID) -> Result[None]:
        """Withdraw the caller's own pending request."""
        membership = await self.organizations.find_membership(user_id, organization_id)
        if membership is None:
            return Result.fail(OrganizationError.REQUEST_NOT_FOUND)
        if not membership.is_pending:
            return Result.fail(OrganizationError.NOT_PENDING)

        await self.organizations.remove_user_from_organization(user_id, organization_id)
        await self.uow.commit()

        log_json(
            logger,
            logging.INFO,
            "membership.cancelled",
            organization_id=str(organization_id),
            user_id=str(user_id),
        )
        return Result.ok()

    async def handle_join_request(
        self,
        admin_id: UUID,
        organization_id: UUID,
        user_id: UUID,
        action: HandleAction,
        rejection_reason: Optional[str] = None,
    ) -> Result[Membership]:
        """Accept or reject a user's pending request.

        Args:
            admin_id: Caller, a superadmin or an admin of the organization
            organization_id: Organization the request targets
            user_id: Requesting user
            action: ``accept`` or ``reject``
            rejection_reason: Optional, at most 500 characters

        Returns:
            Result with the updated membership
        """
        if not await can_administer(self.users, self.organizations, admin_id, organization_id):
            return Result.fail(OrganizationError.NOT_ADMIN)

        membership = await self.organizations.find_membership(user_id, organization_id)
        if membership is None:
            return Result.fail(OrganizationError.REQUEST_NOT_FOUND)
        if not membership.is_pending:
            return Result.fail(OrganizationError.NOT_PENDING)

        if HandleAction(action) == HandleAction.ACCEPT:
            outcome = membership.accept(admin_id)
        else:
            outcome = membership.reject(admin_id, rejection_reason)
        if outcome.failed:
            return outcome

        updated = await self.organizations.update_membership(membership)
        await self.uow.commit()

        log_json(
            logger,
            logging.INFO,
            f"membership.{updated.status.value}",
            organization_id=str(organization_id),
            user_id=str(user_id),
            admin_id=str(admin_id),
        )
        return Result.ok(updated)

    async def get_organization_pending_requests(
        self, admin_id: UUID, organization_id: UUID
    ) -> Result[list[Membership]]:
        """Pending membership requests of one organization, oldest first."""
        organization = await self.organizations.find_by_id(organization_id)
        if organization is None:
            return Result.fail(OrganizationError.NOT_FOUND)

        if not await can_administer(self.users, self.organizations, admin_id, organization_id):
            return Result.fail(OrganizationError.NOT_ADMIN)

        return Result.ok(await self.organizations.find_pending_memberships(organization_id))

    async def get_user_organizations(self, user_id: UUID) -> Result[UserOrganizations]:
        """Every membership row of a user grouped by status, newest first."""
        memberships = await self.organizations.find_memberships_by_user_id(user_id)
        orgs = await self.organizations.find_by_ids([m.organization_id for m in memberships])
        by_id = {org.id: org for org in orgs}
        parents = await parent_summaries(self.organizations, orgs)

        grouped = UserOrganizations(member=[], pending=[], rejected=[])
        buckets = {
            MembershipStatus.ACCEPTED: grouped.member,
            MembershipStatus.PENDING: grouped.pending,
            MembershipStatus.REJECTED: grouped.rejected,
        }
        for membership in memberships:
            organization = by_id.get(membership.organization_id)
            if organization is None:
                continue
            buckets[membership.status].append(
                UserOrganization(
                    organization=organization,
                    membership=membership,
                    parent=parents.get(organization.parent_id),
                )
            )

        return Result.ok(grouped)

    async def _has_pending_request_in_hierarchy(self, user_id: UUID, organization_id: UUID) -> bool:
        ancestor_ids = await self.organizations.get_ancestor_ids(organization_id)
        descendant_ids = await self.organizations.get_descendant_ids(organization_id)
        hierarchy_ids = {organization_id, *ancestor_ids, *descendant_ids}

        pending_orgs = await self.organizations.find_pending_requests_by_user_id(user_id)
        return any(org.id in hierarchy_ids for org in pending_orgs)
