"""Organization service for creating, archiving and browsing organizations."""
import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from orgtree.core.result import Result
from orgtree.core.structured_logging import log_json
from orgtree.domain.organization import Organization
from orgtree.domain.ports import OrganizationRepository, UnitOfWork, UserRepository
from orgtree.services.authorization import can_administer
from orgtree.services.errors import OrganizationError
from orgtree.services.hierarchy import OrganizationTreeNode, assemble_tree

logger = logging.getLogger(__name__)


@dataclass
class OrganizationSummary:
    id: UUID
    name: str


@dataclass
class OrganizationListing:
    organization: Organization
    member_count: int
    parent: Optional[OrganizationSummary]


@dataclass
class OrganizationDetails:
    organization: Organization
    parent: Optional[OrganizationSummary]
    member_count: int
    is_user_member: bool
    is_user_admin: bool


@dataclass
class HierarchyAncestor:
    id: UUID
    name: str
    member_count: int


@dataclass
class HierarchyView:
    """Ancestors ordered [parent, grandparent, ...] plus the whole tree from the root."""

    organization_id: UUID
    ancestors: list[HierarchyAncestor]
    tree: OrganizationTreeNode


async def parent_summaries(
    organizations: OrganizationRepository, orgs: list[Organization]
) -> dict[UUID, OrganizationSummary]:
    """Map parent id -> summary for every parent referenced by ``orgs``."""
    parent_ids = list({org.parent_id for org in orgs if org.parent_id is not None})
    parents = await organizations.find_by_ids(parent_ids)
    return {parent.id: OrganizationSummary(id=parent.id, name=parent.name) for parent in parents}


class OrganizationService:
    """Service for creating and managing organizations."""

    def __init__(
        self,
        organizations: OrganizationRepository,
        users: UserRepository,
        uow: UnitOfWork,
    ):
        """Initialize organization service.

        Args:
            organizations: Organization repository
            users: User repository (superadmin lookups)
            uow: Transaction boundary
        """
        self.organizations = organizations
        self.users = users
        self.uow = uow

    async def create_organization(
        self,
        user_id: UUID,
        name: str,
        description: str,
        parent_id: Optional[UUID] = None,
    ) -> Result[Organization]:
        """Create an organization, optionally directly under a parent.

        The creator becomes admin of the new organization. Creating under a
        parent requires superadmin or admin rights on that parent.

        Args:
            user_id: Creator
            name: Globally unique name
            description: Description
            parent_id: Optional parent organization

        Returns:
            Result with the stored organization
        """
        if await self.organizations.find_by_name((name or "").strip()) is not None:
            return Result.fail(OrganizationError.NAME_EXISTS)

        if parent_id is not None:
            parent = await self.organizations.find_by_id(parent_id)
            if parent is None:
                return Result.fail(OrganizationError.PARENT_NOT_FOUND)
            if parent.is_archived:
                return Result.fail(OrganizationError.PARENT_ARCHIVED)
            if not await can_administer(self.users, self.organizations, user_id, parent_id):
                return Result.fail(OrganizationError.NOT_ADMIN)

        created = Organization.create(name, description, user_id, parent_id)
        if created.failed:
            return created

        try:
            organization = await self.organizations.save(created.value)
            await self.uow.commit()
        except IntegrityError:
            await self.uow.rollback()
            return Result.fail(OrganizationError.NAME_EXISTS)

        log_json(
            logger,
            logging.INFO,
            "organization.created",
            organization_id=str(organization.id),
            parent_id=str(parent_id) if parent_id else None,
            user_id=str(user_id),
        )
        return Result.ok(organization)

    async def archive_organization(self, user_id: UUID, organization_id: UUID) -> Result[Organization]:
        """Soft-delete an organization; its place in the hierarchy is kept."""
        organization = await self.organizations.find_by_id(organization_id)
        if organization is None:
            return Result.fail(OrganizationError.NOT_FOUND)

        if not await can_administer(self.users, self.organizations, user_id, organization_id):
            return Result.fail(OrganizationError.NOT_ADMIN)

        archived = organization.archive()
        if archived.failed:
            return archived

        updated = await self.organizations.update(organization)
        await self.uow.commit()

        log_json(
            logger,
            logging.INFO,
            "organization.archived",
            organization_id=str(organization_id),
            user_id=str(user_id),
        )
        return Result.ok(updated)

    async def get_organization_details(
        self, organization_id: UUID, user_id: Optional[UUID] = None
    ) -> Result[OrganizationDetails]:
        organization = await self.organizations.find_by_id(organization_id)
        if organization is None:
            return Result.fail(OrganizationError.NOT_FOUND)
        if organization.is_archived:
            return Result.fail(OrganizationError.ARCHIVED)

        is_member = False
        is_admin = False
        if user_id is not None:
            is_member = await self.organizations.is_user_member(user_id, organization_id)
            is_admin = await can_administer(
                self.users, self.organizations, user_id, organization_id
            )

        parents = await parent_summaries(self.organizations, [organization])
        counts = await self.organizations.count_accepted_members([organization_id])

        return Result.ok(
            OrganizationDetails(
                organization=organization,
                parent=parents.get(organization.parent_id),
                member_count=counts.get(organization_id, 0),
                is_user_member=is_member,
                is_user_admin=is_admin,
            )
        )

    async def list_organizations(
        self, exclude_user_id: Optional[UUID] = None
    ) -> Result[list[OrganizationListing]]:
        """Active organizations, newest first.

        Args:
            exclude_user_id: Leave out organizations this user already belongs
                to or has a pending request for
        """
        orgs = await self.organizations.find_all_active(exclude_user_id)
        counts = await self.organizations.count_accepted_members([org.id for org in orgs])
        parents = await parent_summaries(self.organizations, orgs)

        return Result.ok(
            [
                OrganizationListing(
                    organization=org,
                    member_count=counts.get(org.id, 0),
                    parent=parents.get(org.parent_id),
                )
                for org in orgs
            ]
        )

    async def get_admin_organizations(self, user_id: UUID) -> Result[list[Organization]]:
        """Non-archived organizations the user holds an admin grant on."""
        orgs = await self.organizations.find_admin_organizations_by_user_id(user_id)
        return Result.ok([org for org in orgs if not org.is_archived])

    async def get_hierarchy_tree(self, organization_id: UUID) -> Result[HierarchyView]:
        """Ancestor chain of an organization plus the full tree it belongs to.

        Archived organizations (and everything only reachable through them)
        are left out of the tree.
        """
        organization = await self.organizations.find_by_id(organization_id)
        if organization is None:
            return Result.fail(OrganizationError.NOT_FOUND)
        if organization.is_archived:
            return Result.fail(OrganizationError.ARCHIVED)

        ancestor_ids = await self.organizations.get_ancestor_ids(organization_id)
        root_id = ancestor_ids[-1] if ancestor_ids else organization_id
        descendant_ids = await self.organizations.get_descendant_ids(root_id)

        tree_orgs = await self.organizations.find_by_ids([root_id, *descendant_ids])
        by_id = {org.id: org for org in tree_orgs}
        counts = await self.organizations.count_accepted_members(list(by_id))

        children_of: dict[UUID, list[UUID]] = {}
        for child_id in descendant_ids:
            child = by_id.get(child_id)
            if child is None or child.is_archived:
                continue
            children_of.setdefault(child.parent_id, []).append(child_id)

        tree = assemble_tree(
            root_id,
            {org_id: org.name for org_id, org in by_id.items()},
            children_of,
            counts,
        )
        ancestors = [
            HierarchyAncestor(
                id=ancestor_id,
                name=by_id[ancestor_id].name,
                member_count=counts.get(ancestor_id, 0),
            )
            for ancestor_id in ancestor_ids
            if ancestor_id in by_id
        ]

        return Result.ok(
            HierarchyView(organization_id=organization_id, ancestors=ancestors, tree=tree)
        )
