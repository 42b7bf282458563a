"""SQLAlchemy implementation of the organization repository port."""
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from orgtree.domain.membership import Membership
from orgtree.domain.organization import Organization
from orgtree.models.enums import MembershipStatus
from orgtree.models.organization import (
    OrganizationAdminModel,
    OrganizationMemberModel,
    OrganizationModel,
)
from orgtree.services.hierarchy import (
    DEFAULT_MAX_DEPTH,
    collect_descendant_ids,
    walk_ancestor_ids,
)


def _to_entity(model: OrganizationModel) -> Organization:
    return Organization.reconstitute(
        id=model.id,
        name=model.name,
        description=model.description,
        parent_id=model.parent_id,
        created_by_id=model.created_by_id,
        created_at=model.created_at,
        archived_at=model.archived_at,
    )


def _to_membership(model: OrganizationMemberModel) -> Membership:
    return Membership(
        organization_id=model.organization_id,
        user_id=model.user_id,
        status=MembershipStatus(model.status),
        created_at=model.created_at,
        accepted_at=model.accepted_at,
        accepted_by_id=model.accepted_by_id,
        rejected_at=model.rejected_at,
        rejected_by_id=model.rejected_by_id,
        rejection_reason=model.rejection_reason,
    )


class SqlAlchemyOrganizationRepository:
    """Organization persistence backed by an ``AsyncSession``.

    Every mutation is flushed immediately so later reads in the same
    transaction (traversals in particular) see it; committing is left to the
    use case.
    """

    def __init__(self, db: AsyncSession, max_depth: int = DEFAULT_MAX_DEPTH):
        """Initialize organization repository.

        Args:
            db: Database session
            max_depth: Defensive cap for hierarchy traversals
        """
        self.db = db
        self.max_depth = max_depth

    async def save(self, organization: Organization) -> Organization:
        model = OrganizationModel(
            name=organization.name,
            description=organization.description,
            parent_id=organization.parent_id,
            created_by_id=organization.created_by_id,
            created_at=organization.created_at,
            archived_at=organization.archived_at,
        )
        self.db.add(model)
        await self.db.flush()  # Flush to get the id for the admin grant

        self.db.add(
            OrganizationAdminModel(
                organization_id=model.id,
                user_id=organization.created_by_id,
            )
        )
        await self.db.flush()
        return _to_entity(model)

    async def find_by_id(self, organization_id: UUID) -> Optional[Organization]:
        model = await self._get_model(organization_id)
        return _to_entity(model) if model else None

    async def find_by_ids(self, organization_ids: list[UUID]) -> list[Organization]:
        if not organization_ids:
            return []
        result = await self.db.execute(
            select(OrganizationModel).where(OrganizationModel.id.in_(organization_ids))
        )
        return [_to_entity(m) for m in result.scalars().all()]

    async def find_by_name(self, name: str) -> Optional[Organization]:
        result = await self.db.execute(
            select(OrganizationModel).where(OrganizationModel.name == name)
        )
        model = result.scalar_one_or_none()
        return _to_entity(model) if model else None

    async def find_by_parent_id(self, parent_id: UUID) -> list[Organization]:
        result = await self.db.execute(
            select(OrganizationModel)
            .where(OrganizationModel.parent_id == parent_id)
            .order_by(OrganizationModel.created_at)
        )
        return [_to_entity(m) for m in result.scalars().all()]

    async def find_all_active(self, exclude_user_id: Optional[UUID] = None) -> list[Organization]:
        query = select(OrganizationModel).where(OrganizationModel.archived_at.is_(None))

        if exclude_user_id is not None:
            query = query.where(
                ~exists().where(
                    OrganizationMemberModel.organization_id == OrganizationModel.id,
                    OrganizationMemberModel.user_id == exclude_user_id,
                    OrganizationMemberModel.status.in_(
                        [MembershipStatus.PENDING, MembershipStatus.ACCEPTED]
                    ),
                )
            )

        result = await self.db.execute(query.order_by(OrganizationModel.created_at.desc()))
        return [_to_entity(m) for m in result.scalars().all()]

    async def get_ancestor_ids(self, organization_id: UUID) -> list[UUID]:
        return await walk_ancestor_ids(organization_id, self._find_parent_id, self.max_depth)

    async def get_descendant_ids(self, organization_id: UUID) -> list[UUID]:
        return await collect_descendant_ids(organization_id, self._find_child_ids, self.max_depth)

    async def set_parent_id(self, organization_id: UUID, parent_id: UUID) -> None:
        model = await self._get_model(organization_id)
        if model is None:
            raise LookupError(f"Organization {organization_id} disappeared during update")
        model.parent_id = parent_id
        await self.db.flush()

    async def update(self, organization: Organization) -> Organization:
        model = await self._get_model(organization.id)
        if model is None:
            raise LookupError(f"Organization {organization.id} disappeared during update")
        model.name = organization.name
        model.description = organization.description
        model.archived_at = organization.archived_at
        await self.db.flush()
        return _to_entity(model)

    async def is_user_member(self, user_id: UUID, organization_id: UUID) -> bool:
        descendant_ids = await self.get_descendant_ids(organization_id)
        result = await self.db.execute(
            select(
                exists().where(
                    OrganizationMemberModel.user_id == user_id,
                    OrganizationMemberModel.organization_id.in_([organization_id, *descendant_ids]),
                    OrganizationMemberModel.status == MembershipStatus.ACCEPTED,
                )
            )
        )
        return bool(result.scalar())

    async def is_user_admin(self, user_id: UUID, organization_id: UUID) -> bool:
        result = await self.db.execute(
            select(
                exists().where(
                    OrganizationAdminModel.user_id == user_id,
                    OrganizationAdminModel.organization_id == organization_id,
                )
            )
        )
        return bool(result.scalar())

    async def find_admin_user_ids(self, organization_id: UUID) -> list[UUID]:
        result = await self.db.execute(
            select(OrganizationAdminModel.user_id)
            .where(OrganizationAdminModel.organization_id == organization_id)
            .order_by(OrganizationAdminModel.created_at)
        )
        return list(result.scalars().all())

    async def find_admin_organizations_by_user_id(self, user_id: UUID) -> list[Organization]:
        result = await self.db.execute(
            select(OrganizationModel)
            .join(
                OrganizationAdminModel,
                OrganizationAdminModel.organization_id == OrganizationModel.id,
            )
            .where(OrganizationAdminModel.user_id == user_id)
            .order_by(OrganizationModel.name)
        )
        return [_to_entity(m) for m in result.scalars().all()]

    async def find_accepted_member_user_ids_including_descendants(
        self, organization_id: UUID
    ) -> list[UUID]:
        descendant_ids = await self.get_descendant_ids(organization_id)
        result = await self.db.execute(
            select(OrganizationMemberModel.user_id)
            .where(
                OrganizationMemberModel.organization_id.in_([organization_id, *descendant_ids]),
                OrganizationMemberModel.status == MembershipStatus.ACCEPTED,
            )
            .distinct()
        )
        return list(result.scalars().all())

    async def count_accepted_members(self, organization_ids: list[UUID]) -> dict[UUID, int]:
        if not organization_ids:
            return {}
        result = await self.db.execute(
            select(OrganizationMemberModel.organization_id, func.count())
            .where(
                OrganizationMemberModel.organization_id.in_(organization_ids),
                OrganizationMemberModel.status == MembershipStatus.ACCEPTED,
            )
            .group_by(OrganizationMemberModel.organization_id)
        )
        counts = {org_id: 0 for org_id in organization_ids}
        counts.update({org_id: count for org_id, count in result.all()})
        return counts

    async def find_membership(self, user_id: UUID, organization_id: UUID) -> Optional[Membership]:
        model = await self._get_membership_model(user_id, organization_id)
        return _to_membership(model) if model else None

    async def find_memberships_by_user_id(self, user_id: UUID) -> list[Membership]:
        result = await self.db.execute(
            select(OrganizationMemberModel)
            .where(OrganizationMemberModel.user_id == user_id)
            .order_by(OrganizationMemberModel.created_at.desc())
        )
        return [_to_membership(m) for m in result.scalars().all()]

    async def find_pending_memberships(self, organization_id: UUID) -> list[Membership]:
        result = await self.db.execute(
            select(OrganizationMemberModel)
            .where(
                OrganizationMemberModel.organization_id == organization_id,
                OrganizationMemberModel.status == MembershipStatus.PENDING,
            )
            .order_by(OrganizationMemberModel.created_at)
        )
        return [_to_membership(m) for m in result.scalars().all()]

    async def find_pending_requests_by_user_id(self, user_id: UUID) -> list[Organization]:
        result = await self.db.execute(
            select(OrganizationModel)
            .join(
                OrganizationMemberModel,
                OrganizationMemberModel.organization_id == OrganizationModel.id,
            )
            .where(
                OrganizationMemberModel.user_id == user_id,
                OrganizationMemberModel.status == MembershipStatus.PENDING,
            )
        )
        return [_to_entity(m) for m in result.scalars().all()]

    async def add_membership(self, membership: Membership) -> Membership:
        model = OrganizationMemberModel(
            organization_id=membership.organization_id,
            user_id=membership.user_id,
            status=membership.status,
            created_at=membership.created_at,
        )
        self.db.add(model)
        await self.db.flush()
        return _to_membership(model)

    async def update_membership(self, membership: Membership) -> Membership:
        model = await self._get_membership_model(membership.user_id, membership.organization_id)
        if model is None:
            raise LookupError(
                f"Membership of {membership.user_id} in {membership.organization_id} disappeared"
            )
        model.status = membership.status
        model.accepted_at = membership.accepted_at
        model.accepted_by_id = membership.accepted_by_id
        model.rejected_at = membership.rejected_at
        model.rejected_by_id = membership.rejected_by_id
        model.rejection_reason = membership.rejection_reason
        await self.db.flush()
        return _to_membership(model)

    async def remove_user_from_organization(self, user_id: UUID, organization_id: UUID) -> None:
        await self.db.execute(
            delete(OrganizationMemberModel).where(
                OrganizationMemberModel.user_id == user_id,
                OrganizationMemberModel.organization_id == organization_id,
            )
        )
        await self.db.flush()

    async def _get_model(self, organization_id: UUID) -> Optional[OrganizationModel]:
        result = await self.db.execute(
            select(OrganizationModel).where(OrganizationModel.id == organization_id)
        )
        return result.scalar_one_or_none()

    async def _get_membership_model(
        self, user_id: UUID, organization_id: UUID
    ) -> Optional[OrganizationMemberModel]:
        result = await self.db.execute(
            select(OrganizationMemberModel).where(
                OrganizationMemberModel.user_id == user_id,
                OrganizationMemberModel.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def _find_parent_id(self, organization_id: UUID) -> Optional[UUID]:
        result = await self.db.execute(
            select(OrganizationModel.parent_id).where(OrganizationModel.id == organization_id)
        )
        return result.scalar_one_or_none()

    async def _find_child_ids(self, parent_ids: list[UUID]) -> list[UUID]:
        result = await self.db.execute(
            select(OrganizationModel.id)
            .where(OrganizationModel.parent_id.in_(parent_ids))
            .order_by(OrganizationModel.created_at)
        )
        return list(result.scalars().all())
