"""Two-tier authorization shared by every use case."""
from uuid import UUID

from orgtree.domain.ports import OrganizationRepository, UserRepository


async def can_administer(
    users: UserRepository,
    organizations: OrganizationRepository,
    user_id: UUID,
    organization_id: UUID,
) -> bool:
    """Superadmins pass; everyone else needs an admin grant on the organization.

    Both lookups hit storage on every call, so revoked grants take effect
    immediately.
    """
    if await users.is_superadmin(user_id):
        return True
    return await organizations.is_user_admin(user_id, organization_id)
