"""SQLAlchemy implementation of the user repository port."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgtree.models.user import UserModel


class SqlAlchemyUserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def is_superadmin(self, user_id: UUID) -> bool:
        """Read the platform-wide flag fresh; unknown users are not superadmins."""
        result = await self.db.execute(
            select(UserModel.is_superadmin).where(UserModel.id == user_id)
        )
        return bool(result.scalar_one_or_none())
