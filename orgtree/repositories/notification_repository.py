"""SQLAlchemy implementation of the notification repository port."""
from sqlalchemy.ext.asyncio import AsyncSession

from orgtree.domain.notification import Notification
from orgtree.models.notification import NotificationModel


class SqlAlchemyNotificationRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_batch(self, notifications: list[Notification]) -> None:
        if not notifications:
            return
        self.db.add_all(
            [
                NotificationModel(
                    user_id=n.user_id,
                    type=n.type.value,
                    title=n.title,
                    body=n.body,
                    data=n.data,
                    read_at=n.read_at,
                    created_at=n.created_at,
                )
                for n in notifications
            ]
        )
        await self.db.flush()
