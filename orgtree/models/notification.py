"""Notification model."""
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, String, Uuid

from orgtree.models.base import BaseModel


class NotificationModel(BaseModel):
    """An in-app notification addressed to one user.

    ``title`` and ``body`` hold translation keys; ``data`` holds the values
    the presentation layer interpolates into them.
    """

    __tablename__ = "notifications"

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    type = Column(String(64), nullable=False)
    title = Column(String(255), nullable=False)
    body = Column(String(255), nullable=False)
    data = Column(JSON, nullable=True)
    read_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_notifications_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<NotificationModel(id={self.id}, user_id={self.user_id}, type={self.type})>"
