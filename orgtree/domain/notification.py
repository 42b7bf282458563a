"""Notification entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Optional
from uuid import UUID

from orgtree.models.enums import NotificationType


@dataclass
class Notification:
    user_id: UUID
    type: NotificationType
    title: str
    body: str
    data: Optional[dict[str, Any]] = None
    id: Optional[UUID] = None
    read_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def for_type(
        cls,
        user_id: UUID,
        notification_type: NotificationType,
        data: dict[str, Any],
    ) -> Notification:
        """Build a notification whose title/body are the type's translation keys."""
        key = _TRANSLATION_KEYS[notification_type]
        return cls(
            user_id=user_id,
            type=notification_type,
            title=f"notification.types.{key}.title",
            body=f"notification.types.{key}.body",
            data=data,
        )


_TRANSLATION_KEYS = {
    NotificationType.JOIN_PARENT_REQUEST_RECEIVED: "joinParentRequestReceived",
    NotificationType.ORG_JOINED_PARENT: "orgJoinedParent",
}
