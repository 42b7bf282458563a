"""Notification triggers fired after hierarchy changes commit."""
import logging
from collections.abc import Awaitable, Callable
from typing import Any
from uuid import UUID

from orgtree.core.metrics import record_notification_failure
from orgtree.core.structured_logging import log_json
from orgtree.domain.notification import Notification
from orgtree.domain.ports import NotificationRepository, OrganizationRepository, UnitOfWork
from orgtree.models.enums import NotificationType

logger = logging.getLogger(__name__)


class NotificationService:
    """Fan out hierarchy notifications to the affected users.

    Both triggers resolve the organization names themselves and do nothing
    when either organization is gone or nobody is there to notify.
    """

    def __init__(
        self,
        organizations: OrganizationRepository,
        notifications: NotificationRepository,
    ):
        """Initialize notification service.

        Args:
            organizations: Organization repository for names and recipients
            notifications: Notification persistence
        """
        self.organizations = organizations
        self.notifications = notifications

    async def notify_join_parent_request_received(
        self, child_org_id: UUID, parent_org_id: UUID
    ) -> None:
        """Tell every admin of the parent that a child wants to attach."""
        data = await self._org_pair_data(child_org_id, parent_org_id)
        if data is None:
            return

        admin_ids = await self.organizations.find_admin_user_ids(parent_org_id)
        await self._send(admin_ids, NotificationType.JOIN_PARENT_REQUEST_RECEIVED, data)

    async def notify_org_joined_parent(self, child_org_id: UUID, parent_org_id: UUID) -> None:
        """Tell every accepted member of the child's subtree about the new parent."""
        data = await self._org_pair_data(child_org_id, parent_org_id)
        if data is None:
            return

        member_ids = await self.organizations.find_accepted_member_user_ids_including_descendants(
            child_org_id
        )
        await self._send(member_ids, NotificationType.ORG_JOINED_PARENT, data)

    async def _org_pair_data(
        self, child_org_id: UUID, parent_org_id: UUID
    ) -> dict[str, Any] | None:
        child = await self.organizations.find_by_id(child_org_id)
        parent = await self.organizations.find_by_id(parent_org_id)
        if child is None or parent is None:
            return None

        return {
            "child_org_id": str(child.id),
            "child_org_name": child.name,
            "parent_org_id": str(parent.id),
            "parent_org_name": parent.name,
        }

    async def _send(
        self,
        user_ids: list[UUID],
        notification_type: NotificationType,
        data: dict[str, Any],
    ) -> None:
        if not user_ids:
            return

        await self.notifications.save_batch(
            [Notification.for_type(user_id, notification_type, data) for user_id in user_ids]
        )


async def run_post_commit_hook(
    uow: UnitOfWork,
    hook: str,
    call: Callable[[], Awaitable[None]],
    **fields: Any,
) -> None:
    """Run a side effect after the primary transaction has committed.

    The hook gets its own commit. Any failure is rolled back, logged as
    ``notification_hook_failed`` and counted; it never reaches the caller,
    whose change is already durable.
    """
    try:
        await call()
        await uow.commit()
    except Exception as exc:
        await uow.rollback()
        record_notification_failure(hook)
        log_json(
            logger,
            logging.WARNING,
            "notification_hook_failed",
            hook=hook,
            error=str(exc),
            **fields,
        )
