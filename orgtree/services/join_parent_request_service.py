"""Use cases for attaching an organization under a parent organization."""
import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from orgtree.core.metrics import record_join_parent_request
from orgtree.core.result import Result
from orgtree.core.structured_logging import log_json
from orgtree.domain.join_parent_request import JoinParentRequest
from orgtree.domain.ports import (
    JoinParentRequestRepository,
    NotificationTrigger,
    OrganizationRepository,
    UnitOfWork,
    UserRepository,
)
from orgtree.models.enums import HandleAction
from orgtree.services.authorization import can_administer
from orgtree.services.errors import OrganizationError
from orgtree.services.notification_service import run_post_commit_hook

logger = logging.getLogger(__name__)


@dataclass
class JoinParentRequestsOverview:
    """Every request an organization has received (incoming) or filed (outgoing)."""

    incoming: list[JoinParentRequest]
    outgoing: list[JoinParentRequest]


class JoinParentRequestService:
    """Request, handle, cancel and list join-parent requests.

    Parent pointers only ever change in ``handle_join_parent_request`` on
    acceptance, after the cycle check has been repeated against the
    hierarchy as it is at that moment.
    """

    def __init__(
        self,
        organizations: OrganizationRepository,
        requests: JoinParentRequestRepository,
        users: UserRepository,
        uow: UnitOfWork,
        notifier: Optional[NotificationTrigger] = None,
    ):
        """Initialize join-parent request service.

        Args:
            organizations: Organization repository
            requests: Join-parent request repository
            users: User repository (superadmin lookups)
            uow: Transaction boundary committed once per mutating call
            notifier: Post-commit notification triggers; None disables them
        """
        self.organizations = organizations
        self.requests = requests
        self.users = users
        self.uow = uow
        self.notifier = notifier

    async def request_join_parent(
        self,
        user_id: UUID,
        child_org_id: UUID,
        parent_org_id: UUID,
        message: str,
    ) -> Result[JoinParentRequest]:
        """File a request for ``child_org_id`` to attach under ``parent_org_id``.

        Args:
            user_id: Caller, a superadmin or an admin of the child organization
            child_org_id: Organization that wants a parent
            parent_org_id: Proposed parent organization
            message: Free-text motivation (1-2000 characters)

        Returns:
            Result with the pending request, or the first failed check
        """
        if not await can_administer(self.users, self.organizations, user_id, child_org_id):
            return Result.fail(OrganizationError.NOT_ADMIN)

        child = await self.organizations.find_by_id(child_org_id)
        if child is None:
            return Result.fail(OrganizationError.CHILD_ORG_NOT_FOUND)
        if child.is_archived:
            return Result.fail(OrganizationError.CHILD_ORG_ARCHIVED)

        if child_org_id == parent_org_id:
            return Result.fail(OrganizationError.SAME_ORGANIZATION)

        parent = await self.organizations.find_by_id(parent_org_id)
        if parent is None:
            return Result.fail(OrganizationError.PARENT_NOT_FOUND)
        if parent.is_archived:
            return Result.fail(OrganizationError.PARENT_ARCHIVED)

        if await self.requests.find_pending_by_child_org_id(child_org_id) is not None:
            return Result.fail(OrganizationError.PENDING_PARENT_REQUEST)

        if await self._would_create_cycle(child_org_id, parent_org_id):
            return Result.fail(OrganizationError.CANNOT_JOIN_OWN_DESCENDANT)

        created = JoinParentRequest.create(child_org_id, parent_org_id, user_id, message)
        if created.failed:
            return created

        try:
            request = await self.requests.save(created.value)
            await self.uow.commit()
        except IntegrityError:
            # Another pending request for the same child won the race
            await self.uow.rollback()
            return Result.fail(OrganizationError.PENDING_PARENT_REQUEST)

        record_join_parent_request("created")
        log_json(
            logger,
            logging.INFO,
            "join_parent_request.created",
            join_parent_request_id=str(request.id),
            child_org_id=str(child_org_id),
            parent_org_id=str(parent_org_id),
            user_id=str(user_id),
        )

        if self.notifier is not None:
            await run_post_commit_hook(
                self.uow,
                "join_parent_request_received",
                lambda: self.notifier.notify_join_parent_request_received(
                    child_org_id, parent_org_id
                ),
                child_org_id=str(child_org_id),
                parent_org_id=str(parent_org_id),
            )

        return Result.ok(request)

    async def handle_join_parent_request(
        self,
        user_id: UUID,
        request_id: UUID,
        action: HandleAction,
        rejection_reason: Optional[str] = None,
    ) -> Result[JoinParentRequest]:
        """Accept or reject a pending request as an admin of its parent org.

        Accepting re-checks that both organizations are still active and that
        no cycle would form, then marks the request accepted and sets the
        child's parent pointer in the same transaction.

        Args:
            user_id: Caller, a superadmin or an admin of the parent organization
            request_id: Request to handle
            action: ``accept`` or ``reject``
            rejection_reason: Mandatory when rejecting

        Returns:
            Result with the handled request, or the first failed check
        """
        request = await self.requests.find_by_id(request_id)
        if request is None:
            return Result.fail(OrganizationError.PARENT_REQUEST_NOT_FOUND)
        if not request.is_pending:
            return Result.fail(OrganizationError.PARENT_REQUEST_NOT_PENDING)

        if not await can_administer(
            self.users, self.organizations, user_id, request.parent_org_id
        ):
            return Result.fail(OrganizationError.NOT_ADMIN)

        if HandleAction(action) == HandleAction.ACCEPT:
            return await self._accept(user_id, request)
        return await self._reject(user_id, request, rejection_reason)

    async def cancel_join_parent_request(self, user_id: UUID, request_id: UUID) -> Result[None]:
        """Withdraw a pending request; the row is deleted, not archived."""
        request = await self.requests.find_by_id(request_id)
        if request is None:
            return Result.fail(OrganizationError.PARENT_REQUEST_NOT_FOUND)

        if not await can_administer(
            self.users, self.organizations, user_id, request.child_org_id
        ):
            return Result.fail(OrganizationError.NOT_ADMIN)

        if not request.is_pending:
            return Result.fail(OrganizationError.PARENT_REQUEST_NOT_PENDING)

        await self.requests.delete(request.id)
        await self.uow.commit()

        record_join_parent_request("cancelled")
        log_json(
            logger,
            logging.INFO,
            "join_parent_request.cancelled",
            join_parent_request_id=str(request.id),
            child_org_id=str(request.child_org_id),
            user_id=str(user_id),
        )
        return Result.ok()

    async def get_incoming_join_parent_requests(
        self, user_id: UUID, parent_org_id: UUID
    ) -> Result[list[JoinParentRequest]]:
        """Pending requests addressed to ``parent_org_id``, newest first."""
        if not await can_administer(self.users, self.organizations, user_id, parent_org_id):
            return Result.fail(OrganizationError.NOT_ADMIN)

        return Result.ok(await self.requests.find_pending_by_parent_org_id(parent_org_id))

    async def get_all_join_parent_requests(
        self, user_id: UUID, organization_id: UUID
    ) -> Result[JoinParentRequestsOverview]:
        """Full request history of an organization in both directions."""
        if not await can_administer(self.users, self.organizations, user_id, organization_id):
            return Result.fail(OrganizationError.NOT_ADMIN)

        incoming = await self.requests.find_all_by_parent_org_id(organization_id)
        outgoing = await self.requests.find_all_by_child_org_id(organization_id)
        return Result.ok(JoinParentRequestsOverview(incoming=incoming, outgoing=outgoing))

    async def get_child_org_join_parent_request(
        self, user_id: UUID, child_org_id: UUID
    ) -> Result[Optional[JoinParentRequest]]:
        """The child's outstanding request, if any."""
        if not await can_administer(self.users, self.organizations, user_id, child_org_id):
            return Result.fail(OrganizationError.NOT_ADMIN)

        return Result.ok(await self.requests.find_pending_by_child_org_id(child_org_id))

    async def _would_create_cycle(self, child_org_id: UUID, parent_org_id: UUID) -> bool:
        descendant_ids = await self.organizations.get_descendant_ids(child_org_id)
        return parent_org_id in descendant_ids

    async def _accept(self, user_id: UUID, request: JoinParentRequest) -> Result[JoinParentRequest]:
        # Either organization may have been archived since the request was filed
        child = await self.organizations.find_by_id(request.child_org_id)
        if child is None:
            return Result.fail(OrganizationError.CHILD_ORG_NOT_FOUND)
        if child.is_archived:
            return Result.fail(OrganizationError.CHILD_ORG_ARCHIVED)

        parent = await self.organizations.find_by_id(request.parent_org_id)
        if parent is None:
            return Result.fail(OrganizationError.PARENT_NOT_FOUND)
        if parent.is_archived:
            return Result.fail(OrganizationError.PARENT_ARCHIVED)

        # The hierarchy may have moved since the request was filed
        if await self._would_create_cycle(request.child_org_id, request.parent_org_id):
            return Result.fail(OrganizationError.CANNOT_JOIN_OWN_DESCENDANT)

        accepted = request.accept(user_id)
        if accepted.failed:
            return accepted

        updated = await self.requests.update(request)
        await self.organizations.set_parent_id(request.child_org_id, request.parent_org_id)
        await self.uow.commit()

        record_join_parent_request("accepted")
        log_json(
            logger,
            logging.INFO,
            "join_parent_request.accepted",
            join_parent_request_id=str(request.id),
            child_org_id=str(request.child_org_id),
            parent_org_id=str(request.parent_org_id),
            user_id=str(user_id),
        )

        if self.notifier is not None:
            await run_post_commit_hook(
                self.uow,
                "org_joined_parent",
                lambda: self.notifier.notify_org_joined_parent(
                    request.child_org_id, request.parent_org_id
                ),
                child_org_id=str(request.child_org_id),
                parent_org_id=str(request.parent_org_id),
            )

        return Result.ok(updated)

    async def _reject(
        self,
        user_id: UUID,
        request: JoinParentRequest,
        rejection_reason: Optional[str],
    ) -> Result[JoinParentRequest]:
        if not rejection_reason or not rejection_reason.strip():
            return Result.fail(OrganizationError.REJECTION_REASON_REQUIRED)

        rejected = request.reject(user_id, rejection_reason)
        if rejected.failed:
            return rejected

        updated = await self.requests.update(request)
        await self.uow.commit()

        record_join_parent_request("rejected")
        log_json(
            logger,
            logging.INFO,
            "join_parent_request.rejected",
            join_parent_request_id=str(request.id),
            child_org_id=str(request.child_org_id),
            parent_org_id=str(request.parent_org_id),
            user_id=str(user_id),
        )
        return Result.ok(updated)
