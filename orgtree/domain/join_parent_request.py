"""Join-parent request entity and its state machine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Optional
from uuid import UUID

from orgtree.core.result import Result
from orgtree.domain.codes import JoinParentRequestDomainCode
from orgtree.models.enums import JoinParentRequestStatus

MESSAGE_MAX_LENGTH = 2000
REJECTION_REASON_MAX_LENGTH = 2000


@dataclass
class JoinParentRequest:
    """A child organization's proposal to attach under ``parent_org_id``.

    States: ``pending -> accepted`` and ``pending -> rejected``; both targets
    are terminal. ``accept`` and ``reject`` fail without side effects on a
    request that is no longer pending.

    Uniqueness of the pending request per child org is a use-case concern and
    is not checked here.
    """

    id: Optional[UUID]
    child_org_id: UUID
    parent_org_id: UUID
    requesting_admin_id: UUID
    message: str
    status: JoinParentRequestStatus
    created_at: datetime
    handling_admin_id: Optional[UUID] = None
    rejection_reason: Optional[str] = None
    handled_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        child_org_id: UUID,
        parent_org_id: UUID,
        requesting_admin_id: UUID,
        message: str,
    ) -> Result[JoinParentRequest]:
        if not message or not message.strip():
            return Result.fail(JoinParentRequestDomainCode.MESSAGE_EMPTY)
        if len(message) > MESSAGE_MAX_LENGTH:
            return Result.fail(JoinParentRequestDomainCode.MESSAGE_TOO_LONG)

        return Result.ok(
            cls(
                id=None,
                child_org_id=child_org_id,
                parent_org_id=parent_org_id,
                requesting_admin_id=requesting_admin_id,
                message=message.strip(),
                status=JoinParentRequestStatus.PENDING,
                created_at=datetime.now(UTC),
            )
        )

    @classmethod
    def reconstitute(
        cls,
        *,
        id: UUID,
        child_org_id: UUID,
        parent_org_id: UUID,
        requesting_admin_id: UUID,
        handling_admin_id: Optional[UUID],
        message: str,
        status: JoinParentRequestStatus,
        rejection_reason: Optional[str],
        created_at: datetime,
        handled_at: Optional[datetime],
    ) -> JoinParentRequest:
        return cls(
            id=id,
            child_org_id=child_org_id,
            parent_org_id=parent_org_id,
            requesting_admin_id=requesting_admin_id,
            handling_admin_id=handling_admin_id,
            message=message,
            status=JoinParentRequestStatus(status),
            rejection_reason=rejection_reason,
            created_at=created_at,
            handled_at=handled_at,
        )

    @property
    def is_pending(self) -> bool:
        return self.status == JoinParentRequestStatus.PENDING

    def accept(self, admin_id: UUID) -> Result[None]:
        if not self.is_pending:
            return Result.fail(JoinParentRequestDomainCode.NOT_PENDING)

        self.status = JoinParentRequestStatus.ACCEPTED
        self.handling_admin_id = admin_id
        self.handled_at = datetime.now(UTC)
        return Result.ok()

    def reject(self, admin_id: UUID, reason: Optional[str]) -> Result[None]:
        if not self.is_pending:
            return Result.fail(JoinParentRequestDomainCode.NOT_PENDING)
        if not reason or not reason.strip():
            return Result.fail(JoinParentRequestDomainCode.REJECTION_REASON_REQUIRED)
        if len(reason.strip()) > REJECTION_REASON_MAX_LENGTH:
            return Result.fail(JoinParentRequestDomainCode.REJECTION_REASON_TOO_LONG)

        self.status = JoinParentRequestStatus.REJECTED
        self.handling_admin_id = admin_id
        self.rejection_reason = reason.strip()
        self.handled_at = datetime.now(UTC)
        return Result.ok()
