"""Membership entity: a user's request to join, or standing in, one organization."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Optional
from uuid import UUID

from orgtree.core.result import Result
from orgtree.domain.codes import MembershipDomainCode
from orgtree.models.enums import MembershipStatus

REJECTION_REASON_MAX_LENGTH = 500


@dataclass
class Membership:
    organization_id: UUID
    user_id: UUID
    status: MembershipStatus
    created_at: datetime
    accepted_at: Optional[datetime] = None
    accepted_by_id: Optional[UUID] = None
    rejected_at: Optional[datetime] = None
    rejected_by_id: Optional[UUID] = None
    rejection_reason: Optional[str] = None

    @classmethod
    def request(cls, organization_id: UUID, user_id: UUID) -> Membership:
        return cls(
            organization_id=organization_id,
            user_id=user_id,
            status=MembershipStatus.PENDING,
            created_at=datetime.now(UTC),
        )

    @property
    def is_pending(self) -> bool:
        return self.status == MembershipStatus.PENDING

    def accept(self, admin_id: UUID) -> Result[None]:
        if not self.is_pending:
            return Result.fail(MembershipDomainCode.NOT_PENDING)
        self.status = MembershipStatus.ACCEPTED
        self.accepted_at = datetime.now(UTC)
        self.accepted_by_id = admin_id
        return Result.ok()

    def reject(self, admin_id: UUID, reason: Optional[str] = None) -> Result[None]:
        if not self.is_pending:
            return Result.fail(MembershipDomainCode.NOT_PENDING)
        reason = reason.strip() if reason else None
        if reason and len(reason) > REJECTION_REASON_MAX_LENGTH:
            return Result.fail(MembershipDomainCode.REJECTION_REASON_TOO_LONG)
        self.status = MembershipStatus.REJECTED
        self.rejected_at = datetime.now(UTC)
        self.rejected_by_id = admin_id
        self.rejection_reason = reason or None
        return Result.ok()
