"""Organization entity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Optional
from uuid import UUID

from orgtree.core.result import Result
from orgtree.domain.codes import OrganizationDomainCode

NAME_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 2000


@dataclass
class Organization:
    """A node in the organization forest.

    Build through ``create`` for fresh input (validated, timestamped, no id
    until storage assigns one) or ``reconstitute`` for rows already persisted.
    ``parent_id`` is only ever changed by storage when a join-parent request
    is accepted.
    """

    id: Optional[UUID]
    name: str
    description: str
    parent_id: Optional[UUID]
    created_by_id: UUID
    created_at: datetime
    archived_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        created_by_id: UUID,
        parent_id: Optional[UUID] = None,
    ) -> Result[Organization]:
        name = (name or "").strip()
        description = (description or "").strip()

        if not name:
            return Result.fail(OrganizationDomainCode.NAME_EMPTY)
        if len(name) > NAME_MAX_LENGTH:
            return Result.fail(OrganizationDomainCode.NAME_TOO_LONG)
        if not description:
            return Result.fail(OrganizationDomainCode.DESCRIPTION_EMPTY)
        if len(description) > DESCRIPTION_MAX_LENGTH:
            return Result.fail(OrganizationDomainCode.DESCRIPTION_TOO_LONG)

        return Result.ok(
            cls(
                id=None,
                name=name,
                description=description,
                parent_id=parent_id,
                created_by_id=created_by_id,
                created_at=datetime.now(UTC),
            )
        )

    @classmethod
    def reconstitute(
        cls,
        *,
        id: UUID,
        name: str,
        description: str,
        parent_id: Optional[UUID],
        created_by_id: UUID,
        created_at: datetime,
        archived_at: Optional[datetime],
    ) -> Organization:
        return cls(
            id=id,
            name=name,
            description=description,
            parent_id=parent_id,
            created_by_id=created_by_id,
            created_at=created_at,
            archived_at=archived_at,
        )

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None

    def archive(self) -> Result[None]:
        """Soft-delete the organization; existing relationships stay valid."""
        if self.is_archived:
            return Result.fail(OrganizationDomainCode.ALREADY_ARCHIVED)
        self.archived_at = datetime.now(UTC)
        return Result.ok()
