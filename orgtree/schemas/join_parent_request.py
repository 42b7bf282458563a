"""Pydantic schemas for join-parent request endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from orgtree.models.enums import HandleAction, JoinParentRequestStatus


class CreateJoinParentRequestRequest(BaseModel):
    """Request schema for POST /join-parent-requests."""

    child_org_id: UUID = Field(..., description="Organization asking for a parent")
    parent_org_id: UUID = Field(..., description="Proposed parent organization")
    message: str = Field(..., description="Motivation shown to the parent's admins")


class HandleJoinParentRequestRequest(BaseModel):
    """Request schema for POST /join-parent-requests/{request_id}/handle.

    ``rejection_reason`` is required when ``action`` is ``reject``.
    """

    action: HandleAction
    rejection_reason: str | None = None


class JoinParentRequestResponse(BaseModel):
    id: UUID
    child_org_id: UUID
    parent_org_id: UUID
    requesting_admin_id: UUID
    handling_admin_id: UUID | None = None
    message: str
    status: JoinParentRequestStatus
    rejection_reason: str | None = None
    created_at: datetime
    handled_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class JoinParentRequestsOverviewResponse(BaseModel):
    """Requests an organization received (incoming) and filed (outgoing)."""

    incoming: list[JoinParentRequestResponse]
    outgoing: list[JoinParentRequestResponse]

    model_config = ConfigDict(from_attributes=True)
