"""Pydantic schemas for membership endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from orgtree.models.enums import HandleAction, MembershipStatus
from orgtree.schemas.organization import OrganizationResponse, OrganizationSummaryResponse


class HandleJoinRequestRequest(BaseModel):
    """Request schema for handling a user's pending membership request."""

    action: HandleAction
    rejection_reason: str | None = Field(None, description="Optional, at most 500 characters")


class MembershipResponse(BaseModel):
    organization_id: UUID
    user_id: UUID
    status: MembershipStatus
    created_at: datetime
    accepted_at: datetime | None = None
    accepted_by_id: UUID | None = None
    rejected_at: datetime | None = None
    rejected_by_id: UUID | None = None
    rejection_reason: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserOrganizationResponse(BaseModel):
    organization: OrganizationResponse
    membership: MembershipResponse
    parent: OrganizationSummaryResponse | None = None
    since: datetime = Field(..., description="When the membership reached its current status")

    model_config = ConfigDict(from_attributes=True)


class UserOrganizationsResponse(BaseModel):
    member: list[UserOrganizationResponse]
    pending: list[UserOrganizationResponse]
    rejected: list[UserOrganizationResponse]

    model_config = ConfigDict(from_attributes=True)
