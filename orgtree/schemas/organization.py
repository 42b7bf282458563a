"""Pydantic schemas for organization endpoints.

Name and description limits are enforced by the domain so that violations
come back as the same error codes every other caller sees.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateOrganizationRequest(BaseModel):
    """Request schema for POST /organizations.

    Without ``parent_id`` the organization becomes a new root; with one, the
    caller must be an admin of that parent (or a superadmin).
    """

    name: str = Field(..., description="Organization display name, unique platform-wide")
    description: str = Field(..., description="What the organization is about")
    parent_id: UUID | None = Field(None, description="Optional parent organization")


class OrganizationSummaryResponse(BaseModel):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class OrganizationResponse(BaseModel):
    """Response schema for a single organization."""

    id: UUID = Field(..., description="Organization unique identifier")
    name: str = Field(..., description="Organization display name")
    description: str = Field(..., description="Organization description")
    parent_id: UUID | None = Field(None, description="Parent organization, if attached")
    created_by_id: UUID = Field(..., description="User who created the organization")
    created_at: datetime = Field(..., description="Creation timestamp")
    archived_at: datetime | None = Field(None, description="Set once the organization is archived")

    model_config = ConfigDict(from_attributes=True)


class OrganizationListItemResponse(BaseModel):
    organization: OrganizationResponse
    member_count: int
    parent: OrganizationSummaryResponse | None = None

    model_config = ConfigDict(from_attributes=True)


class OrganizationDetailsResponse(BaseModel):
    """Organization plus the caller's standing in it."""

    organization: OrganizationResponse
    parent: OrganizationSummaryResponse | None = None
    member_count: int
    is_user_member: bool = Field(
        ..., description="Accepted member of the organization or one of its descendants"
    )
    is_user_admin: bool

    model_config = ConfigDict(from_attributes=True)


class HierarchyNodeResponse(BaseModel):
    id: UUID
    name: str
    member_count: int
    children: list[HierarchyNodeResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class HierarchyAncestorResponse(BaseModel):
    id: UUID
    name: str
    member_count: int

    model_config = ConfigDict(from_attributes=True)


class HierarchyResponse(BaseModel):
    """Ancestors ordered [parent, grandparent, ...] and the tree from the root."""

    organization_id: UUID
    ancestors: list[HierarchyAncestorResponse]
    tree: HierarchyNodeResponse

    model_config = ConfigDict(from_attributes=True)
