"""Membership API endpoints: users joining organizations."""
from uuid import UUID

from fastapi import APIRouter, Depends, status

from orgtree.api.deps import get_current_user_id, get_membership_service
from orgtree.api.errors import unwrap
from orgtree.schemas.errors import ErrorResponse
from orgtree.schemas.membership import (
    HandleJoinRequestRequest,
    MembershipResponse,
    UserOrganizationsResponse,
)
from orgtree.services.membership_service import MembershipService

router = APIRouter()


@router.post(
    "/organizations/{org_id}/join",
    response_model=MembershipResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request to join an organization",
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def join_organization(
    org_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: MembershipService = Depends(get_membership_service),
) -> MembershipResponse:
    """Create a pending membership request for the caller.

    Raises:
        HTTPException: 404 if organization not found
        HTTPException: 409 if archived, already requested, or the caller has a
            pending request elsewhere in the same hierarchy
    """
    result = await service.join_organization(user_id, org_id)
    return MembershipResponse.model_validate(unwrap(result))


@router.delete(
    "/organizations/{org_id}/join",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel own pending join request",
)
async def cancel_join_request(
    org_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: MembershipService = Depends(get_membership_service),
) -> None:
    unwrap(await service.cancel_join_request(user_id, org_id))


@router.get(
    "/organizations/{org_id}/pending-members",
    response_model=list[MembershipResponse],
    summary="List pending membership requests (admin only)",
)
async def get_pending_members(
    org_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: MembershipService = Depends(get_membership_service),
) -> list[MembershipResponse]:
    result = await service.get_organization_pending_requests(user_id, org_id)
    return [MembershipResponse.model_validate(m) for m in unwrap(result)]


@router.post(
    "/organizations/{org_id}/members/{member_user_id}/handle",
    response_model=MembershipResponse,
    summary="Accept or reject a membership request (admin only)",
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def handle_join_request(
    org_id: UUID,
    member_user_id: UUID,
    request: HandleJoinRequestRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: MembershipService = Depends(get_membership_service),
) -> MembershipResponse:
    result = await service.handle_join_request(
        admin_id=user_id,
        organization_id=org_id,
        user_id=member_user_id,
        action=request.action,
        rejection_reason=request.rejection_reason,
    )
    return MembershipResponse.model_validate(unwrap(result))


@router.get(
    "/me/organizations",
    response_model=UserOrganizationsResponse,
    summary="The caller's memberships grouped by status",
)
async def get_my_organizations(
    user_id: UUID = Depends(get_current_user_id),
    service: MembershipService = Depends(get_membership_service),
) -> UserOrganizationsResponse:
    result = await service.get_user_organizations(user_id)
    return UserOrganizationsResponse.model_validate(unwrap(result))
