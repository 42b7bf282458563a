"""Organization API endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from orgtree.api.deps import get_current_user_id, get_organization_service
from orgtree.api.errors import unwrap
from orgtree.schemas.errors import ErrorResponse
from orgtree.schemas.organization import (
    CreateOrganizationRequest,
    HierarchyResponse,
    OrganizationDetailsResponse,
    OrganizationListItemResponse,
    OrganizationResponse,
)
from orgtree.services.organization_service import OrganizationService

router = APIRouter()


@router.post(
    "",
    response_model=OrganizationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create organization",
    responses={403: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_organization(
    request: CreateOrganizationRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: OrganizationService = Depends(get_organization_service),
) -> OrganizationResponse:
    """Create an organization; the caller becomes its admin.

    Raises:
        HTTPException: 404 if the parent does not exist
        HTTPException: 403 if the caller may not create under the parent
        HTTPException: 409 if the name is taken or the parent is archived
        HTTPException: 422 if name or description are invalid
    """
    result = await service.create_organization(
        user_id=user_id,
        name=request.name,
        description=request.description,
        parent_id=request.parent_id,
    )
    return OrganizationResponse.model_validate(unwrap(result))


@router.get(
    "",
    response_model=list[OrganizationListItemResponse],
    summary="List active organizations",
)
async def list_organizations(
    exclude_mine: bool = Query(
        False, description="Hide organizations the caller is a member of or pending at"
    ),
    user_id: UUID = Depends(get_current_user_id),
    service: OrganizationService = Depends(get_organization_service),
) -> list[OrganizationListItemResponse]:
    result = await service.list_organizations(exclude_user_id=user_id if exclude_mine else None)
    return [OrganizationListItemResponse.model_validate(item) for item in unwrap(result)]


@router.get(
    "/admin",
    response_model=list[OrganizationResponse],
    summary="Organizations the caller administers",
)
async def get_admin_organizations(
    user_id: UUID = Depends(get_current_user_id),
    service: OrganizationService = Depends(get_organization_service),
) -> list[OrganizationResponse]:
    result = await service.get_admin_organizations(user_id)
    return [OrganizationResponse.model_validate(org) for org in unwrap(result)]


@router.get(
    "/{org_id}",
    response_model=OrganizationDetailsResponse,
    summary="Get organization details",
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def get_organization(
    org_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: OrganizationService = Depends(get_organization_service),
) -> OrganizationDetailsResponse:
    result = await service.get_organization_details(org_id, user_id=user_id)
    return OrganizationDetailsResponse.model_validate(unwrap(result))


@router.get(
    "/{org_id}/hierarchy",
    response_model=HierarchyResponse,
    summary="Get the hierarchy an organization belongs to",
    responses={404: {"model": ErrorResponse}},
)
async def get_hierarchy(
    org_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: OrganizationService = Depends(get_organization_service),
) -> HierarchyResponse:
    result = await service.get_hierarchy_tree(org_id)
    return HierarchyResponse.model_validate(unwrap(result))


@router.post(
    "/{org_id}/archive",
    response_model=OrganizationResponse,
    summary="Archive organization (admin only)",
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def archive_organization(
    org_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: OrganizationService = Depends(get_organization_service),
) -> OrganizationResponse:
    """Archive an organization.

    Raises:
        HTTPException: 404 if organization not found
        HTTPException: 403 if the caller is not an admin
        HTTPException: 409 if already archived
    """
    result = await service.archive_organization(user_id, org_id)
    return OrganizationResponse.model_validate(unwrap(result))
