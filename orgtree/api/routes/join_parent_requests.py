"""Join-parent request API endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, status

from orgtree.api.deps import get_current_user_id, get_join_parent_request_service
from orgtree.api.errors import unwrap
from orgtree.schemas.errors import ErrorResponse
from orgtree.schemas.join_parent_request import (
    CreateJoinParentRequestRequest,
    HandleJoinParentRequestRequest,
    JoinParentRequestResponse,
    JoinParentRequestsOverviewResponse,
)
from orgtree.services.join_parent_request_service import JoinParentRequestService

router = APIRouter()


@router.post(
    "/join-parent-requests",
    response_model=JoinParentRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request that an organization join a parent",
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def request_join_parent(
    request: CreateJoinParentRequestRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: JoinParentRequestService = Depends(get_join_parent_request_service),
) -> JoinParentRequestResponse:
    """File a join-parent request as an admin of the child organization.

    Raises:
        HTTPException: 403 if the caller is not an admin of the child
        HTTPException: 404 if either organization does not exist
        HTTPException: 409 if archived, already pending, or the parent is a
            descendant of the child
        HTTPException: 422 if the message is invalid or child equals parent
    """
    result = await service.request_join_parent(
        user_id=user_id,
        child_org_id=request.child_org_id,
        parent_org_id=request.parent_org_id,
        message=request.message,
    )
    return JoinParentRequestResponse.model_validate(unwrap(result))


@router.post(
    "/join-parent-requests/{request_id}/handle",
    response_model=JoinParentRequestResponse,
    summary="Accept or reject a join-parent request (parent admin only)",
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def handle_join_parent_request(
    request_id: UUID,
    request: HandleJoinParentRequestRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: JoinParentRequestService = Depends(get_join_parent_request_service),
) -> JoinParentRequestResponse:
    result = await service.handle_join_parent_request(
        user_id=user_id,
        request_id=request_id,
        action=request.action,
        rejection_reason=request.rejection_reason,
    )
    return JoinParentRequestResponse.model_validate(unwrap(result))


@router.delete(
    "/join-parent-requests/{request_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel a pending join-parent request (child admin only)",
)
async def cancel_join_parent_request(
    request_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: JoinParentRequestService = Depends(get_join_parent_request_service),
) -> None:
    unwrap(await service.cancel_join_parent_request(user_id, request_id))


@router.get(
    "/organizations/{org_id}/join-parent-requests",
    response_model=JoinParentRequestsOverviewResponse,
    summary="All join-parent requests of an organization (admin only)",
)
async def get_all_join_parent_requests(
    org_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: JoinParentRequestService = Depends(get_join_parent_request_service),
) -> JoinParentRequestsOverviewResponse:
    result = await service.get_all_join_parent_requests(user_id, org_id)
    return JoinParentRequestsOverviewResponse.model_validate(unwrap(result))


@router.get(
    "/organizations/{org_id}/join-parent-requests/incoming",
    response_model=list[JoinParentRequestResponse],
    summary="Pending requests to join this organization (admin only)",
)
async def get_incoming_join_parent_requests(
    org_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: JoinParentRequestService = Depends(get_join_parent_request_service),
) -> list[JoinParentRequestResponse]:
    result = await service.get_incoming_join_parent_requests(user_id, org_id)
    return [JoinParentRequestResponse.model_validate(r) for r in unwrap(result)]


@router.get(
    "/organizations/{org_id}/join-parent-requests/pending",
    response_model=JoinParentRequestResponse | None,
    summary="This organization's own pending parent request, if any (admin only)",
)
async def get_child_org_join_parent_request(
    org_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: JoinParentRequestService = Depends(get_join_parent_request_service),
) -> JoinParentRequestResponse | None:
    request = unwrap(await service.get_child_org_join_parent_request(user_id, org_id))
    if request is None:
        return None
    return JoinParentRequestResponse.model_validate(request)
