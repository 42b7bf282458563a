"""Translate failed use-case results into HTTP errors."""
from typing import TypeVar

from fastapi import HTTPException, status

from orgtree.core.result import Result
from orgtree.domain.codes import (
    JoinParentRequestDomainCode,
    MembershipDomainCode,
    OrganizationDomainCode,
)
from orgtree.services.errors import OrganizationError

T = TypeVar("T")

_NOT_FOUND = {
    code.value
    for code in (
        OrganizationError.NOT_FOUND,
        OrganizationError.PARENT_NOT_FOUND,
        OrganizationError.CHILD_ORG_NOT_FOUND,
        OrganizationError.REQUEST_NOT_FOUND,
        OrganizationError.PARENT_REQUEST_NOT_FOUND,
    )
}

_UNPROCESSABLE = {
    code.value
    for code in (
        OrganizationDomainCode.NAME_EMPTY,
        OrganizationDomainCode.NAME_TOO_LONG,
        OrganizationDomainCode.DESCRIPTION_EMPTY,
        OrganizationDomainCode.DESCRIPTION_TOO_LONG,
        JoinParentRequestDomainCode.MESSAGE_EMPTY,
        JoinParentRequestDomainCode.MESSAGE_TOO_LONG,
        JoinParentRequestDomainCode.REJECTION_REASON_REQUIRED,
        JoinParentRequestDomainCode.REJECTION_REASON_TOO_LONG,
        MembershipDomainCode.REJECTION_REASON_TOO_LONG,
        OrganizationError.REJECTION_REASON_REQUIRED,
        OrganizationError.SAME_ORGANIZATION,
    )
}

_MESSAGES = {
    OrganizationError.NOT_FOUND: "Organization not found",
    OrganizationError.ARCHIVED: "Organization is archived",
    OrganizationError.NAME_EXISTS: "An organization with this name already exists",
    OrganizationError.ALREADY_MEMBER: "You are already a member of this organization",
    OrganizationError.PENDING_REQUEST: "You already have a pending request for this organization",
    OrganizationError.REJECTED_REQUEST: "Your request for this organization was rejected",
    OrganizationError.PENDING_HIERARCHY_REQUEST: (
        "You already have a pending request elsewhere in this organization's hierarchy"
    ),
    OrganizationError.PARENT_NOT_FOUND: "Parent organization not found",
    OrganizationError.PARENT_ARCHIVED: "Parent organization is archived",
    OrganizationError.NOT_ADMIN: "You must be an admin of this organization",
    OrganizationError.REQUEST_NOT_FOUND: "Membership request not found",
    OrganizationError.NOT_PENDING: "Membership request is not pending",
    OrganizationError.CHILD_ORG_NOT_FOUND: "Child organization not found",
    OrganizationError.CHILD_ORG_ARCHIVED: "Child organization is archived",
    OrganizationError.SAME_ORGANIZATION: "An organization cannot be its own parent",
    OrganizationError.PENDING_PARENT_REQUEST: (
        "This organization already has a pending parent request"
    ),
    OrganizationError.CANNOT_JOIN_OWN_DESCENDANT: (
        "An organization cannot join one of its own descendants"
    ),
    OrganizationError.PARENT_REQUEST_NOT_FOUND: "Join-parent request not found",
    OrganizationError.PARENT_REQUEST_NOT_PENDING: "Join-parent request is not pending",
    OrganizationError.REJECTION_REASON_REQUIRED: "A rejection reason is required",
    OrganizationDomainCode.NAME_EMPTY: "Organization name cannot be empty",
    OrganizationDomainCode.NAME_TOO_LONG: "Organization name is too long",
    OrganizationDomainCode.DESCRIPTION_EMPTY: "Organization description cannot be empty",
    OrganizationDomainCode.DESCRIPTION_TOO_LONG: "Organization description is too long",
    OrganizationDomainCode.ALREADY_ARCHIVED: "Organization is already archived",
    JoinParentRequestDomainCode.MESSAGE_EMPTY: "Message cannot be empty",
    JoinParentRequestDomainCode.MESSAGE_TOO_LONG: "Message is too long",
    JoinParentRequestDomainCode.NOT_PENDING: "Join-parent request is not pending",
    JoinParentRequestDomainCode.REJECTION_REASON_REQUIRED: "A rejection reason is required",
    JoinParentRequestDomainCode.REJECTION_REASON_TOO_LONG: "Rejection reason is too long",
    MembershipDomainCode.NOT_PENDING: "Membership request is not pending",
    MembershipDomainCode.REJECTION_REASON_TOO_LONG: "Rejection reason is too long",
}

MESSAGES = {code.value: message for code, message in _MESSAGES.items()}


def status_for(code: str) -> int:
    if code in _NOT_FOUND:
        return status.HTTP_404_NOT_FOUND
    if code == OrganizationError.NOT_ADMIN.value:
        return status.HTTP_403_FORBIDDEN
    if code in _UNPROCESSABLE:
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return status.HTTP_409_CONFLICT


def unwrap(result: Result[T]) -> T:
    """Return the value of a successful result or raise the matching HTTPException.

    Raises:
        HTTPException: 404, 403, 422 or 409 with ``{"error", "message"}`` detail
    """
    if result.success:
        return result.value

    code = getattr(result.error, "value", result.error)
    raise HTTPException(
        status_code=status_for(code),
        detail={"error": code, "message": MESSAGES.get(code, "Request failed")},
    )
