"""Error codes returned by the organization use cases.

Values are opaque dot-delimited keys; the presentation layer owns their
translation.
"""
from enum import Enum


class OrganizationError(str, Enum):
    """Failure codes of organization, membership and join-parent use cases."""

    # General
    NOT_FOUND = "organization.errors.notFound"
    ARCHIVED = "organization.errors.archived"
    NAME_EXISTS = "organization.errors.nameExists"

    # Membership
    ALREADY_MEMBER = "organization.errors.alreadyMember"
    PENDING_REQUEST = "organization.errors.pendingRequest"
    REJECTED_REQUEST = "organization.errors.rejectedRequest"
    PENDING_HIERARCHY_REQUEST = "organization.errors.pendingHierarchyRequest"

    # Create
    PARENT_NOT_FOUND = "organization.errors.parentNotFound"
    PARENT_ARCHIVED = "organization.errors.parentArchived"

    # Authorization
    NOT_ADMIN = "organization.errors.notAdmin"
    REQUEST_NOT_FOUND = "organization.errors.requestNotFound"
    NOT_PENDING = "organization.errors.notPending"

    # Join-parent requests
    CHILD_ORG_NOT_FOUND = "organization.errors.childOrgNotFound"
    CHILD_ORG_ARCHIVED = "organization.errors.childOrgArchived"
    SAME_ORGANIZATION = "organization.errors.sameOrganization"
    PENDING_PARENT_REQUEST = "organization.errors.pendingParentRequest"
    CANNOT_JOIN_OWN_DESCENDANT = "organization.errors.cannotJoinOwnDescendant"
    PARENT_REQUEST_NOT_FOUND = "organization.errors.parentRequestNotFound"
    PARENT_REQUEST_NOT_PENDING = "organization.errors.parentRequestNotPending"
    REJECTION_REASON_REQUIRED = "organization.errors.rejectionReasonRequired"
