"""Entity-level validation codes.

Values are opaque keys translated by the presentation layer.
"""

from enum import Enum


class OrganizationDomainCode(str, Enum):
    NAME_EMPTY = "domain.organization.organizationNameEmpty"
    NAME_TOO_LONG = "domain.organization.organizationNameTooLong"
    DESCRIPTION_EMPTY = "domain.organization.organizationDescriptionEmpty"
    DESCRIPTION_TOO_LONG = "domain.organization.organizationDescriptionTooLong"
    ALREADY_ARCHIVED = "domain.organization.organizationAlreadyArchived"


class JoinParentRequestDomainCode(str, Enum):
    MESSAGE_EMPTY = "domain.joinParentRequest.messageEmpty"
    MESSAGE_TOO_LONG = "domain.joinParentRequest.messageTooLong"
    NOT_PENDING = "domain.joinParentRequest.notPending"
    REJECTION_REASON_REQUIRED = "domain.joinParentRequest.rejectionReasonRequired"
    REJECTION_REASON_TOO_LONG = "domain.joinParentRequest.rejectionReasonTooLong"


class MembershipDomainCode(str, Enum):
    NOT_PENDING = "domain.membership.notPending"
    REJECTION_REASON_TOO_LONG = "domain.membership.rejectionReasonTooLong"
