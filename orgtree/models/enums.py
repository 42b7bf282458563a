"""Enumerations shared by the ORM tables, entities and schemas."""

from enum import Enum


class JoinParentRequestStatus(str, Enum):
    """Lifecycle of a child organization's request to attach under a parent.

    ``pending`` is the only non-terminal state; ``accepted`` and ``rejected``
    are final.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class MembershipStatus(str, Enum):
    """Status of a user's membership row in an organization."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class HandleAction(str, Enum):
    """Decision taken by an admin on a pending request."""

    ACCEPT = "accept"
    REJECT = "reject"


class NotificationType(str, Enum):
    JOIN_PARENT_REQUEST_RECEIVED = "join_parent_request_received"
    ORG_JOINED_PARENT = "org_joined_parent"
