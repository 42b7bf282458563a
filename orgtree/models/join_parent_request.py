"""Join-parent request table."""
from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy import Enum as SQLEnum

from orgtree.models.base import BaseModel
from orgtree.models.enums import JoinParentRequestStatus


class JoinParentRequestModel(BaseModel):
    """A child organization's proposal to attach under a parent organization.

    Pending rows are hard-deleted on cancellation; handled rows are kept as
    history.
    """

    __tablename__ = "join_parent_requests"

    child_org_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    parent_org_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    requesting_admin_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False
    )
    handling_admin_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=True
    )
    message = Column(Text, nullable=False)
    status = Column(
        SQLEnum(
            JoinParentRequestStatus,
            name="join_parent_request_status",
            native_enum=False,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
        default=JoinParentRequestStatus.PENDING
    )
    rejection_reason = Column(String(2000), nullable=True)
    handled_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        # At most one outstanding request per child organization
        Index(
            "uq_join_parent_requests_pending_child",
            "child_org_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<JoinParentRequestModel(id={self.id}, child_org_id={self.child_org_id}, "
            f"parent_org_id={self.parent_org_id}, status={self.status})>"
        )
