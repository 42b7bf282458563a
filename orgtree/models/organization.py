"""Organization, admin and membership tables."""
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import relationship

from orgtree.models.base import Base, BaseModel
from orgtree.models.enums import MembershipStatus


class OrganizationModel(BaseModel):
    """A node of the organization forest.

    ``parent_id`` carries no cycle-freedom guarantee of its own; only an
    accepted join-parent request may change it, after re-checking descendants.
    ``archived_at`` marks a soft delete; rows are never removed.
    """

    __tablename__ = "organizations"

    name = Column(
        String(255),
        nullable=False,
        unique=True,
        index=True
    )
    description = Column(
        Text,
        nullable=False
    )
    parent_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id"),
        nullable=True,
        index=True
    )
    created_by_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False
    )
    archived_at = Column(
        DateTime(timezone=True),
        nullable=True
    )

    # Relationships
    parent = relationship(
        "OrganizationModel",
        remote_side="OrganizationModel.id",
        lazy="raise"
    )
    admins = relationship(
        "OrganizationAdminModel",
        back_populates="organization",
        lazy="raise"
    )
    members = relationship(
        "OrganizationMemberModel",
        back_populates="organization",
        lazy="raise"
    )

    __table_args__ = (
        CheckConstraint(
            "LENGTH(name) > 0",
            name="organization_name_not_empty"
        ),
        CheckConstraint(
            "LENGTH(description) > 0",
            name="organization_description_not_empty"
        ),
        CheckConstraint(
            "parent_id IS NULL OR parent_id <> id",
            name="organization_not_own_parent"
        ),
    )

    def __repr__(self) -> str:
        return f"<OrganizationModel(id={self.id}, name={self.name}, parent_id={self.parent_id})>"


class OrganizationAdminModel(Base):
    """Grants a user admin rights on one organization."""

    __tablename__ = "organization_admins"

    organization_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True
    )
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    organization = relationship("OrganizationModel", back_populates="admins", lazy="raise")

    def __repr__(self) -> str:
        return f"<OrganizationAdminModel(organization_id={self.organization_id}, user_id={self.user_id})>"


class OrganizationMemberModel(Base):
    """A user's membership row: a pending request, an accepted member, or a rejection."""

    __tablename__ = "organization_members"

    organization_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True
    )
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True
    )
    status = Column(
        SQLEnum(
            MembershipStatus,
            name="membership_status",
            native_enum=False,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
        default=MembershipStatus.PENDING
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    accepted_by_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    rejected_by_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    rejection_reason = Column(String(500), nullable=True)

    organization = relationship("OrganizationModel", back_populates="members", lazy="raise")

    __table_args__ = (
        Index("idx_organization_members_user_status", "user_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<OrganizationMemberModel(organization_id={self.organization_id}, "
            f"user_id={self.user_id}, status={self.status})>"
        )
