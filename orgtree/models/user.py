"""User model."""
from sqlalchemy import Boolean, Column, String

from orgtree.models.base import BaseModel


class UserModel(BaseModel):
    """A platform user as far as the organization hierarchy is concerned.

    Identity and credentials live with the identity provider; this table only
    keeps what authorization needs. ``is_superadmin`` is the platform-wide
    flag that bypasses all organization-specific admin checks.
    """

    __tablename__ = "users"

    display_name = Column(
        String(255),
        nullable=False
    )
    is_superadmin = Column(
        Boolean,
        nullable=False,
        default=False
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, display_name={self.display_name}, is_superadmin={self.is_superadmin})>"
