"""
Membership Entity

Links User to Account with a role.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from tenant_authz.domain.base import utcnow

from .enums import MembershipRole

if TYPE_CHECKING:
    from .user import User
    from .account import Account


class Membership(SQLModel, table=True):
    """
    Membership entity - links User to Account with a role.

    Business Rules:
    - (account_id, user_id) must be unique
    - A user can act within an account only if a membership row exists
    - Deleted on removal (no soft delete)
    """

    __tablename__ = "memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True, ondelete="CASCADE")
    account_id: UUID = Field(
        foreign_key="accounts.id", nullable=False, index=True, ondelete="CASCADE"
    )

    role: MembershipRole = Field(nullable=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    # Relationships
    user: "User" = Relationship(back_populates="memberships")
    account: "Account" = Relationship(back_populates="memberships")

    __table_args__ = (
        Index("idx_membership_user_account", "user_id", "account_id", unique=True),
    )
