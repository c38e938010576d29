"""
Account Entity

The tenant boundary. Every tenant-scoped entity is reachable only
through an account.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from tenant_authz.domain.base import utcnow

from .enums import AccountStatus

if TYPE_CHECKING:
    from .membership import Membership


class Account(SQLModel, table=True):
    """
    Account entity - isolated workspace (tenant).

    Business Rules:
    - Row-level isolation policies filter by the session account id
    - parent_org_id is optional; accounts may stand alone
    """

    __tablename__ = "accounts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    plan: str = Field(default="Free", max_length=50)
    status: AccountStatus = Field(default=AccountStatus.active)

    parent_org_id: Optional[UUID] = Field(default=None, index=True)
    owner_user_id: Optional[UUID] = Field(default=None, foreign_key="users.id")

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    # Relationships
    memberships: list["Membership"] = Relationship(back_populates="account")

    __table_args__ = (Index("idx_account_status", "status"),)
