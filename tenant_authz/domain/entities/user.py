"""
User Entity

Represents a person known through an external identity provider.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from tenant_authz.domain.base import utcnow

from .enums import GlobalRole

if TYPE_CHECKING:
    from .membership import Membership


class User(SQLModel, table=True):
    """
    User entity - a person who can belong to multiple accounts.

    Business Rules:
    - external_id (identity provider subject) is unique
    - Created on first sight of an unknown external identity
    - global_role is authoritative here only in the local environment
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    external_id: str = Field(unique=True, index=True, max_length=191)
    email: Optional[str] = Field(default=None, max_length=255)

    global_role: GlobalRole = Field(default=GlobalRole.user)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Relationships
    memberships: list["Membership"] = Relationship(back_populates="user")

    __table_args__ = (Index("idx_user_global_role", "global_role"),)
