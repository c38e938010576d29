"""
Project Entity

Tenant-scoped container for sessions, administered through project
permissions.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_authz.domain.base import utcnow

from .enums import ProjectStatus


class Project(SQLModel, table=True):
    """
    Project entity.

    Business Rules:
    - Belongs to exactly one account
    - The creator is granted full_access as part of creation
    - Deletion removes permissions, then sessions, then the project row
    """

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    account_id: UUID = Field(foreign_key="accounts.id", nullable=False, index=True)

    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None)
    status: ProjectStatus = Field(default=ProjectStatus.active)

    created_by: UUID = Field(foreign_key="users.id", nullable=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_project_account_created", "account_id", "created_at"),)
