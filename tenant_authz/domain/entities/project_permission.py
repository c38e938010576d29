"""
ProjectPermission Entity

Per-project, per-user permission grant with optional expiry.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_authz.domain.base import utcnow

from .enums import PermissionLevel


class ProjectPermission(SQLModel, table=True):
    """
    ProjectPermission entity.

    Business Rules:
    - (project_id, user_id) is unique; re-granting overwrites
    - An expired grant is treated as absent at read time
    - Deleted with its project
    """

    __tablename__ = "project_permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    project_id: UUID = Field(
        foreign_key="projects.id", nullable=False, index=True, ondelete="CASCADE"
    )
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True, ondelete="CASCADE")

    permission_level: PermissionLevel = Field(nullable=False)
    granted_by: UUID = Field(foreign_key="users.id", nullable=False)

    granted_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_project_permission_project_user", "project_id", "user_id", unique=True),
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or utcnow())
