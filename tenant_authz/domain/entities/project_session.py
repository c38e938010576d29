"""
ProjectSession Entity

A working session scheduled under a project.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from tenant_authz.domain.base import utcnow

from .enums import SessionStatus


class ProjectSession(SQLModel, table=True):
    __tablename__ = "project_sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(
        foreign_key="projects.id", nullable=False, index=True, ondelete="CASCADE"
    )

    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None)
    status: SessionStatus = Field(default=SessionStatus.planned)

    created_by: UUID = Field(foreign_key="users.id", nullable=False)
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
