"""
Project Use Case DTOs (Data Transfer Objects)
"""

from typing import List, Optional

from pydantic import BaseModel

from tenant_authz.domain.entities import Project, ProjectPermission


class PermissionResponse(BaseModel):
    user_id: str
    permission_level: str
    granted_by: str
    granted_at: str
    expires_at: Optional[str]

    @classmethod
    def from_entity(cls, permission: ProjectPermission) -> "PermissionResponse":
        return cls(
            user_id=str(permission.user_id),
            permission_level=permission.permission_level.value,
            granted_by=str(permission.granted_by),
            granted_at=permission.granted_at.isoformat(),
            expires_at=permission.expires_at.isoformat() if permission.expires_at else None,
        )


class ProjectResponse(BaseModel):
    id: str
    account_id: str
    name: str
    description: Optional[str]
    status: str
    created_by: str
    created_at: str
    updated_at: str
    permissions: List[PermissionResponse]
    sessions_count: int


class ProjectListResponse(BaseModel):
    projects: List[ProjectResponse]
    limit: int
    offset: int


class DeleteProjectResponse(BaseModel):
    status: str


class RevokePermissionResponse(BaseModel):
    status: str


def build_project_response(
    project: Project, permissions: List[ProjectPermission], sessions_count: int
) -> ProjectResponse:
    return ProjectResponse(
        id=str(project.id),
        account_id=str(project.account_id),
        name=project.name,
        description=project.description,
        status=project.status.value,
        created_by=str(project.created_by),
        created_at=project.created_at.isoformat(),
        updated_at=project.updated_at.isoformat(),
        permissions=[PermissionResponse.from_entity(p) for p in permissions],
        sessions_count=sessions_count,
    )
