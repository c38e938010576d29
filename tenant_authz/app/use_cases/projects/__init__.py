"""
Project Use Cases

Project workflow on top of the project permission engine.
"""

from .create_project_use_case import CreateProjectUseCase
from .delete_project_use_case import DeleteProjectUseCase
from .dtos import (
    DeleteProjectResponse,
    PermissionResponse,
    ProjectListResponse,
    ProjectResponse,
    RevokePermissionResponse,
)
from .get_project_use_case import GetProjectUseCase, ListProjectsUseCase
from .manage_permissions_use_case import (
    GrantPermissionUseCase,
    ListPermissionsUseCase,
    RevokePermissionUseCase,
)
from .update_project_use_case import UpdateProjectUseCase

__all__ = [
    "CreateProjectUseCase",
    "DeleteProjectUseCase",
    "GetProjectUseCase",
    "GrantPermissionUseCase",
    "ListPermissionsUseCase",
    "ListProjectsUseCase",
    "RevokePermissionUseCase",
    "UpdateProjectUseCase",
    "DeleteProjectResponse",
    "PermissionResponse",
    "ProjectListResponse",
    "ProjectResponse",
    "RevokePermissionResponse",
]
