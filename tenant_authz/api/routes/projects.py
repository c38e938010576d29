from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from tenant_authz.api.error import to_http_error
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.app.use_cases.projects import (
    CreateProjectUseCase,
    DeleteProjectResponse,
    DeleteProjectUseCase,
    GetProjectUseCase,
    GrantPermissionUseCase,
    ListPermissionsUseCase,
    ListProjectsUseCase,
    PermissionResponse,
    ProjectListResponse,
    ProjectResponse,
    RevokePermissionResponse,
    RevokePermissionUseCase,
    UpdateProjectUseCase,
)
from tenant_authz.depends import get_current_identity, get_unit_of_work, require_tenant_context

# Every project route runs with the caller's account bound to the transaction
router = APIRouter(
    prefix="/projects",
    tags=["Projects"],
    dependencies=[Depends(require_tenant_context)],
)


class CreateProjectRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: str = Field("active", description="active or archived")


class UpdateProjectRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[str] = None


class GrantPermissionRequest(BaseModel):
    user_id: UUID
    permission_level: str = Field(
        ..., description="read, read_notes, read_write or full_access"
    )
    expires_at: Optional[datetime] = None


@router.get("", status_code=status.HTTP_200_OK, response_model=ProjectListResponse)
async def list_projects(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
):
    use_case = ListProjectsUseCase(uow)
    result = await use_case.execute(identity["external_id"], limit=limit, offset=offset)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ProjectResponse)
async def create_project(
    request: CreateProjectRequest,
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
):
    """Create a project in the bound account; the creator gets full_access"""
    use_case = CreateProjectUseCase(uow)
    result = await use_case.execute(
        identity["external_id"], request.name, request.description, request.status
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.get("/{project_id}", status_code=status.HTTP_200_OK, response_model=ProjectResponse)
async def get_project(
    project_id: UUID,
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
):
    """
    Raises:
        - 403 Forbidden: no unexpired grant on the project
        - 404 Not Found: PROJECT_NOT_FOUND (also for other accounts' projects)
    """
    use_case = GetProjectUseCase(uow)
    result = await use_case.execute(identity["external_id"], project_id)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.patch("/{project_id}", status_code=status.HTTP_200_OK, response_model=ProjectResponse)
async def update_project(
    project_id: UUID,
    request: UpdateProjectRequest,
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
):
    use_case = UpdateProjectUseCase(uow)
    result = await use_case.execute(
        identity["external_id"],
        project_id,
        name=request.name,
        description=request.description,
        status=request.status,
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.delete(
    "/{project_id}", status_code=status.HTTP_200_OK, response_model=DeleteProjectResponse
)
async def delete_project(
    project_id: UUID,
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
):
    use_case = DeleteProjectUseCase(uow)
    result = await use_case.execute(identity["external_id"], project_id)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.get(
    "/{project_id}/permissions",
    status_code=status.HTTP_200_OK,
    response_model=List[PermissionResponse],
)
async def list_permissions(
    project_id: UUID,
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
):
    use_case = ListPermissionsUseCase(uow)
    result = await use_case.execute(identity["external_id"], project_id)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post(
    "/{project_id}/permissions",
    status_code=status.HTTP_200_OK,
    response_model=PermissionResponse,
)
async def grant_permission(
    project_id: UUID,
    request: GrantPermissionRequest,
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
):
    """
    Grant or overwrite a user's permission on the project

    Raises:
        - 400 Bad Request: INVALID_PERMISSION_LEVEL
        - 403 Forbidden: caller lacks full_access
        - 404 Not Found: PROJECT_NOT_FOUND, TARGET_USER_NOT_FOUND
    """
    use_case = GrantPermissionUseCase(uow)
    result = await use_case.execute(
        identity["external_id"],
        project_id,
        request.user_id,
        request.permission_level,
        request.expires_at,
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.delete(
    "/{project_id}/permissions/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokePermissionResponse,
)
async def revoke_permission(
    project_id: UUID,
    user_id: UUID,
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
):
    use_case = RevokePermissionUseCase(uow)
    result = await use_case.execute(identity["external_id"], project_id, user_id)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
