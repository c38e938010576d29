from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from tenant_authz.api.error import to_http_error
from tenant_authz.app.services.role_authority import RoleAuthority
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.app.use_cases.users import (
    ChangeRoleResponse,
    ChangeRoleUseCase,
    GetRoleUseCase,
    RoleResponse,
    RoleStatsResponse,
    RoleStatsUseCase,
)
from tenant_authz.depends import get_current_identity, get_role_authority, get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


class ChangeRoleRequest(BaseModel):
    role: str = Field(..., description="New global role (user/support/admin/super_admin)")
    reason: str = Field(..., min_length=1, description="Recorded in the audit log")


@router.get(
    "/users/{external_id}/role", status_code=status.HTTP_200_OK, response_model=RoleResponse
)
async def get_user_role(
    external_id: str,
    identity: dict = Depends(get_current_identity),
    role_authority: RoleAuthority = Depends(get_role_authority),
):
    use_case = GetRoleUseCase(role_authority)
    result = await use_case.execute(identity["external_id"], external_id)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.put(
    "/users/{external_id}/role",
    status_code=status.HTTP_200_OK,
    response_model=ChangeRoleResponse,
)
async def change_user_role(
    external_id: str,
    request: ChangeRoleRequest,
    identity: dict = Depends(get_current_identity),
    role_authority: RoleAuthority = Depends(get_role_authority),
):
    """
    Change a user's global role

    Raises:
        - 400 Bad Request: INVALID_ROLE
        - 403 Forbidden: INSUFFICIENT_ROLE
        - 404 Not Found: TARGET_USER_NOT_FOUND
    """
    use_case = ChangeRoleUseCase(role_authority)
    result = await use_case.execute(
        identity["external_id"], external_id, request.role, request.reason
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.get("/roles/stats", status_code=status.HTTP_200_OK, response_model=RoleStatsResponse)
async def role_stats(
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
    role_authority: RoleAuthority = Depends(get_role_authority),
):
    use_case = RoleStatsUseCase(uow, role_authority)
    result = await use_case.execute(identity["external_id"])

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
