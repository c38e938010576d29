from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from tenant_authz.api.error import to_http_error
from tenant_authz.app.services.role_authority import RoleAuthority
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.app.use_cases.accounts import SwitchAccountResponse, SwitchAccountUseCase
from tenant_authz.app.use_cases.users import LoadContextResponse, LoadContextUseCase
from tenant_authz.depends import get_current_identity, get_role_authority, get_unit_of_work

router = APIRouter(tags=["User"])


class SwitchContextRequest(BaseModel):
    """PUT /me/context request payload"""

    account_id: UUID = Field(..., description="Account to act in")
    context_data: Optional[Dict[str, Any]] = Field(
        None, description="Merged into the stored context payload"
    )


@router.get("/me", status_code=status.HTTP_200_OK, response_model=LoadContextResponse)
async def get_me(
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
    role_authority: RoleAuthority = Depends(get_role_authority),
):
    """
    Load Current User & Account Context

    Raises:
        - 401 Unauthorized: Missing, invalid or expired token
    """
    use_case = LoadContextUseCase(uow, role_authority)
    result = await use_case.execute(identity["external_id"])

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.put("/me/context", status_code=status.HTTP_200_OK, response_model=SwitchAccountResponse)
async def switch_context(
    request: SwitchContextRequest,
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
):
    """
    Switch Current Account

    Raises:
        - 403 Forbidden: NOT_A_MEMBER (context left unchanged)
        - 404 Not Found: ACCOUNT_NOT_FOUND
    """
    use_case = SwitchAccountUseCase(uow)
    result = await use_case.execute(identity["external_id"], request.account_id, request.context_data)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
