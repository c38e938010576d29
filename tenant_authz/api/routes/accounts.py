from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from tenant_authz.api.error import to_http_error
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.app.use_cases.accounts import (
    AccountResponse,
    AddMemberUseCase,
    CreateAccountUseCase,
    MembershipResponse,
    RemoveMemberResponse,
    RemoveMemberUseCase,
)
from tenant_authz.depends import get_current_identity, get_unit_of_work

router = APIRouter(prefix="/accounts", tags=["Accounts"])


class CreateAccountRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    plan: str = Field("Free", max_length=50)
    parent_org_id: Optional[UUID] = None


class AddMemberRequest(BaseModel):
    user_id: UUID = Field(..., description="Internal id of the user to add")
    role: str = Field(..., description="Role to assign (owner/admin/member/viewer)")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=AccountResponse)
async def create_account(
    request: CreateAccountRequest,
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
):
    """Create an account owned by the caller"""
    use_case = CreateAccountUseCase(uow)
    result = await use_case.execute(
        identity["external_id"], request.name, request.plan, request.parent_org_id
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post(
    "/{account_id}/members",
    status_code=status.HTTP_201_CREATED,
    response_model=MembershipResponse,
)
async def add_member(
    account_id: UUID,
    request: AddMemberRequest,
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
):
    """
    Add a user to an account

    Raises:
        - 400 Bad Request: INVALID_ROLE
        - 403 Forbidden: NOT_A_MEMBER, INSUFFICIENT_ROLE
        - 404 Not Found: TARGET_USER_NOT_FOUND
        - 409 Conflict: ALREADY_MEMBER
    """
    use_case = AddMemberUseCase(uow)
    result = await use_case.execute(
        identity["external_id"], account_id, request.user_id, request.role
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.delete(
    "/{account_id}/members/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=RemoveMemberResponse,
)
async def remove_member(
    account_id: UUID,
    user_id: UUID,
    identity: dict = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work, scope="function"),
):
    """
    Remove a user from an account

    Raises:
        - 403 Forbidden: NOT_A_MEMBER, INSUFFICIENT_ROLE
        - 404 Not Found: MEMBERSHIP_NOT_FOUND
        - 409 Conflict: CANNOT_REMOVE_LAST_OWNER
    """
    use_case = RemoveMemberUseCase(uow)
    result = await use_case.execute(identity["external_id"], account_id, user_id)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
