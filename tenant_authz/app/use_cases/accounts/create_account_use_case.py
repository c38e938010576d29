"""
Create Account Use Case

Opens a new account with the caller as its owner.
"""

from typing import Optional
from uuid import UUID

from tenant_authz.app.errors import AppError
from tenant_authz.app.services.membership_store import MembershipStore
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.app.use_cases.common import require_user
from tenant_authz.domain.entities import Account, MembershipRole
from tenant_authz.libs.result import Result, Return

from .dtos import AccountResponse


class CreateAccountUseCase:
    """
    Business Rules:
    - The creator becomes owner of the new account
    - A user with no current context is switched into the new account
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.memberships = MembershipStore(uow)

    async def execute(
        self,
        external_id: str,
        name: str,
        plan: str = "Free",
        parent_org_id: Optional[UUID] = None,
    ) -> Result[AccountResponse]:
        try:
            user = await require_user(self.uow, external_id)

            account = await self.uow.accounts.create(
                Account(name=name, plan=plan, parent_org_id=parent_org_id, owner_user_id=user.id)
            )
            await self.memberships.create(account.id, user.id, MembershipRole.owner)

            if await self.memberships.current_context(user.id) is None:
                await self.memberships.switch_context(user.id, account.id)
        except AppError as exc:
            return Return.err(exc.error)

        return Return.ok(
            AccountResponse(
                id=str(account.id),
                name=account.name,
                plan=account.plan,
                status=account.status.value,
                role=MembershipRole.owner.value,
            )
        )
