"""
Load Context Use Case

Loads the caller's user record, current account context and the
accounts they can switch to.
"""

from tenant_authz.app.errors import AppError
from tenant_authz.app.services.role_authority import RoleAuthority
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.app.use_cases.common import require_user
from tenant_authz.libs.result import Result, Return

from .dtos import AvailableAccountInfo, CurrentContextInfo, LoadContextResponse, UserInfo


class LoadContextUseCase:
    """
    Business Rules:
    - The caller must have a User row
    - Global role comes from the role authority, not the users table
    - Available accounts are the accounts the caller holds a membership in
    """

    def __init__(self, uow: UnitOfWork, role_authority: RoleAuthority):
        self.uow = uow
        self.role_authority = role_authority

    async def execute(self, external_id: str) -> Result[LoadContextResponse]:
        try:
            user = await require_user(self.uow, external_id)
        except AppError as exc:
            return Return.err(exc.error)

        role = await self.role_authority.get_role(external_id)

        memberships = await self.uow.memberships.get_by_user_id(user.id)
        accounts = await self.uow.accounts.get_by_ids([m.account_id for m in memberships])
        accounts_by_id = {account.id: account for account in accounts}
        roles_by_account = {m.account_id: m.role.value for m in memberships}

        available = [
            AvailableAccountInfo(
                id=str(account.id),
                name=account.name,
                plan=account.plan,
                status=account.status.value,
                role=roles_by_account[account.id],
            )
            for account in (accounts_by_id.get(m.account_id) for m in memberships)
            if account is not None
        ]

        current = None
        context = await self.uow.user_contexts.get_by_user_id(user.id)
        if context is not None:
            account = accounts_by_id.get(context.current_account_id)
            current = CurrentContextInfo(
                account_id=str(context.current_account_id),
                account_name=account.name if account else None,
                account_plan=account.plan if account else None,
                role=roles_by_account.get(context.current_account_id),
                last_switched_at=context.last_switched_at.isoformat(),
                context_data=context.context_data or {},
            )

        return Return.ok(
            LoadContextResponse(
                user=UserInfo(
                    id=str(user.id),
                    external_id=user.external_id,
                    email=user.email,
                    global_role=role.value,
                ),
                current_context=current,
                available_accounts=available,
            )
        )
