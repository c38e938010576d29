"""
Switch Account Use Case

Changes the account the caller is currently acting in.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from tenant_authz.app.errors import AppError
from tenant_authz.app.services.membership_store import MembershipStore
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.app.use_cases.common import require_user
from tenant_authz.libs.result import Error, Result, Return

from .dtos import SwitchAccountResponse


class SwitchAccountUseCase:
    """
    Business Rules:
    - The target account must exist
    - The caller must hold a membership in it; otherwise the existing
      context is left untouched
    - extra_data is shallow-merged into the stored context payload
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.memberships = MembershipStore(uow)

    async def execute(
        self,
        external_id: str,
        account_id: UUID,
        extra_data: Optional[Dict[str, Any]] = None,
    ) -> Result[SwitchAccountResponse]:
        try:
            user = await require_user(self.uow, external_id)

            account = await self.uow.accounts.get_by_id(account_id)
            if account is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            previous = await self.memberships.current_context(user.id)
            previous_account_id = previous.current_account_id if previous else None

            context = await self.memberships.switch_context(user.id, account_id, extra_data)
            membership = await self.memberships.find_by_user_and_account(user.id, account_id)
        except AppError as exc:
            return Return.err(exc.error)

        return Return.ok(
            SwitchAccountResponse(
                account_id=str(account.id),
                account_name=account.name,
                role=membership.role.value,
                last_switched_at=context.last_switched_at.isoformat(),
                context_data=context.context_data or {},
                previous_account_id=str(previous_account_id) if previous_account_id else None,
            )
        )
