"""
Membership Store

Who belongs to which account, and which account each user is currently
acting in.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from tenant_authz.app.errors import ConflictError, ForbiddenError, NotFoundError
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.domain.entities import Membership, MembershipRole, UserContext

logger = logging.getLogger(__name__)


class MembershipStore:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def create(self, account_id: UUID, user_id: UUID, role: MembershipRole) -> Membership:
        existing = await self.uow.memberships.get_by_user_and_account(user_id, account_id)
        if existing is not None:
            raise ConflictError("User is already a member of this account", code="ALREADY_MEMBER")

        membership = await self.uow.memberships.create(
            Membership(account_id=account_id, user_id=user_id, role=role)
        )
        if membership is None:
            # Inserted by a concurrent request after the check above
            raise ConflictError("User is already a member of this account", code="ALREADY_MEMBER")
        return membership

    async def find_by_user_and_account(
        self, user_id: UUID, account_id: UUID
    ) -> Optional[Membership]:
        return await self.uow.memberships.get_by_user_and_account(user_id, account_id)

    async def find_by_user_id(self, user_id: UUID) -> List[Membership]:
        return await self.uow.memberships.get_by_user_id(user_id)

    async def find_by_account_id(self, account_id: UUID) -> List[Membership]:
        return await self.uow.memberships.get_by_account_id(account_id)

    async def update_role(self, user_id: UUID, account_id: UUID, role: MembershipRole) -> Membership:
        membership = await self.uow.memberships.get_by_user_and_account(user_id, account_id)
        if membership is None:
            raise NotFoundError("Membership not found", code="MEMBERSHIP_NOT_FOUND")
        membership.role = role
        return await self.uow.memberships.update(membership)

    async def delete(self, user_id: UUID, account_id: UUID) -> None:
        membership = await self.uow.memberships.get_by_user_and_account(user_id, account_id)
        if membership is None:
            raise NotFoundError("Membership not found", code="MEMBERSHIP_NOT_FOUND")
        await self.uow.memberships.delete(membership)

        # The current context must point at an account the user belongs to
        context = await self.uow.user_contexts.get_by_user_id(user_id)
        if context is not None and context.current_account_id == account_id:
            await self.uow.user_contexts.delete(user_id)

    async def current_context(self, user_id: UUID) -> Optional[UserContext]:
        return await self.uow.user_contexts.get_by_user_id(user_id)

    async def switch_context(
        self,
        user_id: UUID,
        account_id: UUID,
        extra_data: Optional[Dict[str, Any]] = None,
    ) -> UserContext:
        """
        Make account_id the user's current account.

        Membership is re-validated first; without it the existing context is
        left untouched and ForbiddenError is raised.
        """
        membership = await self.uow.memberships.get_by_user_and_account(user_id, account_id)
        if membership is None:
            raise ForbiddenError(
                "User is not a member of the target account", code="NOT_A_MEMBER"
            )

        context = await self.uow.user_contexts.upsert(user_id, account_id, extra_data)
        logger.info(f"User {user_id} switched context to account {account_id}")
        return context
