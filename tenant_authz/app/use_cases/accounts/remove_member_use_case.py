"""
Remove Member Use Case

Deletes a user's membership in an account.
"""

from uuid import UUID

from tenant_authz.app.errors import AppError
from tenant_authz.app.services.membership_store import MembershipStore
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.app.use_cases.common import require_user
from tenant_authz.domain.entities import MembershipRole
from tenant_authz.libs.result import Error, Result, Return

from .dtos import RemoveMemberResponse


class RemoveMemberUseCase:
    """
    Business Rules:
    - Owners and admins may remove members; anyone may remove themselves
    - Admins cannot remove owners
    - The last owner cannot be removed
    - A context pointing at the account is cleared with the membership
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.memberships = MembershipStore(uow)

    async def execute(
        self, external_id: str, account_id: UUID, target_user_id: UUID
    ) -> Result[RemoveMemberResponse]:
        try:
            requester = await require_user(self.uow, external_id)
            requester_membership = await self.memberships.find_by_user_and_account(
                requester.id, account_id
            )
            if requester_membership is None:
                return Return.err(Error("NOT_A_MEMBER", "You are not a member of this account"))

            target_membership = await self.memberships.find_by_user_and_account(
                target_user_id, account_id
            )
            if target_membership is None:
                return Return.err(
                    Error("MEMBERSHIP_NOT_FOUND", "Target user is not a member of this account")
                )

            removing_self = requester.id == target_user_id
            if not removing_self:
                if requester_membership.role not in (MembershipRole.owner, MembershipRole.admin):
                    return Return.err(
                        Error("INSUFFICIENT_ROLE", "Only owners and admins can remove members")
                    )
                if (
                    target_membership.role == MembershipRole.owner
                    and requester_membership.role != MembershipRole.owner
                ):
                    return Return.err(Error("INSUFFICIENT_ROLE", "Admins cannot remove owners"))

            if target_membership.role == MembershipRole.owner:
                members = await self.memberships.find_by_account_id(account_id)
                owners = [m for m in members if m.role == MembershipRole.owner]
                if len(owners) <= 1:
                    return Return.err(
                        Error("CANNOT_REMOVE_LAST_OWNER", "Cannot remove the last owner")
                    )

            await self.memberships.delete(target_user_id, account_id)
        except AppError as exc:
            return Return.err(exc.error)

        return Return.ok(RemoveMemberResponse(status="removed"))
