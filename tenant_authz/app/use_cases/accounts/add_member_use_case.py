"""
Add Member Use Case

Adds an existing user to an account with a role.
"""

from uuid import UUID

from tenant_authz.app.errors import AppError
from tenant_authz.app.services.membership_store import MembershipStore
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.app.use_cases.common import require_user
from tenant_authz.domain.entities import MembershipRole
from tenant_authz.libs.result import Error, Result, Return

from .dtos import MembershipResponse

MANAGER_ROLES = (MembershipRole.owner, MembershipRole.admin)


class AddMemberUseCase:
    """
    Business Rules:
    - Only owners and admins of the account may add members
    - Only owners may add owners
    - (account, user) memberships are unique
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.memberships = MembershipStore(uow)

    async def execute(
        self, external_id: str, account_id: UUID, target_user_id: UUID, role: str
    ) -> Result[MembershipResponse]:
        try:
            membership_role = MembershipRole(role)
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_ROLE",
                    f"Invalid role: {role}. Must be one of: owner, admin, member, viewer",
                )
            )

        try:
            requester = await require_user(self.uow, external_id)
            requester_membership = await self.memberships.find_by_user_and_account(
                requester.id, account_id
            )
            if requester_membership is None:
                return Return.err(Error("NOT_A_MEMBER", "You are not a member of this account"))

            if requester_membership.role not in MANAGER_ROLES:
                return Return.err(
                    Error("INSUFFICIENT_ROLE", "Only owners and admins can add members")
                )
            if (
                membership_role == MembershipRole.owner
                and requester_membership.role != MembershipRole.owner
            ):
                return Return.err(Error("INSUFFICIENT_ROLE", "Only owners can add owners"))

            target = await self.uow.users.get_by_id(target_user_id)
            if target is None:
                return Return.err(Error("TARGET_USER_NOT_FOUND", "User not found"))

            membership = await self.memberships.create(account_id, target.id, membership_role)
        except AppError as exc:
            return Return.err(exc.error)

        return Return.ok(
            MembershipResponse(
                account_id=str(membership.account_id),
                user_id=str(membership.user_id),
                role=membership.role.value,
            )
        )
