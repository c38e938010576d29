from tenant_authz.app.errors import AppError
from tenant_authz.app.services.role_authority import RoleAuthority
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.domain.entities import GlobalRole
from tenant_authz.libs.result import Result, Return

from .dtos import RoleResponse, RoleStatsResponse


class GetRoleUseCase:
    """Support staff and above may look up any user's global role"""

    def __init__(self, role_authority: RoleAuthority):
        self.role_authority = role_authority

    async def execute(self, requester: str, target: str) -> Result[RoleResponse]:
        try:
            await self.role_authority.require_permission(requester, "view:all_users")
        except AppError as exc:
            return Return.err(exc.error)

        role = await self.role_authority.get_role(target)
        return Return.ok(RoleResponse(external_id=target, role=role.value))


class RoleStatsUseCase:
    def __init__(self, uow: UnitOfWork, role_authority: RoleAuthority):
        self.uow = uow
        self.role_authority = role_authority

    async def execute(self, requester: str) -> Result[RoleStatsResponse]:
        try:
            await self.role_authority.require_role(requester, GlobalRole.admin)
        except AppError as exc:
            return Return.err(exc.error)

        counts = await self.uow.users.count_by_role()
        return Return.ok(
            RoleStatsResponse(
                total_users=sum(counts.values()),
                super_admins=counts[GlobalRole.super_admin],
                admins=counts[GlobalRole.admin],
                support=counts[GlobalRole.support],
            )
        )
