"""
Change Global Role Use Case

Promotes or demotes a user's global role.
"""

from tenant_authz.app.errors import AppError
from tenant_authz.app.services.role_authority import RoleAuthority
from tenant_authz.libs.result import Result, Return

from .dtos import ChangeRoleResponse


class ChangeRoleUseCase:
    """
    Business Rules:
    - Only super_admin may assign super_admin
    - admin may assign user, support or admin
    - Anyone else is denied with INSUFFICIENT_ROLE
    - Every change is audited; audit and mirror failures never fail the change
    """

    def __init__(self, role_authority: RoleAuthority):
        self.role_authority = role_authority

    async def execute(
        self, changed_by: str, target: str, new_role: str, reason: str
    ) -> Result[ChangeRoleResponse]:
        try:
            event = await self.role_authority.change_role(target, new_role, changed_by, reason)
        except AppError as exc:
            return Return.err(exc.error)

        return Return.ok(
            ChangeRoleResponse(
                status="updated",
                external_id=target,
                old_role=event.old_role.value,
                new_role=event.new_role.value,
            )
        )
