"""
Project Permission Use Cases

Grant, revoke and list per-project permissions.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from tenant_authz.app.errors import AppError
from tenant_authz.app.use_cases.common import require_tenant, require_user
from tenant_authz.domain.entities import ANY_LEVEL
from tenant_authz.libs.result import Error, Result, Return

from .base import ProjectUseCase
from .dtos import PermissionResponse, RevokePermissionResponse


class GrantPermissionUseCase(ProjectUseCase):
    """
    Business Rules:
    - Only full_access holders may grant
    - Re-granting overwrites the existing grant (level, grantor, expiry)
    """

    async def execute(
        self,
        external_id: str,
        project_id: UUID,
        target_user_id: UUID,
        level: str,
        expires_at: Optional[datetime] = None,
    ) -> Result[PermissionResponse]:
        try:
            require_tenant(self.uow)
            granter = await require_user(self.uow, external_id)
            project = await self._get_project(project_id)
            await self.permissions.require_full_access(project.id, granter.id)

            target = await self.uow.users.get_by_id(target_user_id)
            if target is None:
                return Return.err(Error("TARGET_USER_NOT_FOUND", "User not found"))

            permission = await self.permissions.grant(
                project.id, target.id, level, granter.id, expires_at
            )
            return Return.ok(PermissionResponse.from_entity(permission))
        except AppError as exc:
            return Return.err(exc.error)


class RevokePermissionUseCase(ProjectUseCase):
    """Only full_access holders may revoke; revoking nothing succeeds"""

    async def execute(
        self, external_id: str, project_id: UUID, target_user_id: UUID
    ) -> Result[RevokePermissionResponse]:
        try:
            require_tenant(self.uow)
            remover = await require_user(self.uow, external_id)
            project = await self._get_project(project_id)
            await self.permissions.require_full_access(project.id, remover.id)

            await self.permissions.revoke(project.id, target_user_id)
        except AppError as exc:
            return Return.err(exc.error)

        return Return.ok(RevokePermissionResponse(status="revoked"))


class ListPermissionsUseCase(ProjectUseCase):
    async def execute(
        self, external_id: str, project_id: UUID
    ) -> Result[List[PermissionResponse]]:
        try:
            require_tenant(self.uow)
            user = await require_user(self.uow, external_id)
            project = await self._get_project(project_id)
            await self.permissions.require(project.id, user.id, ANY_LEVEL)

            permissions = await self.permissions.list_by_project(project.id)
            return Return.ok([PermissionResponse.from_entity(p) for p in permissions])
        except AppError as exc:
            return Return.err(exc.error)
