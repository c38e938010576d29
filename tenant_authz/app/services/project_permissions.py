"""
Project Permission Engine

The only writer of project_permissions. Caller authorization for grant and
revoke is the calling service's job; the engine owns the upsert and the
expiry-aware read path.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Union
from uuid import UUID

from tenant_authz.app.errors import ForbiddenError, ValidationError
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.domain.base import to_naive_utc, utcnow
from tenant_authz.domain.entities import (
    FULL_ACCESS_ONLY,
    PermissionLevel,
    ProjectPermission,
)

logger = logging.getLogger(__name__)


def parse_level(value: Union[str, PermissionLevel]) -> PermissionLevel:
    try:
        return PermissionLevel(value)
    except ValueError:
        raise ValidationError(
            f"Invalid permission level: {value}. "
            "Must be one of: read, read_notes, read_write, full_access",
            code="INVALID_PERMISSION_LEVEL",
        )


class ProjectPermissionEngine:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def grant(
        self,
        project_id: UUID,
        user_id: UUID,
        level: Union[str, PermissionLevel],
        granted_by: UUID,
        expires_at: Optional[datetime] = None,
    ) -> ProjectPermission:
        """Grant or overwrite the permission of user_id on project_id"""
        level = parse_level(level)
        if expires_at is not None:
            expires_at = to_naive_utc(expires_at)

        permission = await self.uow.project_permissions.upsert(
            project_id, user_id, level, granted_by, expires_at
        )
        logger.info(
            f"Granted {level.value} on project {project_id} to {user_id} by {granted_by}"
        )
        return permission

    async def grant_creator_access(self, project_id: UUID, creator_id: UUID) -> ProjectPermission:
        return await self.grant(project_id, creator_id, PermissionLevel.full_access, creator_id)

    async def revoke(self, project_id: UUID, user_id: UUID) -> None:
        """Remove the grant; revoking a missing grant is a no-op"""
        await self.uow.project_permissions.delete(project_id, user_id)
        logger.info(f"Revoked permission on project {project_id} from {user_id}")

    async def get_level(
        self, project_id: UUID, user_id: UUID, now: Optional[datetime] = None
    ) -> Optional[PermissionLevel]:
        """Effective level, None when there is no grant or it has expired"""
        permission = await self.uow.project_permissions.get(project_id, user_id)
        if permission is None or permission.is_expired(now or utcnow()):
            return None
        return PermissionLevel(permission.permission_level)

    async def check(
        self,
        project_id: UUID,
        user_id: UUID,
        allowed_levels: Iterable[PermissionLevel],
        now: Optional[datetime] = None,
    ) -> bool:
        level = await self.get_level(project_id, user_id, now)
        if level is None:
            return False
        return level in list(allowed_levels)

    async def require(
        self,
        project_id: UUID,
        user_id: UUID,
        allowed_levels: Iterable[PermissionLevel],
    ) -> None:
        if not await self.check(project_id, user_id, allowed_levels):
            raise ForbiddenError()

    async def require_full_access(self, project_id: UUID, user_id: UUID) -> None:
        await self.require(project_id, user_id, FULL_ACCESS_ONLY)

    async def list_by_project(self, project_id: UUID) -> List[ProjectPermission]:
        return await self.uow.project_permissions.get_by_project(project_id)

    async def list_by_user(self, user_id: UUID) -> List[ProjectPermission]:
        return await self.uow.project_permissions.get_by_user(user_id)

    async def delete_by_project(self, project_id: UUID) -> None:
        """Drop every grant on a project; runs before the project row is deleted"""
        await self.uow.project_permissions.delete_by_project(project_id)
