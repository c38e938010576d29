from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_authz.app.repositories.project_permission_repository import (
    IProjectPermissionRepository,
)
from tenant_authz.domain.base import utcnow
from tenant_authz.domain.entities import PermissionLevel, ProjectPermission

from .dialects import CONFLICT_INSERTS


class ProjectPermissionRepository(IProjectPermissionRepository):
    """ProjectPermission repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, project_id: UUID, user_id: UUID) -> Optional[ProjectPermission]:
        stmt = (
            select(ProjectPermission)
            .where(
                ProjectPermission.project_id == project_id,
                ProjectPermission.user_id == user_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def upsert(
        self,
        project_id: UUID,
        user_id: UUID,
        level: PermissionLevel,
        granted_by: UUID,
        expires_at: Optional[datetime] = None,
    ) -> ProjectPermission:
        connection = await self.session.connection()
        insert = CONFLICT_INSERTS.get(connection.dialect.name)

        if insert is None:
            return await self._upsert_by_lookup(project_id, user_id, level, granted_by, expires_at)

        stmt = insert(ProjectPermission).values(
            id=uuid4(),
            project_id=project_id,
            user_id=user_id,
            permission_level=level,
            granted_by=granted_by,
            granted_at=utcnow(),
            expires_at=expires_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["project_id", "user_id"],
            set_={
                "permission_level": stmt.excluded.permission_level,
                "granted_by": stmt.excluded.granted_by,
                "granted_at": stmt.excluded.granted_at,
                "expires_at": stmt.excluded.expires_at,
            },
        )
        await self.session.execute(stmt)
        return await self.get(project_id, user_id)

    async def _upsert_by_lookup(
        self,
        project_id: UUID,
        user_id: UUID,
        level: PermissionLevel,
        granted_by: UUID,
        expires_at: Optional[datetime],
    ) -> ProjectPermission:
        permission = await self.get(project_id, user_id)
        if permission is None:
            permission = ProjectPermission(project_id=project_id, user_id=user_id)
        permission.permission_level = level
        permission.granted_by = granted_by
        permission.granted_at = utcnow()
        permission.expires_at = expires_at

        self.session.add(permission)
        await self.session.flush()
        await self.session.refresh(permission)
        return permission

    async def delete(self, project_id: UUID, user_id: UUID) -> None:
        stmt = delete(ProjectPermission).where(
            ProjectPermission.project_id == project_id,
            ProjectPermission.user_id == user_id,
        )
        await self.session.execute(stmt)

    async def get_by_project(self, project_id: UUID) -> List[ProjectPermission]:
        stmt = (
            select(ProjectPermission)
            .where(ProjectPermission.project_id == project_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_user(self, user_id: UUID) -> List[ProjectPermission]:
        stmt = (
            select(ProjectPermission)
            .where(ProjectPermission.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def delete_by_project(self, project_id: UUID) -> None:
        stmt = delete(ProjectPermission).where(ProjectPermission.project_id == project_id)
        await self.session.execute(stmt)
