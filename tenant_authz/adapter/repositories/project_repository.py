from typing import List, Optional
from uuid import UUID

from sqlmodel import col, delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_authz.app.repositories.project_repository import IProjectRepository
from tenant_authz.domain.base import utcnow
from tenant_authz.domain.entities import Project

# Key under AsyncSession.info holding the account id bound by the tenant binder
TENANT_INFO_KEY = "tenant_account_id"


class ProjectRepository(IProjectRepository):
    """
    Project repository implementation using SQLModel.

    Every read is filtered by the tenant bound to the session, the same
    predicate the row-level policy applies on PostgreSQL.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def _scoped(self, stmt):
        tenant_id = self.session.info.get(TENANT_INFO_KEY)
        if tenant_id is not None:
            stmt = stmt.where(Project.account_id == tenant_id)
        return stmt

    async def get_by_id(self, project_id: UUID) -> Optional[Project]:
        """Get project by ID"""
        stmt = self._scoped(select(Project).where(Project.id == project_id))
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def find_many(self, limit: int = 50, offset: int = 0) -> List[Project]:
        stmt = self._scoped(select(Project))
        stmt = stmt.order_by(col(Project.created_at).desc()).limit(limit).offset(offset)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, project: Project) -> Project:
        """Create a new project"""
        self.session.add(project)
        await self.session.flush()
        await self.session.refresh(project)
        return project

    async def update(self, project: Project) -> Project:
        """Update existing project"""
        project.updated_at = utcnow()
        self.session.add(project)
        await self.session.flush()
        await self.session.refresh(project)
        return project

    async def delete(self, project_id: UUID) -> None:
        stmt = delete(Project).where(Project.id == project_id)
        tenant_id = self.session.info.get(TENANT_INFO_KEY)
        if tenant_id is not None:
            stmt = stmt.where(Project.account_id == tenant_id)
        await self.session.execute(stmt)
