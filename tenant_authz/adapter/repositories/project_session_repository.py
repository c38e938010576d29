from uuid import UUID

from sqlmodel import delete, func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_authz.app.repositories.project_session_repository import (
    IProjectSessionRepository,
)
from tenant_authz.domain.entities import ProjectSession


class ProjectSessionRepository(IProjectSessionRepository):
    """ProjectSession repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def count_by_project(self, project_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(ProjectSession)
            .where(ProjectSession.project_id == project_id)
        )
        result = await self.session.exec(stmt)
        return int(result.one())

    async def delete_by_project(self, project_id: UUID) -> None:
        stmt = delete(ProjectSession).where(ProjectSession.project_id == project_id)
        await self.session.execute(stmt)
