from uuid import UUID

from tenant_authz.app.errors import NotFoundError
from tenant_authz.app.services.project_permissions import ProjectPermissionEngine
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.domain.entities import Project

from .dtos import ProjectResponse, build_project_response


class ProjectUseCase:
    """Shared lookups for project use cases"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.permissions = ProjectPermissionEngine(uow)

    async def _get_project(self, project_id: UUID) -> Project:
        # Projects of other tenants are invisible, so they surface as not found
        project = await self.uow.projects.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project not found", code="PROJECT_NOT_FOUND")
        return project

    async def _build_response(self, project: Project) -> ProjectResponse:
        permissions = await self.permissions.list_by_project(project.id)
        sessions_count = await self.uow.project_sessions.count_by_project(project.id)
        return build_project_response(project, permissions, sessions_count)
