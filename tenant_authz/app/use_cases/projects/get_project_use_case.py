"""
Get / List Project Use Cases
"""

from uuid import UUID

from tenant_authz.app.errors import AppError
from tenant_authz.app.use_cases.common import require_tenant, require_user
from tenant_authz.domain.entities import ANY_LEVEL
from tenant_authz.libs.result import Result, Return

from .base import ProjectUseCase
from .dtos import ProjectListResponse, ProjectResponse


class GetProjectUseCase(ProjectUseCase):
    """Any unexpired grant on the project allows reading it"""

    async def execute(self, external_id: str, project_id: UUID) -> Result[ProjectResponse]:
        try:
            require_tenant(self.uow)
            user = await require_user(self.uow, external_id)
            project = await self._get_project(project_id)
            await self.permissions.require(project.id, user.id, ANY_LEVEL)

            return Return.ok(await self._build_response(project))
        except AppError as exc:
            return Return.err(exc.error)


class ListProjectsUseCase(ProjectUseCase):
    """Projects of the bound account"""

    async def execute(
        self, external_id: str, limit: int = 50, offset: int = 0
    ) -> Result[ProjectListResponse]:
        try:
            require_tenant(self.uow)
            await require_user(self.uow, external_id)
            projects = await self.uow.projects.find_many(limit=limit, offset=offset)

            return Return.ok(
                ProjectListResponse(
                    projects=[await self._build_response(p) for p in projects],
                    limit=limit,
                    offset=offset,
                )
            )
        except AppError as exc:
            return Return.err(exc.error)
