"""
Update Project Use Case
"""

from typing import Optional
from uuid import UUID

from tenant_authz.app.errors import AppError
from tenant_authz.app.use_cases.common import require_tenant, require_user
from tenant_authz.domain.entities import WRITABLE_LEVELS, ProjectStatus
from tenant_authz.libs.result import Error, Result, Return

from .base import ProjectUseCase
from .dtos import ProjectResponse


class UpdateProjectUseCase(ProjectUseCase):
    """read_write or full_access is required to change project fields"""

    async def execute(
        self,
        external_id: str,
        project_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Result[ProjectResponse]:
        try:
            require_tenant(self.uow)
            user = await require_user(self.uow, external_id)
            project = await self._get_project(project_id)
            await self.permissions.require(project.id, user.id, WRITABLE_LEVELS)

            if status is not None:
                try:
                    project.status = ProjectStatus(status)
                except ValueError:
                    return Return.err(
                        Error("VALIDATION_ERROR", f"Invalid project status: {status}")
                    )
            if name is not None:
                project.name = name
            if description is not None:
                project.description = description

            project = await self.uow.projects.update(project)
            return Return.ok(await self._build_response(project))
        except AppError as exc:
            return Return.err(exc.error)
