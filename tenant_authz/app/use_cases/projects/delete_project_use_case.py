"""
Delete Project Use Case
"""

import logging
from uuid import UUID

from tenant_authz.app.errors import AppError
from tenant_authz.app.use_cases.common import require_tenant, require_user
from tenant_authz.libs.result import Result, Return

from .base import ProjectUseCase
from .dtos import DeleteProjectResponse

logger = logging.getLogger(__name__)


class DeleteProjectUseCase(ProjectUseCase):
    """
    Business Rules:
    - Only full_access holders may delete
    - Permissions go first, then sessions, then the project row
    """

    async def execute(self, external_id: str, project_id: UUID) -> Result[DeleteProjectResponse]:
        try:
            require_tenant(self.uow)
            user = await require_user(self.uow, external_id)
            project = await self._get_project(project_id)
            await self.permissions.require_full_access(project.id, user.id)

            await self.permissions.delete_by_project(project.id)
            await self.uow.project_sessions.delete_by_project(project.id)
            await self.uow.projects.delete(project.id)
        except AppError as exc:
            return Return.err(exc.error)

        logger.info(f"Project {project_id} deleted by {user.id}")
        return Return.ok(DeleteProjectResponse(status="deleted"))
