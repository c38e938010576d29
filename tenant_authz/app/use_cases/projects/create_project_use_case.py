"""
Create Project Use Case
"""

from typing import Optional

from tenant_authz.app.errors import AppError
from tenant_authz.app.use_cases.common import require_tenant, require_user
from tenant_authz.domain.entities import Project, ProjectStatus
from tenant_authz.libs.result import Error, Result, Return

from .base import ProjectUseCase
from .dtos import ProjectResponse


class CreateProjectUseCase(ProjectUseCase):
    """
    Business Rules:
    - The project belongs to the account bound to the transaction
    - The creator is granted full_access in the same transaction, so no
      committed state has a project without an administrator
    """

    async def execute(
        self,
        external_id: str,
        name: str,
        description: Optional[str] = None,
        status: str = ProjectStatus.active.value,
    ) -> Result[ProjectResponse]:
        try:
            project_status = ProjectStatus(status)
        except ValueError:
            return Return.err(Error("VALIDATION_ERROR", f"Invalid project status: {status}"))

        try:
            account_id = require_tenant(self.uow)
            user = await require_user(self.uow, external_id)

            project = await self.uow.projects.create(
                Project(
                    account_id=account_id,
                    name=name,
                    description=description,
                    status=project_status,
                    created_by=user.id,
                )
            )
            await self.permissions.grant_creator_access(project.id, user.id)

            return Return.ok(await self._build_response(project))
        except AppError as exc:
            return Return.err(exc.error)
