"""
Bootstrap Super Users Use Case

Local deployments only: make sure the configured developer accounts exist
and hold super_admin.
"""

import logging
from typing import Iterable

from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.domain.entities import GlobalRole, User
from tenant_authz.domain.environment import EnvironmentSettings
from tenant_authz.libs.result import Result, Return

logger = logging.getLogger(__name__)


def local_external_id(email: str) -> str:
    return "local_" + email.replace("@", "_").replace(".", "_")


class BootstrapSuperUsersUseCase:
    def __init__(self, uow: UnitOfWork, settings: EnvironmentSettings):
        self.uow = uow
        self.settings = settings

    async def execute(self, emails: Iterable[str]) -> Result[list]:
        if not self.settings.is_local:
            return Return.ok([])

        bootstrapped = []
        for email in emails:
            try:
                user = await self.uow.users.get_by_email(email)
                if user is None:
                    await self.uow.users.create(
                        User(
                            external_id=local_external_id(email),
                            email=email,
                            global_role=GlobalRole.super_admin,
                        )
                    )
                    logger.info(f"Created local super user: {email}")
                elif user.global_role != GlobalRole.super_admin:
                    user.global_role = GlobalRole.super_admin
                    await self.uow.users.update(user)
                    logger.info(f"Promoted local user to super admin: {email}")
                bootstrapped.append(email)
            except Exception as exc:
                logger.error(f"Failed to bootstrap super user {email}: {exc}")

        return Return.ok(bootstrapped)
