import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import text
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_authz.adapter.repositories.account_repository import AccountRepository
from tenant_authz.adapter.repositories.membership_repository import MembershipRepository
from tenant_authz.adapter.repositories.project_permission_repository import (
    ProjectPermissionRepository,
)
from tenant_authz.adapter.repositories.project_repository import (
    TENANT_INFO_KEY,
    ProjectRepository,
)
from tenant_authz.adapter.repositories.project_session_repository import (
    ProjectSessionRepository,
)
from tenant_authz.adapter.repositories.user_context_repository import UserContextRepository
from tenant_authz.adapter.repositories.user_repository import UserRepository
from tenant_authz.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

DEFAULT_TENANT_SETTING_KEY = "app.account_id"


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession, tenant_setting_key: str = DEFAULT_TENANT_SETTING_KEY):
        self.session = session
        self.tenant_setting_key = tenant_setting_key

        self.users = UserRepository(session)
        self.accounts = AccountRepository(session)
        self.memberships = MembershipRepository(session)
        self.user_contexts = UserContextRepository(session)
        self.projects = ProjectRepository(session)
        self.project_sessions = ProjectSessionRepository(session)
        self.project_permissions = ProjectPermissionRepository(session)

    @property
    def tenant_id(self) -> Optional[UUID]:
        return self.session.info.get(TENANT_INFO_KEY)

    async def bind_tenant(self, account_id: UUID) -> None:
        connection = await self.session.connection()
        if connection.dialect.name == "postgresql":
            # is_local=true: the setting dies with the transaction
            await self.session.execute(
                text("SELECT set_config(:key, :value, true)"),
                {"key": self.tenant_setting_key, "value": str(account_id)},
            )
        self.session.info[TENANT_INFO_KEY] = account_id
        logger.debug(f"Tenant context bound: {account_id}")

    async def flush(self) -> None:
        await self.session.flush()
