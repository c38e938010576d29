from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from tenant_authz.app.repositories.account_repository import IAccountRepository
from tenant_authz.app.repositories.membership_repository import IMembershipRepository
from tenant_authz.app.repositories.project_permission_repository import (
    IProjectPermissionRepository,
)
from tenant_authz.app.repositories.project_repository import IProjectRepository
from tenant_authz.app.repositories.project_session_repository import (
    IProjectSessionRepository,
)
from tenant_authz.app.repositories.user_context_repository import IUserContextRepository
from tenant_authz.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """
    Abstract UnitOfWork - repository access bound to one request transaction.

    Commit and rollback belong to the request transaction that owns the
    session; use cases only read and write through the repositories.
    """

    users: IUserRepository
    accounts: IAccountRepository
    memberships: IMembershipRepository
    user_contexts: IUserContextRepository
    projects: IProjectRepository
    project_sessions: IProjectSessionRepository
    project_permissions: IProjectPermissionRepository

    @property
    @abstractmethod
    def tenant_id(self) -> Optional[UUID]:
        """Account id bound to the session, if any"""
        pass

    @abstractmethod
    async def bind_tenant(self, account_id: UUID) -> None:
        """Set the session-scoped tenant variable read by isolation policies"""
        pass

    @abstractmethod
    async def flush(self) -> None:
        pass
