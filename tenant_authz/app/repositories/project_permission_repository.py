from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from tenant_authz.domain.entities import PermissionLevel, ProjectPermission


class IProjectPermissionRepository(ABC):
    """ProjectPermission repository interface - application layer"""

    @abstractmethod
    async def get(self, project_id: UUID, user_id: UUID) -> Optional[ProjectPermission]:
        """Get the grant for (project_id, user_id), expired or not"""
        pass

    @abstractmethod
    async def upsert(
        self,
        project_id: UUID,
        user_id: UUID,
        level: PermissionLevel,
        granted_by: UUID,
        expires_at: Optional[datetime] = None,
    ) -> ProjectPermission:
        """Insert the grant or overwrite the existing one for the same pair"""
        pass

    @abstractmethod
    async def delete(self, project_id: UUID, user_id: UUID) -> None:
        """Delete the grant for (project_id, user_id) if present"""
        pass

    @abstractmethod
    async def get_by_project(self, project_id: UUID) -> List[ProjectPermission]:
        """All grants on a project"""
        pass

    @abstractmethod
    async def get_by_user(self, user_id: UUID) -> List[ProjectPermission]:
        """All grants held by a user"""
        pass

    @abstractmethod
    async def delete_by_project(self, project_id: UUID) -> None:
        """Delete every grant on a project"""
        pass
