from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from tenant_authz.domain.entities import Project


class IProjectRepository(ABC):
    """
    Project repository interface - application layer

    Implementations are tenant-scoped: once a tenant is bound to the
    session, rows from other accounts are invisible.
    """

    @abstractmethod
    async def get_by_id(self, project_id: UUID) -> Optional[Project]:
        """Get project by ID"""
        pass

    @abstractmethod
    async def find_many(self, limit: int = 50, offset: int = 0) -> List[Project]:
        """List visible projects, newest first"""
        pass

    @abstractmethod
    async def create(self, project: Project) -> Project:
        """Create a new project"""
        pass

    @abstractmethod
    async def update(self, project: Project) -> Project:
        """Update existing project"""
        pass

    @abstractmethod
    async def delete(self, project_id: UUID) -> None:
        """Delete the project row"""
        pass
