from abc import ABC, abstractmethod
from uuid import UUID


class IProjectSessionRepository(ABC):
    """ProjectSession repository interface - application layer"""

    @abstractmethod
    async def count_by_project(self, project_id: UUID) -> int:
        """Number of sessions of a project"""
        pass

    @abstractmethod
    async def delete_by_project(self, project_id: UUID) -> None:
        """Delete all sessions of a project"""
        pass
