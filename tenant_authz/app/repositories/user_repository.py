from abc import ABC, abstractmethod
from typing import Dict, Optional
from uuid import UUID

from tenant_authz.domain.entities import GlobalRole, User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_external_id(self, external_id: str) -> Optional[User]:
        """Get user by identity provider subject"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def create_if_absent(self, user: User) -> User:
        """Create the user, or return the row already stored under its external id"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def update_role(self, external_id: str, role: GlobalRole) -> Optional[User]:
        """Set the global role of the user with this external id"""
        pass

    @abstractmethod
    async def count_by_role(self) -> Dict[GlobalRole, int]:
        """Number of users holding each global role"""
        pass
