from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from tenant_authz.domain.entities import Membership


class IMembershipRepository(ABC):
    """Membership repository interface - application layer"""

    @abstractmethod
    async def create(self, membership: Membership) -> Optional[Membership]:
        """Create a new membership; None when the (user, account) pair already exists"""
        pass

    @abstractmethod
    async def get_by_id(self, membership_id: UUID) -> Optional[Membership]:
        """Get membership by ID"""
        pass

    @abstractmethod
    async def get_by_user_and_account(
        self, user_id: UUID, account_id: UUID
    ) -> Optional[Membership]:
        """Get membership by user and account"""
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> List[Membership]:
        """Get all memberships for a user"""
        pass

    @abstractmethod
    async def get_by_account_id(self, account_id: UUID) -> List[Membership]:
        """Get all memberships for an account"""
        pass

    @abstractmethod
    async def update(self, membership: Membership) -> Membership:
        """Update existing membership"""
        pass

    @abstractmethod
    async def delete(self, membership: Membership) -> None:
        """Delete a membership"""
        pass
