from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from tenant_authz.domain.entities import Account


class IAccountRepository(ABC):
    """Account repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, account_id: UUID) -> Optional[Account]:
        """Get account by ID"""
        pass

    @abstractmethod
    async def get_by_ids(self, account_ids: List[UUID]) -> List[Account]:
        """Get several accounts at once"""
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """Create a new account"""
        pass
