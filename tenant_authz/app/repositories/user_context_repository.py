from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from uuid import UUID

from tenant_authz.domain.entities import UserContext


class IUserContextRepository(ABC):
    """UserContext repository interface - application layer"""

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> Optional[UserContext]:
        """Get the context row of a user"""
        pass

    @abstractmethod
    async def upsert(
        self,
        user_id: UUID,
        account_id: UUID,
        extra_data: Optional[Dict[str, Any]] = None,
    ) -> UserContext:
        """
        Create the context row, or switch it to account_id.

        On update, last_switched_at is bumped and extra_data is shallow-merged
        into the existing context_data.
        """
        pass

    @abstractmethod
    async def delete(self, user_id: UUID) -> None:
        """Delete the context row of a user"""
        pass
