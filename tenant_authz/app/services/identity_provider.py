from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class IIdentityProvider(ABC):
    """External identity provider - holds the role in managed deployments"""

    @abstractmethod
    async def get_private_metadata(self, external_id: str) -> Dict[str, Any]:
        """Private metadata of the identity (raises if the call fails)"""
        pass

    @abstractmethod
    async def update_private_metadata(self, external_id: str, metadata: Dict[str, Any]) -> None:
        """Merge metadata into the identity's private metadata"""
        pass

    @abstractmethod
    async def get_primary_email(self, external_id: str) -> Optional[str]:
        """Primary email address of the identity, if it has one"""
        pass
