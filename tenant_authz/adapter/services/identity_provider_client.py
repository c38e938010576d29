"""
Identity Provider HTTP Client

Talks to a Clerk-style backend API: users carry a private_metadata object
that only backend callers can read or write.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from tenant_authz.app.errors import InternalError, NotFoundError
from tenant_authz.app.services.identity_provider import IIdentityProvider

logger = logging.getLogger(__name__)


class HttpIdentityProvider(IIdentityProvider):
    def __init__(
        self,
        base_url: str,
        secret_key: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {secret_key}"},
            timeout=timeout,
            transport=transport,
        )

    async def _get_user(self, external_id: str) -> Dict[str, Any]:
        response = await self._client.get(f"/users/{external_id}")
        if response.status_code == 404:
            raise NotFoundError(f"Identity {external_id} not found", code="TARGET_USER_NOT_FOUND")
        if response.is_error:
            raise InternalError(f"Identity provider returned {response.status_code}")
        return response.json()

    async def get_private_metadata(self, external_id: str) -> Dict[str, Any]:
        user = await self._get_user(external_id)
        return user.get("private_metadata") or {}

    async def update_private_metadata(self, external_id: str, metadata: Dict[str, Any]) -> None:
        response = await self._client.patch(
            f"/users/{external_id}/metadata",
            json={"private_metadata": metadata},
        )
        if response.status_code == 404:
            raise NotFoundError(f"Identity {external_id} not found", code="TARGET_USER_NOT_FOUND")
        if response.is_error:
            raise InternalError(f"Identity provider returned {response.status_code}")
        logger.debug(f"Updated private metadata for {external_id}")

    async def get_primary_email(self, external_id: str) -> Optional[str]:
        user = await self._get_user(external_id)
        primary_id = user.get("primary_email_address_id")
        addresses = user.get("email_addresses") or []
        for address in addresses:
            if address.get("id") == primary_id:
                return address.get("email_address")
        if addresses:
            return addresses[0].get("email_address")
        return None

    async def aclose(self) -> None:
        await self._client.aclose()
