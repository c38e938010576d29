"""
Sync User Use Case

Creates the local User row the first time an external identity is seen.
"""

import logging
from typing import Optional

from tenant_authz.app.services.identity_provider import IIdentityProvider
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.domain.base import utcnow
from tenant_authz.domain.entities import GlobalRole, User
from tenant_authz.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class SyncUserUseCase:
    def __init__(self, uow: UnitOfWork, identity_provider: Optional[IIdentityProvider] = None):
        self.uow = uow
        self.identity_provider = identity_provider

    async def execute(self, external_id: str, email: Optional[str] = None) -> Result[User]:
        if not external_id:
            return Return.err(Error("UNAUTHORIZED", "Missing identity"))

        user = await self.uow.users.get_by_external_id(external_id)
        if user is not None:
            return Return.ok(user)

        if email is None and self.identity_provider is not None:
            try:
                email = await self.identity_provider.get_primary_email(external_id)
            except Exception as exc:
                logger.warning(f"Could not fetch email for {external_id}: {exc}")

        logger.info(f"Creating user record for identity {external_id}")
        # A concurrent first request may have inserted the row since the lookup
        user = await self.uow.users.create_if_absent(
            User(
                external_id=external_id,
                email=email or f"{external_id}@unknown.invalid",
                global_role=GlobalRole.user,
                last_login_at=utcnow(),
            )
        )
        return Return.ok(user)
