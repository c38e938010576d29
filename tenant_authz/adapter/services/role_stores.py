import logging
from typing import Optional

from tenant_authz.app.errors import NotFoundError
from tenant_authz.app.services.identity_provider import IIdentityProvider
from tenant_authz.app.services.role_authority import RoleAuthority, RoleStore
from tenant_authz.app.services.unit_of_work import UnitOfWork
from tenant_authz.domain.base import utcnow
from tenant_authz.domain.entities import GlobalRole
from tenant_authz.domain.environment import DeploymentEnvironment, EnvironmentSettings

logger = logging.getLogger(__name__)

ROLE_METADATA_KEY = "globalRole"


class DatabaseRoleStore(RoleStore):
    """Role stored on the users table, inside the request transaction"""

    name = "database"

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def get_role(self, external_id: str) -> Optional[GlobalRole]:
        user = await self.uow.users.get_by_external_id(external_id)
        return user.global_role if user else None

    async def set_role(self, external_id: str, role: GlobalRole, changed_by: str) -> None:
        user = await self.uow.users.update_role(external_id, role)
        if user is None:
            raise NotFoundError(f"User {external_id} not found", code="TARGET_USER_NOT_FOUND")


class IdentityProviderRoleStore(RoleStore):
    """Role stored in the identity provider's private metadata"""

    name = "identity_provider"

    def __init__(self, identity_provider: IIdentityProvider):
        self.identity_provider = identity_provider

    async def get_role(self, external_id: str) -> Optional[GlobalRole]:
        metadata = await self.identity_provider.get_private_metadata(external_id)
        value = metadata.get(ROLE_METADATA_KEY)
        if value is None:
            return None
        try:
            return GlobalRole(value)
        except ValueError:
            logger.warning(f"Unknown role {value!r} in identity metadata for {external_id}")
            return None

    async def set_role(self, external_id: str, role: GlobalRole, changed_by: str) -> None:
        await self.identity_provider.update_private_metadata(
            external_id,
            {
                ROLE_METADATA_KEY: role.value,
                "lastChanged": utcnow().isoformat(),
                "changedBy": changed_by,
            },
        )


def build_role_authority(
    settings: EnvironmentSettings,
    uow: UnitOfWork,
    identity_provider: Optional[IIdentityProvider] = None,
) -> RoleAuthority:
    """
    Wire the authoritative store and the mirror for this deployment.

    Local: database is authoritative, identity provider mirrors when
    configured. Managed: identity provider is authoritative and the database
    mirrors; without a configured provider the database is used alone.
    """
    database = DatabaseRoleStore(uow)
    remote = None
    if settings.identity_provider_enabled and identity_provider is not None:
        remote = IdentityProviderRoleStore(identity_provider)

    if settings.environment == DeploymentEnvironment.managed and remote is not None:
        return RoleAuthority(settings, primary=remote, mirror=database)

    return RoleAuthority(settings, primary=database, mirror=remote)
